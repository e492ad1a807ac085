"""Core datatypes and interfaces for `nim-analyze` analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from nim_cli.shared.config import AppConfig
from nim_cli.shared.exceptions import NimAgentError
from nim_cli.shared.logging import Logger


# ----- Exceptions ---------------------------------------------------------------------------


class AnalysisError(NimAgentError):
    """Base class for analyzer failures surfaced to the CLI or tool host."""


class AnalysisConfigurationError(AnalysisError):
    """Raised when analyzer options are invalid or the tool is unknown."""


class AnalyzerHelpRequested(AnalysisError):
    """Internal control-flow exception to display analyzer-specific help."""


# ----- Data contracts -----------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisContext:
    """Container passed to analyzers with all resolved execution inputs.

    ``transactions`` holds caller-supplied records (a banking API export) and is
    ``None`` when the caller has none; ``use_mock`` asks the analyzer to
    generate synthetic data instead.
    """

    app_config: AppConfig
    logger: Logger
    transactions: Sequence[Mapping[str, Any]] | None
    use_mock: bool
    options: Mapping[str, Any]
    now: datetime


@dataclass(frozen=True)
class TableSeries:
    """Represents a tabular dataset emitted by an analyzer."""

    name: str
    columns: Sequence[str]
    rows: Sequence[Sequence[Any]]
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisResult:
    """Canonical return type from analyzers."""

    title: str
    summary: Sequence[str]
    tables: Sequence[TableSeries]
    json_payload: Mapping[str, Any]

    def is_empty(self) -> bool:
        """True when there is no tabular data and no summary content."""

        return not self.summary and not self.tables


# ----- Registry helpers ---------------------------------------------------------------------


AnalyzerCallable = Callable[[AnalysisContext], AnalysisResult]


@dataclass(frozen=True)
class AnalyzerOption:
    """Declarative description of an analyzer-specific option.

    The same declaration drives CLI flag parsing and the tool input schema.
    """

    name: str
    flags: Sequence[str]
    help: str
    type: Callable[[str], Any] | None = None
    default: Any = None
    metavar: str | None = None


@dataclass(frozen=True)
class AnalyzerSpec:
    """Registry entry describing an analyzer exposed as a tool."""

    slug: str
    tool_name: str
    title: str
    summary: str
    factory: AnalyzerCallable
    options: Sequence[AnalyzerOption] = field(default_factory=tuple)
    aliases: Sequence[str] = field(default_factory=tuple)

    def all_names(self) -> set[str]:
        """Return the slug, tool name, and any aliases."""

        return {self.slug, self.tool_name, *self.aliases}
