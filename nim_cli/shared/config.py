"""Configuration loading for the agent tool suite.

Values are layered: built-in defaults, then the YAML config file, then
``NIMCLI_*`` environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from . import paths
from .exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class AnalysisSettings:
    """Default parameters applied when a tool call leaves them unset."""

    spending_days: int = 30
    timeframe_months: int = 6
    min_amount: float = 1.00
    max_amount: float = 999.99


@dataclass(frozen=True, slots=True)
class MockSettings:
    """Synthetic transaction data configuration."""

    enabled: bool = True
    seed: int | None = None


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    analysis: AnalysisSettings
    mock: MockSettings

    def with_mock(self, *, enabled: bool | None = None, seed: int | None = None) -> AppConfig:
        """Return a copy with the given mock settings replaced."""
        mock = self.mock
        if enabled is not None:
            mock = replace(mock, enabled=enabled)
        if seed is not None:
            mock = replace(mock, seed=seed)
        return replace(self, mock=mock)


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError("expected boolean (true/false)")


# (section, key) -> (environment variable, parser)
ENV_OVERRIDE_SPEC: dict[tuple[str, str], tuple[str, Callable[[str], Any]]] = {
    ("analysis", "spending_days"): ("NIMCLI_SPENDING_DAYS", int),
    ("analysis", "timeframe_months"): ("NIMCLI_TIMEFRAME_MONTHS", int),
    ("analysis", "min_amount"): ("NIMCLI_MIN_AMOUNT", float),
    ("analysis", "max_amount"): ("NIMCLI_MAX_AMOUNT", float),
    ("mock", "enabled"): ("NIMCLI_USE_MOCK", _parse_bool),
    ("mock", "seed"): ("NIMCLI_MOCK_SEED", int),
}

_SECTIONS = ("analysis", "mock")


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(os.environ if env is None else env)
    source_path = paths.resolve_path(config_path) if config_path else paths.default_config_path(env=env)

    sections = _read_yaml(source_path)
    for (section, key), (env_key, parse) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            sections[section][key] = parse(raw_value.strip())
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc

    try:
        analysis = AnalysisSettings(**sections["analysis"])
        mock = MockSettings(**sections["mock"])
        analysis = replace(
            analysis,
            spending_days=int(analysis.spending_days),
            timeframe_months=int(analysis.timeframe_months),
            min_amount=float(analysis.min_amount),
            max_amount=float(analysis.max_amount),
        )
        mock = replace(
            mock,
            enabled=_parse_bool(mock.enabled) if isinstance(mock.enabled, str) else bool(mock.enabled),
            seed=None if mock.seed is None else int(mock.seed),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    _validate(analysis)
    return AppConfig(source_path=source_path, analysis=analysis, mock=mock)


def _read_yaml(path: Path) -> dict[str, dict[str, Any]]:
    """Return each known section of the config file as a (possibly empty) dict."""

    data: Any = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config file at {path} must define a mapping root object.")

    sections: dict[str, dict[str, Any]] = {}
    for name in _SECTIONS:
        section = data.get(name) or {}
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"Config section '{name}' in {path} must be a mapping.")
        sections[name] = dict(section)
    return sections


def _validate(analysis: AnalysisSettings) -> None:
    if analysis.spending_days <= 0 or analysis.timeframe_months <= 0:
        raise ConfigurationError("analysis.spending_days and analysis.timeframe_months must be positive.")
    if analysis.min_amount > analysis.max_amount:
        raise ConfigurationError("analysis.min_amount must not exceed analysis.max_amount.")
