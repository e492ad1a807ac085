"""Analyzer registry, option parsing, and tool schema helpers for `nim-analyze`."""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
from typing import Any

from .analyzers import spending_summary, subscription_detect
from .types import (
    AnalysisConfigurationError,
    AnalyzerHelpRequested,
    AnalyzerOption,
    AnalyzerSpec,
)

_ANALYZER_SPECS: Sequence[AnalyzerSpec] = (
    AnalyzerSpec(
        slug="spending",
        tool_name="analyze_spending",
        title="Spending Analysis",
        summary=(
            "Analyze spending patterns over a period: totals, top categories, "
            "velocity, and cash-flow insights."
        ),
        factory=spending_summary.analyze,
        aliases=("spending-analyzer",),
        options=(
            AnalyzerOption(
                name="days",
                flags=("--days",),
                help="Number of days to analyze.",
                type=int,
                default=30,
                metavar="N",
            ),
        ),
    ),
    AnalyzerSpec(
        slug="subscriptions",
        tool_name="analyze_subscriptions",
        title="Subscription Detection",
        summary=(
            "Identify recurring subscriptions and payments, total monthly cost, "
            "and cancellation insights."
        ),
        factory=subscription_detect.analyze,
        aliases=("subscription-detect",),
        options=(
            AnalyzerOption(
                name="timeframe_months",
                flags=("--months",),
                help="Number of months to scan for recurring patterns.",
                type=int,
                default=6,
                metavar="N",
            ),
            AnalyzerOption(
                name="min_amount",
                flags=("--min-amount",),
                help="Minimum amount considered a subscription.",
                type=float,
                default=1.00,
                metavar="AMOUNT",
            ),
            AnalyzerOption(
                name="max_amount",
                flags=("--max-amount",),
                help="Maximum amount considered a subscription.",
                type=float,
                default=999.99,
                metavar="AMOUNT",
            ),
        ),
    ),
)


_SPEC_BY_NAME: dict[str, AnalyzerSpec] = {}
for _spec in _ANALYZER_SPECS:
    for _name in _spec.all_names():
        _SPEC_BY_NAME[_name] = _spec

_SCHEMA_TYPES: Mapping[Any, str] = {int: "integer", float: "number", str: "string"}


# ----- Public helpers -----------------------------------------------------------------------


def available_specs() -> Sequence[AnalyzerSpec]:
    """Return available analyzer specs."""

    return _ANALYZER_SPECS


def get_spec(name: str) -> AnalyzerSpec:
    """Lookup an analyzer spec by slug, tool name, or alias."""

    normalized = name.lower().strip()
    try:
        return _SPEC_BY_NAME[normalized]
    except KeyError as exc:
        raise AnalysisConfigurationError(f"Unknown analysis type '{name}'.") from exc


def format_catalog() -> str:
    """Return a formatted listing of available analyzers for --help-list."""

    lines = ["Available analyses:"]
    for spec in available_specs():
        lines.append(f"  - {spec.slug} ({spec.tool_name}): {spec.summary}")
    return "\n".join(lines)


def parse_analyzer_args(spec: AnalyzerSpec, args: Sequence[str]) -> Mapping[str, object]:
    """Parse analyzer-specific CLI args; only flags actually given are returned."""

    if any(token in {"--help", "-h"} for token in args):
        raise AnalyzerHelpRequested(build_help_text(spec))

    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False, exit_on_error=False)
    # No parser defaults: unset options fall back to AppConfig in the analyzer.
    for option in spec.options:
        parser.add_argument(
            *option.flags,
            dest=option.name,
            type=option.type or str,
            metavar=option.metavar,
            help=option.help,
        )

    try:
        namespace, leftover = parser.parse_known_intermixed_args(list(args))
    except argparse.ArgumentError as exc:
        raise AnalysisConfigurationError(f"Invalid arguments for analyzer '{spec.slug}': {exc}") from exc
    if leftover:
        raise AnalysisConfigurationError(
            f"Unexpected arguments for analyzer '{spec.slug}': {' '.join(leftover)}"
        )
    return {key: value for key, value in vars(namespace).items() if value is not None}


def coerce_tool_params(spec: AnalyzerSpec, params: Mapping[str, Any]) -> dict[str, Any]:
    """Validate JSON tool parameters against the analyzer's declared options.

    Unknown keys are ignored; a value of the wrong type raises
    ``AnalysisConfigurationError``.
    """

    coerced: dict[str, Any] = {}
    for option in spec.options:
        raw = params.get(option.name)
        if raw is None:
            continue
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise AnalysisConfigurationError(f"Parameter '{option.name}' must be a number.")
        if option.type is int and not float(raw).is_integer():
            raise AnalysisConfigurationError(f"Parameter '{option.name}' must be an integer.")
        coerced[option.name] = (option.type or float)(raw)
    return coerced


def build_input_schema(spec: AnalyzerSpec) -> dict[str, Any]:
    """Return a JSON-schema object describing the tool's parameters."""

    properties: dict[str, Any] = {
        option.name: {
            "type": _SCHEMA_TYPES.get(option.type, "string"),
            "description": f"{option.help.rstrip('.')} (default: {option.default})",
        }
        for option in spec.options
    }
    properties["use_mock"] = {
        "type": "boolean",
        "description": "Use mock data for testing (default: true when no transactions are supplied)",
    }
    return {"type": "object", "properties": properties}


def build_help_text(spec: AnalyzerSpec) -> str:
    """Render analyzer-specific help text."""

    lines = [
        f"Analysis: {spec.title} ({spec.slug}, tool {spec.tool_name})",
        f"Aliases: {', '.join(spec.aliases) or 'none'}",
        "",
        spec.summary,
        "",
        "Options:",
    ]
    for option in spec.options:
        usage = " ".join(filter(None, [", ".join(option.flags), option.metavar]))
        lines.append(f"  {usage}")
        lines.append(f"      {option.help} [default: {option.default}]")
    return "\n".join(lines)
