from __future__ import annotations

import pytest

from nim_cli.nim_analyze import registry
from nim_cli.nim_analyze.types import AnalysisConfigurationError, AnalyzerHelpRequested


@pytest.mark.parametrize(
    "name, slug",
    [
        ("spending", "spending"),
        ("analyze_spending", "spending"),
        ("spending-analyzer", "spending"),
        ("Subscriptions", "subscriptions"),
        ("analyze_subscriptions", "subscriptions"),
        (" subscription-detect ", "subscriptions"),
    ],
)
def test_get_spec_resolves_names(name: str, slug: str) -> None:
    assert registry.get_spec(name).slug == slug


def test_get_spec_unknown_name() -> None:
    with pytest.raises(AnalysisConfigurationError, match="Unknown analysis type 'budget'"):
        registry.get_spec("budget")


def test_format_catalog_lists_tools() -> None:
    catalog = registry.format_catalog()

    assert catalog.startswith("Available analyses:")
    assert "spending (analyze_spending)" in catalog
    assert "subscriptions (analyze_subscriptions)" in catalog


def test_parse_analyzer_args_returns_only_supplied_values() -> None:
    spec = registry.get_spec("subscriptions")

    assert registry.parse_analyzer_args(spec, []) == {}
    assert registry.parse_analyzer_args(spec, ["--months", "3", "--max-amount", "50"]) == {
        "timeframe_months": 3,
        "max_amount": 50.0,
    }


def test_parse_analyzer_args_rejects_unknown_flags() -> None:
    spec = registry.get_spec("spending")

    with pytest.raises(AnalysisConfigurationError, match="Unexpected arguments"):
        registry.parse_analyzer_args(spec, ["--months", "3"])


def test_parse_analyzer_args_rejects_bad_values() -> None:
    spec = registry.get_spec("spending")

    with pytest.raises(AnalysisConfigurationError, match="Invalid arguments"):
        registry.parse_analyzer_args(spec, ["--days", "soon"])


def test_parse_analyzer_args_help() -> None:
    spec = registry.get_spec("spending")

    with pytest.raises(AnalyzerHelpRequested) as excinfo:
        registry.parse_analyzer_args(spec, ["--help"])

    help_text = excinfo.value.args[0]
    assert "Spending Analysis" in help_text
    assert "--days N" in help_text
    assert "[default: 30]" in help_text


def test_coerce_tool_params() -> None:
    spec = registry.get_spec("analyze_subscriptions")

    coerced = registry.coerce_tool_params(
        spec,
        {"timeframe_months": 12.0, "min_amount": 5, "use_mock": True, "extra": "ignored"},
    )

    assert coerced == {"timeframe_months": 12, "min_amount": 5.0}
    assert isinstance(coerced["min_amount"], float)


@pytest.mark.parametrize(
    "params",
    [
        {"timeframe_months": "six"},
        {"timeframe_months": 2.5},
        {"timeframe_months": True},
        {"max_amount": [100]},
    ],
)
def test_coerce_tool_params_rejects_wrong_types(params) -> None:
    spec = registry.get_spec("analyze_subscriptions")

    with pytest.raises(AnalysisConfigurationError):
        registry.coerce_tool_params(spec, params)


def test_build_input_schema() -> None:
    schema = registry.build_input_schema(registry.get_spec("analyze_subscriptions"))

    assert schema["type"] == "object"
    properties = schema["properties"]
    assert set(properties) == {"timeframe_months", "min_amount", "max_amount", "use_mock"}
    assert properties["timeframe_months"]["type"] == "integer"
    assert properties["min_amount"]["type"] == "number"
    assert properties["use_mock"]["type"] == "boolean"
    assert properties["max_amount"]["description"].endswith("(default: 999.99)")
