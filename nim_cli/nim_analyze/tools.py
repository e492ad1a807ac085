"""Entry points for a host tool-dispatch layer.

A host registers the definitions from `tool_definitions()` with its model
runtime and routes each tool call to `invoke_tool()`, passing the raw JSON
parameters plus any transactions it fetched from the banking API. When the
host has no transactions, the call runs against mock data.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from nim_cli.shared.config import AppConfig
from nim_cli.shared.logging import Logger

from . import registry
from .types import AnalysisConfigurationError, AnalysisContext, AnalysisResult


def tool_definitions() -> list[dict[str, Any]]:
    """Return name/description/input_schema entries for every analyzer."""

    return [
        {
            "name": spec.tool_name,
            "description": spec.summary,
            "input_schema": registry.build_input_schema(spec),
        }
        for spec in registry.available_specs()
    ]


def invoke_tool(
    name: str,
    params: Mapping[str, Any] | None,
    *,
    app_config: AppConfig,
    logger: Logger,
    transactions: Sequence[Mapping[str, Any]] | None = None,
    now: datetime | None = None,
) -> AnalysisResult:
    """Run the analyzer registered under ``name`` with JSON tool parameters."""

    spec = registry.get_spec(name)
    logger = logger.for_tool(spec.tool_name)
    params = params or {}

    use_mock_param = params.get("use_mock")
    try:
        if use_mock_param is not None and not isinstance(use_mock_param, bool):
            raise AnalysisConfigurationError("Parameter 'use_mock' must be a boolean.")
        options = registry.coerce_tool_params(spec, params)
    except AnalysisConfigurationError as exc:
        logger.warning(f"{exc} Falling back to defaults with mock data.")
        options = {}
        use_mock = True
    else:
        if use_mock_param is None:
            use_mock = transactions is None and app_config.mock.enabled
        else:
            use_mock = use_mock_param

    logger.debug(f"Dispatching with options {options} (mock={use_mock})")
    context = AnalysisContext(
        app_config=app_config,
        logger=logger,
        transactions=transactions,
        use_mock=use_mock,
        options=options,
        now=now or datetime.now(timezone.utc),
    )
    return spec.factory(context)
