"""nim-analyze CLI entrypoint."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Sequence

import click

from nim_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from nim_cli.shared.transactions import load_transactions_file

from . import registry, tools
from . import render as result_render
from .types import AnalysisContext, AnalyzerHelpRequested


HELP_TEXT = (
    "Run the agent's analytical tools against a transactions export or mock data.\n\n"
    "\b\n"  # Preserve the catalog formatting in Click's help output.
    + registry.format_catalog()
)


@click.command(help=HELP_TEXT, context_settings={"ignore_unknown_options": True})
@click.argument("analysis_type", type=str, required=False)
@click.argument("analysis_args", nargs=-1, type=str)
@click.option(
    "--input",
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=str),
    help="JSON transactions export (a list, or an object with a 'transactions' array).",
)
@click.option("--mock", "force_mock", is_flag=True, help="Analyse generated mock transactions.")
@click.option(
    "--format",
    "output_format",
    default="text",
    show_default=True,
    type=click.Choice(["text", "json", "csv"]),
)
@click.option("--help-list", is_flag=True, help="List available analysis types and exit.")
@click.option("--tool-schema", is_flag=True, help="Print tool definitions as JSON and exit.")
@common_cli_options
@handle_cli_errors
def main(
    analysis_type: str | None,
    analysis_args: Sequence[str],
    input_path: str | None,
    force_mock: bool,
    output_format: str,
    help_list: bool,
    tool_schema: bool,
    cli_ctx: CLIContext,
) -> None:
    """Resolve CLI inputs, dispatch analyzers, and render the result."""

    if help_list:
        click.echo(registry.format_catalog())
        return

    if tool_schema:
        click.echo(json.dumps(tools.tool_definitions(), indent=2))
        return

    if not analysis_type:
        raise click.ClickException("Specify an analysis type or use --help-list to see options.")

    if input_path and force_mock:
        raise click.UsageError("Use either --input or --mock, not both.")

    spec = registry.get_spec(analysis_type)

    # `nim-analyze <type> -h` prints analyzer-specific flags; `--help` belongs to Click.
    try:
        parsed_analyzer_args = registry.parse_analyzer_args(spec, analysis_args)
    except AnalyzerHelpRequested as help_exc:
        click.echo(help_exc.args[0])
        return

    transactions = None
    if input_path:
        transactions = load_transactions_file(input_path)
        cli_ctx.logger.debug(f"Loaded {len(transactions)} transactions from {input_path}")
    use_mock = force_mock or (transactions is None and cli_ctx.config.mock.enabled)

    context = AnalysisContext(
        app_config=cli_ctx.config,
        logger=cli_ctx.logger,
        transactions=transactions,
        use_mock=use_mock,
        options=parsed_analyzer_args,
        now=datetime.now(timezone.utc),
    )

    cli_ctx.logger.debug(
        f"Dispatching analysis '{spec.slug}' with options {parsed_analyzer_args}"
    )
    # AnalysisError subclasses NimAgentError; handle_cli_errors converts it.
    result = spec.factory(context)
    try:
        result_render.render_result(
            result,
            output_format=output_format,
            logger=cli_ctx.logger,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if cli_ctx.verbose:
        cli_ctx.logger.info(f"Analysis '{spec.slug}' completed.")


if __name__ == "__main__":  # pragma: no cover
    main()
