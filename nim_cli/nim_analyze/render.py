"""Output renderers for nim-analyze results.

``json`` prints the tool envelope exactly as a host receives it from
``invoke_tool``; ``text`` and ``csv`` are for people and spreadsheets.
"""

from __future__ import annotations

import csv
import json
import sys
from typing import IO, Any, Iterator

from rich import box
from rich.console import Console
from rich.table import Table

from nim_cli.nim_analyze.types import AnalysisResult, TableSeries
from nim_cli.shared.logging import Logger

OUTPUT_FORMATS = ("text", "json", "csv")


def render_result(
    result: AnalysisResult,
    *,
    output_format: str,
    logger: Logger,
    stream: IO[str] | None = None,
) -> None:
    stream = stream or sys.stdout
    fmt = (output_format or "text").lower()
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format '{output_format}'.")
    if result.is_empty():
        logger.info("Analysis returned no data to display.")

    if fmt == "json":
        json.dump(dict(result.json_payload), stream, indent=2, default=str)
        stream.write("\n")
    elif fmt == "csv":
        csv.writer(stream).writerows(_csv_rows(result))
    else:
        _render_text(result, stream)


def _render_text(result: AnalysisResult, stream: IO[str]) -> None:
    console = Console(file=stream, highlight=False, force_terminal=False)
    console.rule(result.title, style="bold")
    for line in result.summary:
        console.print(f"• {line}", markup=False)
    for table_series in result.tables:
        console.print()
        console.print(_rich_table(table_series))


def _csv_rows(result: AnalysisResult) -> Iterator[list[Any]]:
    """Yield a title row, summary rows, then one section per table."""

    yield ["title", result.title]
    for line in result.summary:
        yield ["summary", line]
    for table in result.tables:
        yield []
        yield ["table", table.name]
        for key, value in sorted(table.metadata.items()):
            yield ["metadata", key, json.dumps(value, default=str)]
        yield list(table.columns)
        for row in table.rows:
            yield ["" if cell is None else cell for cell in row]


def _rich_table(table_series: TableSeries) -> Table:
    table = Table(title=table_series.name, box=box.SIMPLE_HEAD, header_style="bold")
    numeric = [
        bool(table_series.rows)
        and all(isinstance(row[index], (int, float)) for row in table_series.rows)
        for index in range(len(table_series.columns))
    ]
    for column, is_numeric in zip(table_series.columns, numeric):
        table.add_column(column, justify="right" if is_numeric else "left")
    for row in table_series.rows:
        table.add_row(*[_cell_text(cell) for cell in row])
    return table


def _cell_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float):
        return f"{cell:,.2f}"
    return str(cell)
