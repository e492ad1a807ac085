"""Stderr logging for nim-agent tools.

Everything here writes to stderr: stdout belongs to the payload a host or a
shell pipe reads back, so a stray log line there would corrupt tool output.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

# Highlighting is off so merchant names like "iCloud Storage 200GB" print verbatim.
_console = Console(
    stderr=True,
    theme=Theme({"info": "cyan", "warning": "yellow", "debug": "dim"}),
    highlight=False,
)


@dataclass(frozen=True, slots=True)
class Logger:
    """Leveled messages, optionally tagged with the tool they came from."""

    verbose: bool = False
    scope: str | None = None

    def for_tool(self, tool_name: str) -> Logger:
        return replace(self, scope=tool_name)

    def info(self, message: str) -> None:
        self._emit(message, "info")

    def warning(self, message: str) -> None:
        self._emit(message, "warning")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._emit(message, "debug")

    def _emit(self, message: str, style: str) -> None:
        if self.scope:
            message = f"[{self.scope}] {message}"
        _console.print(message, style=style, markup=False)


def get_logger(verbose: bool = False) -> Logger:
    return Logger(verbose=verbose)
