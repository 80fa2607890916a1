"""Rich rendering for the ``tools`` and ``call`` commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mixpanel_mcp.tools.base import ToolDefinition, ToolResult

_SUMMARY_LEN = 80


def _summary(description: str, limit: int = _SUMMARY_LEN) -> str:
    """First sentence of *description*, clipped to *limit* characters."""
    first = description.split(". ", 1)[0].rstrip(".")
    if len(first) <= limit:
        return first
    return first[:limit].rstrip() + " ..."


class ToolDisplay:
    """Console output for tool listings and results.

    Accepts an optional :class:`~rich.console.Console` for dependency
    injection in tests.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_tools(self, definitions: Sequence[ToolDefinition]) -> None:
        table = Table(title="Mixpanel tools", show_lines=False)
        table.add_column("Tool", style="bold cyan", no_wrap=True)
        table.add_column("Endpoint", no_wrap=True)
        table.add_column("Required")
        table.add_column("Summary")
        for d in definitions:
            required = ", ".join(p.name for p in d.parameters if p.required) or "-"
            table.add_row(d.name, f"{d.method} {d.path}", required, _summary(d.description))
        self._console.print(table)

    def show_result(self, result: ToolResult) -> None:
        if result.is_error:
            self._console.print(
                Panel(result.content, title="Error", border_style="red")
            )
            return
        self._console.print(Markdown(result.content))
