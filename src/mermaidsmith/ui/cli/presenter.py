"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mermaidsmith.core.diagnostics import Diagnostic, Severity

from .state import CLIState


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console


_SEVERITY_STYLES = {
    Severity.INFO: "bright_green",
    Severity.ERROR: "bold red",
}


def _get_console(state: CLIState, *, stderr: bool = False) -> Console | None:
    """Return the active console when it is attached to a terminal."""
    console = state.err_console if stderr else state.console
    if getattr(console, "is_terminal", False):
        return console
    return None


def _rich_components() -> tuple[Any, Any, Any]:
    from rich import box
    from rich.table import Table
    from rich.text import Text

    return box, Table, Text


def _format_path(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except (OSError, ValueError):
        return str(path)


def summarise(diagnostics: Sequence[Diagnostic]) -> str:
    """Return a one-line count of replaced diagrams and errors."""
    replaced = sum(1 for entry in diagnostics if entry.severity is Severity.INFO)
    errors = sum(1 for entry in diagnostics if entry.severity is Severity.ERROR)
    return f"{replaced} diagram(s) replaced, {errors} error(s)"


def present_diagnostics(
    state: CLIState,
    diagnostics: Sequence[Diagnostic],
    *,
    output: Path | None = None,
) -> None:
    """Render the diagnostics of one conversion.

    A table is printed on interactive terminals; otherwise a single summary
    line keeps piped output compact.
    """
    console = _get_console(state)
    if console is None or not diagnostics:
        target = f" -> {_format_path(output)}" if output is not None else ""
        state.console.print(f"{summarise(diagnostics)}{target}", highlight=False)
        return

    box_module, table_cls, text_cls = _rich_components()
    title = _format_path(output) if output is not None else None
    table = table_cls(title=title, box=box_module.SQUARE, header_style="bold cyan")
    table.add_column("Severity")
    table.add_column("Location")
    table.add_column("Message")
    for entry in diagnostics:
        style = _SEVERITY_STYLES.get(entry.severity, "")
        table.add_row(
            text_cls(entry.severity.value, style=style),
            entry.location or "-",
            entry.message,
        )
    console.print(table)
    console.print(summarise(diagnostics), highlight=False)


__all__ = ["present_diagnostics", "summarise"]
