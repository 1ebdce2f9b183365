"""Typer application wiring for the mermaidsmith CLI."""

from __future__ import annotations

import typer

from mermaidsmith.ui.cli.commands.render import render

from .state import debug_enabled, emit_error, get_cli_state


app = typer.Typer(
    help="Render or embed Mermaid diagrams referenced from Markdown documents.",
    context_settings={"help_option_names": ["--help"]},
)


app.command()(render)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise SystemExit(1) from exc
    except Exception as exc:
        state = get_cli_state()
        if not state.show_tracebacks:
            emit_error(str(exc), exception=exc)
            raise SystemExit(1) from exc
        from rich.traceback import Traceback

        state.err_console.print(
            Traceback.from_exception(
                type(exc), exc, exc.__traceback__, show_locals=state.verbosity >= 2
            )
        )
        raise SystemExit(1) from exc


__all__ = ["app", "main"]
