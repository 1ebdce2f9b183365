"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Markdown (.md) or HTML (.html) document to process.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--markdown-extensions",
        "-x",
        help="Additional Markdown extensions (comma or space separated).",
        rich_help_panel=INPUTS_PANEL,
    ),
]

DisableMarkdownExtensionsOption = Annotated[
    list[str] | None,
    typer.Option(
        "--disable-markdown-extensions",
        help="Markdown extensions to disable (comma or space separated).",
        rich_help_panel=INPUTS_PANEL,
    ),
]

SimpleOption = Annotated[
    bool,
    typer.Option(
        "--simple",
        help='Embed diagrams as <div class="mermaid"> instead of rendering them.',
        rich_help_panel=RENDERING_PANEL,
    ),
]

InlineOption = Annotated[
    bool | None,
    typer.Option(
        "--inline/--no-inline",
        help=(
            "Inline rendered SVG markup instead of linking image files "
            "(defaults to the 'mermaid_inline' front matter flag)."
        ),
        show_default=False,
        rich_help_panel=RENDERING_PANEL,
    ),
]

MaxConcurrencyOption = Annotated[
    int | None,
    typer.Option(
        "--max-concurrency",
        min=1,
        help="Limit concurrent Mermaid CLI invocations (unbounded by default).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

MermaidCliOption = Annotated[
    str | None,
    typer.Option(
        "--mmdc",
        help="Path to the Mermaid CLI executable.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

MermaidConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--mermaid-config",
        help="Mermaid configuration file forwarded to the CLI.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output HTML file (or directory); rendered diagrams are written next to it.",
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputDirOption = Annotated[
    Path | None,
    typer.Option(
        "--output-dir",
        "-d",
        help=(
            "Directory receiving the HTML output and rendered diagrams "
            "(defaults to the directory of the output file)."
        ),
        file_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Exit with a non-zero status when any diagram fails.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerbosityOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (repeat for more detail).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks on failure.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
