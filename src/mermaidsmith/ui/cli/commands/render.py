"""Implementation of the `mermaidsmith` render command."""

from __future__ import annotations

import logging

import typer

from mermaidsmith.adapters.markdown import MarkdownConversionError, resolve_markdown_extensions
from mermaidsmith.api.service import ConversionRequest, ConversionService, UnsupportedInputError
from mermaidsmith.core.config import RendererConfig
from mermaidsmith.core.exceptions import RendererNotFoundError

from .._options import (
    DebugOption,
    DisableMarkdownExtensionsOption,
    InlineOption,
    InputPathArgument,
    MarkdownExtensionsOption,
    MaxConcurrencyOption,
    MermaidCliOption,
    MermaidConfigOption,
    OutputDirOption,
    OutputPathOption,
    SimpleOption,
    StrictOption,
    VerbosityOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_diagnostics
from ..state import debug_enabled, emit_error, set_cli_state
from ..utils import determine_output_target, write_output_file


_SERVICE = ConversionService()


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.getLogger("mermaidsmith").setLevel(level)


def render(
    input_path: InputPathArgument,
    output: OutputPathOption = None,
    output_dir: OutputDirOption = None,
    simple: SimpleOption = False,
    inline: InlineOption = None,
    max_concurrency: MaxConcurrencyOption = None,
    mmdc: MermaidCliOption = None,
    mermaid_config: MermaidConfigOption = None,
    markdown_extensions: MarkdownExtensionsOption = None,
    disable_markdown_extensions: DisableMarkdownExtensionsOption = None,
    strict: StrictOption = False,
    verbose: VerbosityOption = 0,
    debug: DebugOption = False,
) -> None:
    """Rewrite Mermaid diagrams of a document and write the resulting HTML."""
    state = set_cli_state(verbosity=verbose, debug=debug)
    _configure_logging(state.verbosity)

    # Rendered diagrams are linked as ./{id}.svg, relative to the HTML file.
    target = determine_output_target(input_path, output, output_dir)
    if output_dir is not None and output_dir.resolve() != target.parent.resolve():
        emit_error(
            f"Output file '{target}' must be written to the diagram directory "
            f"'{output_dir}' so that image links resolve."
        )
        raise typer.Exit(code=1)

    request = ConversionRequest(
        source_path=input_path,
        output_dir=target.parent,
        simple=simple,
        inline=inline,
        max_concurrency=max_concurrency,
        renderer=RendererConfig(executable=mmdc, config_file=mermaid_config),
        markdown_extensions=resolve_markdown_extensions(
            markdown_extensions, disable_markdown_extensions
        ),
    )

    try:
        response = _SERVICE.convert(request, emitter=CliEmitter(state))
    except (RendererNotFoundError, UnsupportedInputError, MarkdownConversionError) as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    write_output_file(target, response.html)
    present_diagnostics(state, response.diagnostics, output=target)

    if strict and response.has_errors:
        raise typer.Exit(code=1)


__all__ = ["render"]
