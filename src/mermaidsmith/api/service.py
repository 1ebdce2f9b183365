"""High-level service converting documents with their Mermaid diagrams rewritten."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from mermaidsmith.adapters.html import tree_from_html, tree_to_html
from mermaidsmith.adapters.markdown import render_markdown
from mermaidsmith.core.config import RendererConfig, TransformerConfig
from mermaidsmith.core.context import DocumentContext, OutputMode
from mermaidsmith.core.diagnostics import Diagnostic, DiagnosticEmitter, LoggingEmitter
from mermaidsmith.core.gateway import DiagramRenderer
from mermaidsmith.core.transformer import MermaidTransformer


logger = logging.getLogger(__name__)

HTML_SUFFIXES = (".html", ".htm")
INLINE_FRONT_MATTER_KEY = "mermaid_inline"


class UnsupportedInputError(Exception):
    """Raised when an input document cannot be read."""


@dataclass(slots=True)
class ConversionRequest:
    """Options describing a single document conversion."""

    source_path: Path
    output_dir: Path | None = None
    simple: bool = False
    inline: bool | None = None
    max_concurrency: int | None = None
    renderer: RendererConfig = field(default_factory=RendererConfig)
    markdown_extensions: Sequence[str] | None = None

    def transformer_config(self) -> TransformerConfig:
        return TransformerConfig(
            simple=self.simple,
            max_concurrency=self.max_concurrency,
            renderer=self.renderer,
        )


@dataclass(slots=True)
class ConversionResponse:
    """Transformed HTML together with the context it was produced in."""

    html: str
    context: DocumentContext
    front_matter: dict[str, Any] = field(default_factory=dict)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.context.diagnostics

    @property
    def has_errors(self) -> bool:
        return self.context.has_errors


def resolve_output_mode(inline: bool | None, front_matter: dict[str, Any]) -> OutputMode:
    """Return the output mode, preferring an explicit choice over front matter."""
    if inline is None:
        inline = bool(front_matter.get(INLINE_FRONT_MATTER_KEY, False))
    return OutputMode.INLINE if inline else OutputMode.FILE


class ConversionService:
    """Read a Markdown or HTML document and rewrite its Mermaid references."""

    def __init__(self, renderer: DiagramRenderer | None = None) -> None:
        self.renderer = renderer

    def convert(
        self,
        request: ConversionRequest,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> ConversionResponse:
        source_path = Path(request.source_path)
        try:
            text = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise UnsupportedInputError(f"Failed to read '{source_path}': {exc}") from exc

        transformer = MermaidTransformer(request.transformer_config(), renderer=self.renderer)

        is_html = source_path.suffix.lower() in HTML_SUFFIXES
        if is_html:
            html, front_matter = text, {}
        else:
            document = render_markdown(text, request.markdown_extensions)
            html, front_matter = document.html, document.front_matter

        context = DocumentContext(
            source_path=source_path,
            output_dir=request.output_dir,
            output_mode=resolve_output_mode(request.inline, front_matter),
            emitter=emitter or LoggingEmitter(),
        )
        tree = tree_from_html(html, track_positions=is_html)
        transformer.run(tree, context)
        logger.debug(
            "Converted %s with %d diagnostic(s)", source_path, len(context.diagnostics)
        )

        return ConversionResponse(
            html=tree_to_html(tree),
            context=context,
            front_matter=front_matter,
        )


__all__ = [
    "ConversionRequest",
    "ConversionResponse",
    "ConversionService",
    "UnsupportedInputError",
    "resolve_output_mode",
]
