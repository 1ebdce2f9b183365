"""Transformer entry point rewriting Mermaid references in a document tree."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import replace
import logging
from pathlib import Path
from typing import Any

from .config import TransformerConfig
from .context import DocumentContext, resolve_destination
from .exceptions import DiagramFileError
from .gateway import DiagramRenderer, RenderGateway
from .nodes import Code, Image, Link, Node, Root
from .rewriter import from_render_result, wrap_as_embeddable
from .rules import DiagramPhase, Dispatcher, Outcome, locates


logger = logging.getLogger(__name__)

DIAGRAM_LANGUAGE = "mermaid"
DIAGRAM_MARKER = "mermaid:"


def is_diagram_code(node: Node) -> bool:
    """Return True for code blocks tagged with the diagram language."""
    return isinstance(node, Code) and node.lang == DIAGRAM_LANGUAGE


def is_diagram_reference(node: Node) -> bool:
    """Return True for links and images titled with the diagram marker."""
    return isinstance(node, Link | Image) and node.title == DIAGRAM_MARKER


def _read_diagram(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class MermaidTransformer:
    """Replace Mermaid code blocks, links and images within a document tree.

    In the default mode diagrams are rendered through the Mermaid CLI: code
    blocks become images (or inline SVG when the document asks for inline
    output) and diagram links/images are pointed at the rendered file. In
    ``simple`` mode every diagram is embedded as a ``<div class="mermaid">``
    wrapper for Mermaid JS and nothing is rendered.
    """

    def __init__(
        self,
        config: TransformerConfig | None = None,
        *,
        renderer: DiagramRenderer | None = None,
    ) -> None:
        self.config = config or TransformerConfig()
        if renderer is None and not self.config.simple:
            from mermaidsmith.adapters.renderers import MermaidCliRenderer

            renderer = MermaidCliRenderer.discover(self.config.renderer)
        self.renderer = renderer
        self.gateway = RenderGateway(renderer) if renderer is not None else None
        self.dispatcher = Dispatcher(max_concurrency=self.config.max_concurrency)
        self.dispatcher.collect_from(self)

    @property
    def simple(self) -> bool:
        return self.config.simple

    async def __call__(self, tree: Root, context: DocumentContext) -> Root:
        return await self.transform(tree, context)

    async def transform(self, tree: Root, context: DocumentContext) -> Root:
        """Run the code, link and image phases in order and return the tree."""
        await self.dispatcher.run(tree, context)
        return tree

    def run(self, tree: Root, context: DocumentContext) -> Root:
        """Synchronous wrapper around :meth:`transform`."""
        return asyncio.run(self.transform(tree, context))

    def _require_gateway(self) -> RenderGateway:
        if self.gateway is None:
            raise RuntimeError("No diagram renderer is configured for this transformer")
        return self.gateway

    @locates("code", phase=DiagramPhase.CODE, predicate=is_diagram_code)
    async def replace_code_block(self, node: Code, context: DocumentContext) -> Outcome:
        """Swap a diagram code block for a wrapper or a rendered graph."""
        if self.simple:
            return Outcome.replaced(
                wrap_as_embeddable(node.value),
                f"{node.lang} code block replaced with div",
            )

        result = await self._require_gateway().render_from_text(
            node.value,
            resolve_destination(context),
            context.output_mode,
        )
        return Outcome.replaced(
            from_render_result(result),
            f"{node.lang} code block replaced with graph",
        )

    @locates("link", phase=DiagramPhase.LINK, predicate=is_diagram_reference)
    async def replace_link(self, node: Link, context: DocumentContext) -> Outcome:
        return await self._replace_reference(node, context)

    @locates("image", phase=DiagramPhase.IMAGE, predicate=is_diagram_reference)
    async def replace_image(self, node: Image, context: DocumentContext) -> Outcome:
        return await self._replace_reference(node, context)

    async def _replace_reference(self, node: Link | Image, context: DocumentContext) -> Outcome:
        source = context.source_dir / node.url

        if self.simple:
            try:
                diagram = await asyncio.to_thread(_read_diagram, source)
            except OSError as exc:
                raise DiagramFileError(f"Failed to read diagram '{source}': {exc}") from exc
            return Outcome.replaced(wrap_as_embeddable(diagram), "mermaid link replaced with div")

        result = await self._require_gateway().render_from_file(
            source, resolve_destination(context)
        )
        return Outcome.replaced(
            replace(node, url=result.path),
            "mermaid link replaced with link to graph",
        )


def mermaid(
    options: Mapping[str, Any] | TransformerConfig | None = None,
    *,
    renderer: DiagramRenderer | None = None,
) -> MermaidTransformer:
    """Return a transformer bound to ``options``.

    ``options`` accepts ``simple`` (embed diagrams instead of rendering them)
    along with the other :class:`TransformerConfig` fields.
    """
    if isinstance(options, TransformerConfig):
        config = options
    else:
        config = TransformerConfig.model_validate(dict(options or {}))
    return MermaidTransformer(config, renderer=renderer)


__all__ = [
    "DIAGRAM_LANGUAGE",
    "DIAGRAM_MARKER",
    "MermaidTransformer",
    "is_diagram_code",
    "is_diagram_reference",
    "mermaid",
]
