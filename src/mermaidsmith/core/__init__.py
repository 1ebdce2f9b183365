"""Core primitives of the Mermaid rewriting pipeline."""

from __future__ import annotations

from .config import RendererConfig, TransformerConfig
from .context import DocumentContext, OutputMode, resolve_destination
from .diagnostics import (
    PLUGIN_NAME,
    Diagnostic,
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    Severity,
)
from .exceptions import (
    DiagramFileError,
    InvalidNodeError,
    MermaidsmithError,
    RenderError,
    RendererNotFoundError,
)
from .gateway import DiagramRenderer, RenderGateway, RenderRequest, RenderResult, diagram_id
from .nodes import Code, Element, Html, Image, Link, Node, NodeRef, Position, Root, Text
from .rewriter import from_render_result, wrap_as_embeddable
from .rules import DiagramPhase, Dispatcher, Outcome, locates
from .transformer import MermaidTransformer, mermaid


__all__ = [
    "PLUGIN_NAME",
    "Code",
    "Diagnostic",
    "DiagnosticEmitter",
    "DiagramFileError",
    "DiagramPhase",
    "DiagramRenderer",
    "Dispatcher",
    "DocumentContext",
    "Element",
    "Html",
    "Image",
    "InvalidNodeError",
    "Link",
    "LoggingEmitter",
    "MermaidTransformer",
    "MermaidsmithError",
    "Node",
    "NodeRef",
    "NullEmitter",
    "Outcome",
    "OutputMode",
    "Position",
    "RenderError",
    "RenderGateway",
    "RenderRequest",
    "RenderResult",
    "RendererConfig",
    "RendererNotFoundError",
    "Root",
    "Severity",
    "Text",
    "TransformerConfig",
    "diagram_id",
    "from_render_result",
    "locates",
    "mermaid",
    "resolve_destination",
    "wrap_as_embeddable",
]
