"""Rewrite Mermaid diagram references in Markdown document trees."""

from __future__ import annotations

from mermaidsmith.api import ConversionRequest, ConversionResponse, ConversionService
from mermaidsmith.core import (
    Diagnostic,
    DiagramRenderer,
    DocumentContext,
    MermaidTransformer,
    OutputMode,
    RendererConfig,
    Severity,
    TransformerConfig,
    mermaid,
    resolve_destination,
)
from mermaidsmith.version import get_version


__version__ = get_version()

__all__ = [
    "ConversionRequest",
    "ConversionResponse",
    "ConversionService",
    "Diagnostic",
    "DiagramRenderer",
    "DocumentContext",
    "MermaidTransformer",
    "OutputMode",
    "RendererConfig",
    "Severity",
    "TransformerConfig",
    "__version__",
    "get_version",
    "mermaid",
    "resolve_destination",
]
