"""Custom exception hierarchy for the diagram rewriting pipeline."""

from __future__ import annotations


class MermaidsmithError(RuntimeError):
    """Base exception for diagram rewriting failures."""


class RendererNotFoundError(MermaidsmithError):
    """Raised when the external diagram renderer cannot be located."""


class RenderError(MermaidsmithError):
    """Raised when an external renderer fails to produce a diagram."""


class DiagramFileError(RenderError):
    """Raised when a diagram source or artefact cannot be read or written."""


class InvalidNodeError(MermaidsmithError):
    """Raised when a tree operation receives an unexpected node shape."""


__all__ = [
    "DiagramFileError",
    "InvalidNodeError",
    "MermaidsmithError",
    "RenderError",
    "RendererNotFoundError",
]
