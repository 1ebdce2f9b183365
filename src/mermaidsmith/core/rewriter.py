"""Builders for the nodes that replace matched diagram references."""

from __future__ import annotations

from .gateway import RenderResult
from .nodes import Html, Image, Node


EMBED_CLASS = "mermaid"
IMAGE_CAPTION = "`mermaid` image"


def wrap_as_embeddable(text: str) -> Html:
    """Wrap diagram source, unescaped, in a container Mermaid JS picks up."""
    return Html(value=f'<div class="{EMBED_CLASS}">\n  {text}\n</div>')


def from_render_result(result: RenderResult) -> Node:
    """Return the node standing in for a rendered diagram."""
    if result.markup is not None:
        return Html(value=result.markup)
    assert result.path is not None
    return Image(url=result.path, title=IMAGE_CAPTION)


__all__ = ["EMBED_CLASS", "IMAGE_CAPTION", "from_render_result", "wrap_as_embeddable"]
