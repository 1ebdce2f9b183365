"""Typed document tree consumed and produced by the diagram transformer.

The tree mirrors the small subset of a Markdown syntax tree the transformer
cares about. Every node class exposes a class-level ``kind`` tag so callers
can dispatch on node shape without ``isinstance`` ladders, and an optional
``position`` carried through untouched for diagnostics.

`Root`, `Element` and `Link` own an ordered ``children`` list. Nodes are
identified by their slot in that list through :class:`NodeRef`, and
:func:`replace_node` is the single mutation primitive used by the dispatcher.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar

from .exceptions import InvalidNodeError


@dataclass(frozen=True, slots=True)
class Position:
    """Source location attached to a node."""

    line: int
    column: int = 1
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        start = f"{self.line}:{self.column}"
        if self.end_line is None:
            return start
        end_column = self.end_column if self.end_column is not None else 1
        return f"{start}-{self.end_line}:{end_column}"


@dataclass(slots=True, kw_only=True)
class Node:
    """Base class for every tree node."""

    kind: ClassVar[str] = "node"

    position: Position | None = None


@dataclass(slots=True, kw_only=True)
class Parent(Node):
    """Node owning an ordered list of children."""

    children: list[Node] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class Root(Parent):
    """Document root."""

    kind: ClassVar[str] = "root"


@dataclass(slots=True, kw_only=True)
class Element(Parent):
    """Generic markup element the transformer passes through untouched."""

    kind: ClassVar[str] = "element"

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, kw_only=True)
class Text(Node):
    kind: ClassVar[str] = "text"

    value: str


@dataclass(slots=True, kw_only=True)
class Html(Node):
    """Raw markup emitted verbatim by serialisers."""

    kind: ClassVar[str] = "html"

    value: str


@dataclass(slots=True, kw_only=True)
class Code(Node):
    """Fenced code block.

    ``attributes`` and ``container_attributes`` hold the markup attributes of
    the code element and of its enclosing block so serialisers can restore
    them. ``final_newline`` records whether the block text ended with a line
    break, which ``value`` never includes.
    """

    kind: ClassVar[str] = "code"

    value: str
    lang: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    container_attributes: dict[str, str] = field(default_factory=dict)
    final_newline: bool = True


@dataclass(slots=True, kw_only=True)
class Link(Parent):
    kind: ClassVar[str] = "link"

    url: str
    title: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, kw_only=True)
class Image(Node):
    kind: ClassVar[str] = "image"

    url: str
    title: str | None = None
    alt: str = ""
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NodeRef:
    """Slot of a node inside its parent's child list."""

    node: Node
    parent: Parent | None = None
    index: int | None = None


def walk(root: Node) -> Iterator[NodeRef]:
    """Yield every node depth-first in document order, starting with ``root``."""
    stack: list[NodeRef] = [NodeRef(root)]
    while stack:
        ref = stack.pop()
        yield ref
        node = ref.node
        if isinstance(node, Parent):
            for index in range(len(node.children) - 1, -1, -1):
                stack.append(NodeRef(node.children[index], node, index))


def find_nodes(root: Node, kind: str) -> list[NodeRef]:
    """Return references to every node of ``kind`` below ``root``."""
    return [ref for ref in walk(root) if ref.node.kind == kind]


def replace_node(ref: NodeRef, replacement: Node) -> None:
    """Swap the referenced node for ``replacement`` inside its parent."""
    parent = ref.parent
    if parent is None or ref.index is None:
        raise InvalidNodeError("Cannot replace a node that has no parent")

    children = parent.children
    if ref.index < len(children) and children[ref.index] is ref.node:
        children[ref.index] = replacement
        return

    # The slot moved; fall back to an identity lookup within the same parent.
    for index, child in enumerate(children):
        if child is ref.node:
            children[index] = replacement
            return

    raise InvalidNodeError(f"{ref.node.kind} node is no longer attached to its parent")


__all__ = [
    "Code",
    "Element",
    "Html",
    "Image",
    "Link",
    "Node",
    "NodeRef",
    "Parent",
    "Position",
    "Root",
    "Text",
    "find_nodes",
    "replace_node",
    "walk",
]
