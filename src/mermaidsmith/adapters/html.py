"""Convert HTML fragments to the typed document tree and back."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from html import escape

from bs4 import BeautifulSoup
from bs4.element import (
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    PreformattedString,
    Script,
    Stylesheet,
    Tag,
)

from mermaidsmith.core.nodes import (
    Code,
    Element,
    Html,
    Image,
    Link,
    Node,
    Parent,
    Position,
    Root,
    Text,
)


VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

_LANGUAGE_PREFIXES = ("language-", "lang-")


def tree_from_html(html: str, *, track_positions: bool = False) -> Root:
    """Parse ``html`` into a :class:`Root` tree.

    Source positions refer to the HTML itself and are only attached when
    ``track_positions`` is set.
    """
    soup = BeautifulSoup(html, "html.parser")
    return Root(children=_convert_children(soup.contents, track_positions))


def tree_to_html(root: Node) -> str:
    """Serialise a tree back to HTML."""
    parts: list[str] = []
    _serialise(root, parts)
    return "".join(parts)


# --------------------------------------------------------------------- parsing


def _convert_children(elements: Iterable[PageElement], track_positions: bool) -> list[Node]:
    children: list[Node] = []
    for element in elements:
        node = _convert(element, track_positions)
        if node is not None:
            children.append(node)
    return children


def _convert(element: PageElement, track_positions: bool) -> Node | None:
    match element:
        case Doctype():
            return Html(value=f"<!DOCTYPE {element}>")
        case Declaration():
            return Html(value=f"<!{element}>")
        case PreformattedString():
            return Html(value=element.output_ready())
        case Script() | Stylesheet():
            return Html(value=str(element))
        case NavigableString():
            return Text(value=str(element))
        case Tag():
            return _convert_tag(element, track_positions)
        case _:
            return None


def _convert_tag(tag: Tag, track_positions: bool) -> Node:
    position = _position(tag) if track_positions else None
    attributes = _attributes(tag.attrs)

    if tag.name == "pre":
        code = _single_code_child(tag)
        if code is not None:
            value = code.get_text()
            final_newline = value.endswith("\n")
            if final_newline:
                value = value[:-1]
            return Code(
                value=value,
                lang=_language(code),
                attributes=_attributes(code.attrs),
                container_attributes=attributes,
                final_newline=final_newline,
                position=position,
            )

    if tag.name == "a":
        url = attributes.pop("href", "")
        title = attributes.pop("title", None)
        return Link(
            url=url,
            title=title,
            attributes=attributes,
            children=_convert_children(tag.contents, track_positions),
            position=position,
        )

    if tag.name == "img":
        url = attributes.pop("src", "")
        title = attributes.pop("title", None)
        alt = attributes.pop("alt", "")
        return Image(url=url, title=title, alt=alt, attributes=attributes, position=position)

    return Element(
        tag=tag.name,
        attributes=attributes,
        children=_convert_children(tag.contents, track_positions),
        position=position,
    )


def _single_code_child(pre: Tag) -> Tag | None:
    if len(pre.contents) != 1:
        return None
    code = pre.contents[0]
    if not isinstance(code, Tag) or code.name != "code":
        return None
    # Highlighted blocks keep their markup as generic elements.
    if any(type(child) is not NavigableString for child in code.contents):
        return None
    return code


def _language(code: Tag) -> str | None:
    for css_class in code.get("class") or ():
        for prefix in _LANGUAGE_PREFIXES:
            if css_class.startswith(prefix) and len(css_class) > len(prefix):
                return css_class[len(prefix) :]
    return None


def _attributes(attrs: Mapping[str, object]) -> dict[str, str]:
    result: dict[str, str] = {}
    for key, value in attrs.items():
        if isinstance(value, list | tuple):
            result[key] = " ".join(str(item) for item in value)
        else:
            result[key] = "" if value is None else str(value)
    return result


def _position(tag: Tag) -> Position | None:
    line = getattr(tag, "sourceline", None)
    if line is None:
        return None
    column = getattr(tag, "sourcepos", None)
    return Position(line=line, column=(column or 0) + 1)


# --------------------------------------------------------------- serialising


def _render_attributes(attributes: Mapping[str, str | None]) -> str:
    rendered = []
    for key, value in attributes.items():
        if value is None:
            continue
        rendered.append(f' {key}="{escape(value, quote=True)}"')
    return "".join(rendered)


def _serialise(node: Node, parts: list[str]) -> None:
    match node:
        case Root():
            _serialise_children(node, parts)
        case Text():
            parts.append(escape(node.value, quote=False))
        case Html():
            parts.append(node.value)
        case Code():
            code_attributes = dict(node.attributes)
            if node.lang and "class" not in code_attributes:
                code_attributes["class"] = f"language-{node.lang}"
            body = escape(node.value, quote=False)
            if node.final_newline:
                body += "\n"
            parts.append(
                f"<pre{_render_attributes(node.container_attributes)}>"
                f"<code{_render_attributes(code_attributes)}>{body}</code></pre>"
            )
        case Link():
            attributes = {"href": node.url, "title": node.title, **node.attributes}
            parts.append(f"<a{_render_attributes(attributes)}>")
            _serialise_children(node, parts)
            parts.append("</a>")
        case Image():
            attributes = {
                "alt": node.alt,
                "src": node.url,
                "title": node.title,
                **node.attributes,
            }
            parts.append(f"<img{_render_attributes(attributes)} />")
        case Element():
            parts.append(f"<{node.tag}{_render_attributes(node.attributes)}")
            if node.tag in VOID_ELEMENTS:
                parts.append(" />")
                return
            parts.append(">")
            _serialise_children(node, parts)
            parts.append(f"</{node.tag}>")
        case _:
            raise TypeError(f"Cannot serialise {type(node).__name__} nodes")


def _serialise_children(node: Parent, parts: list[str]) -> None:
    for child in node.children:
        _serialise(child, parts)


__all__ = ["VOID_ELEMENTS", "tree_from_html", "tree_to_html"]
