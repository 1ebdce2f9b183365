from __future__ import annotations

import asyncio
import hashlib
import hmac
from pathlib import Path
import re

from conftest import FAKE_SVG, FakeRenderer
import pytest

from mermaidsmith.core.context import OutputMode
from mermaidsmith.core.exceptions import DiagramFileError, RenderError
from mermaidsmith.core.gateway import RenderGateway, RenderRequest, RenderResult, diagram_id


DIAGRAM = "graph TD;\n  A-->B;"


def test_diagram_id_is_keyed_sha1_hex() -> None:
    expected = hmac.new(b"mermaidsmith", DIAGRAM.encode("utf-8"), hashlib.sha1).hexdigest()
    assert diagram_id(DIAGRAM) == expected
    assert re.fullmatch(r"[0-9a-f]{40}", diagram_id(DIAGRAM))


def test_diagram_id_is_deterministic_and_discriminating() -> None:
    assert diagram_id(DIAGRAM) == diagram_id(DIAGRAM)
    assert diagram_id(DIAGRAM) != diagram_id(DIAGRAM + " ")


def test_render_from_text_writes_image_and_removes_source(
    tmp_path: Path, renderer: FakeRenderer
) -> None:
    gateway = RenderGateway(renderer)

    result = asyncio.run(gateway.render_from_text(DIAGRAM, tmp_path))

    unique = diagram_id(DIAGRAM)
    assert result == RenderResult(path=f"./{unique}.svg")
    assert not result.inline
    assert (tmp_path / f"{unique}.svg").read_text(encoding="utf-8") == FAKE_SVG
    assert not (tmp_path / f"{unique}.mmd").exists()
    assert renderer.sources == [DIAGRAM]
    assert renderer.calls == [(tmp_path / f"{unique}.mmd", tmp_path / f"{unique}.svg")]


def test_render_from_text_returns_markup_in_inline_mode(
    tmp_path: Path, renderer: FakeRenderer
) -> None:
    gateway = RenderGateway(renderer)

    result = asyncio.run(gateway.render_from_text(DIAGRAM, tmp_path, OutputMode.INLINE))

    assert result.inline
    assert result.markup == FAKE_SVG
    assert result.path is None


def test_render_from_text_creates_destination(tmp_path: Path, renderer: FakeRenderer) -> None:
    destination = tmp_path / "build" / "diagrams"
    gateway = RenderGateway(renderer)

    asyncio.run(gateway.render_from_text(DIAGRAM, destination))

    assert (destination / f"{diagram_id(DIAGRAM)}.svg").exists()


def test_render_failure_keeps_temporary_source(tmp_path: Path) -> None:
    gateway = RenderGateway(FakeRenderer(fail_when=lambda _source: True))

    with pytest.raises(RenderError, match="status 1"):
        asyncio.run(gateway.render_from_text(DIAGRAM, tmp_path))

    unique = diagram_id(DIAGRAM)
    assert (tmp_path / f"{unique}.mmd").read_text(encoding="utf-8") == DIAGRAM
    assert not (tmp_path / f"{unique}.svg").exists()


def test_unwritable_destination_is_reported(tmp_path: Path, renderer: FakeRenderer) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    gateway = RenderGateway(renderer)

    with pytest.raises(DiagramFileError, match="Failed to write diagram source"):
        asyncio.run(gateway.render_from_text(DIAGRAM, blocker / "out"))

    assert renderer.calls == []


def test_render_from_file_is_keyed_by_path(tmp_path: Path, renderer: FakeRenderer) -> None:
    source = tmp_path / "flow.mmd"
    source.write_text(DIAGRAM, encoding="utf-8")
    gateway = RenderGateway(renderer)

    first = asyncio.run(gateway.render_from_file(source, tmp_path / "out"))
    source.write_text("graph LR;\n  X-->Y;", encoding="utf-8")
    second = asyncio.run(gateway.render_from_file(source, tmp_path / "out"))

    expected = f"./{diagram_id(str(source))}.svg"
    assert first.path == expected
    assert second.path == expected
    assert renderer.calls[0] == (source, tmp_path / "out" / f"{diagram_id(str(source))}.svg")
    assert source.exists()


def test_render_from_file_accepts_string_paths(tmp_path: Path, renderer: FakeRenderer) -> None:
    source = tmp_path / "flow.mmd"
    source.write_text(DIAGRAM, encoding="utf-8")
    gateway = RenderGateway(renderer)

    result = asyncio.run(gateway.render_from_file(str(source), str(tmp_path)))

    assert result.path == f"./{diagram_id(str(source))}.svg"


def test_render_dispatches_on_request_shape(tmp_path: Path, renderer: FakeRenderer) -> None:
    source = tmp_path / "flow.mmd"
    source.write_text(DIAGRAM, encoding="utf-8")
    gateway = RenderGateway(renderer)

    from_text = asyncio.run(gateway.render(RenderRequest(destination=tmp_path, source=DIAGRAM)))
    from_file = asyncio.run(
        gateway.render(RenderRequest(destination=tmp_path, source_path=source))
    )

    assert from_text.path == f"./{diagram_id(DIAGRAM)}.svg"
    assert from_file.path == f"./{diagram_id(str(source))}.svg"


def test_render_request_requires_exactly_one_source(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        RenderRequest(destination=tmp_path)
    with pytest.raises(ValueError):
        RenderRequest(destination=tmp_path, source=DIAGRAM, source_path=tmp_path / "a.mmd")


def test_file_requests_cannot_be_inlined(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="file output"):
        RenderRequest(
            destination=tmp_path,
            source_path=tmp_path / "a.mmd",
            mode=OutputMode.INLINE,
        )


def test_render_result_holds_one_variant() -> None:
    with pytest.raises(ValueError):
        RenderResult()
    with pytest.raises(ValueError):
        RenderResult(path="./a.svg", markup="<svg/>")
