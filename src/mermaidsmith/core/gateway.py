"""Render gateway wrapping one external renderer invocation per diagram."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import hashlib
import hmac
import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from .context import OutputMode
from .diagnostics import PLUGIN_NAME
from .exceptions import DiagramFileError


logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".mmd"
IMAGE_SUFFIX = ".svg"


@runtime_checkable
class DiagramRenderer(Protocol):
    """Port implemented by anything able to turn a diagram file into an image."""

    async def render(self, source: Path, target: Path) -> None: ...


def diagram_id(value: str) -> str:
    """Return the content-addressed identifier used to name diagram files."""
    digest = hmac.new(PLUGIN_NAME.encode("utf-8"), value.encode("utf-8"), hashlib.sha1)
    return digest.hexdigest()


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """Diagram to render, given either as text or as an existing file."""

    destination: Path
    source: str | None = None
    source_path: Path | None = None
    mode: OutputMode = OutputMode.FILE

    def __post_init__(self) -> None:
        if (self.source is None) == (self.source_path is None):
            raise ValueError("RenderRequest needs exactly one of 'source' or 'source_path'")
        if self.source_path is not None and self.mode is OutputMode.INLINE:
            raise ValueError("File-based render requests only support file output")


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of a successful render: a relative image path or inline markup."""

    path: str | None = None
    markup: str | None = None

    def __post_init__(self) -> None:
        if (self.path is None) == (self.markup is None):
            raise ValueError("RenderResult holds exactly one of 'path' or 'markup'")

    @property
    def inline(self) -> bool:
        return self.markup is not None


def _write_source(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class RenderGateway:
    """Name, write, render and clean up diagram artefacts."""

    def __init__(self, renderer: DiagramRenderer) -> None:
        self.renderer = renderer

    async def render(self, request: RenderRequest) -> RenderResult:
        """Dispatch a render request to the matching entry point."""
        if request.source_path is not None:
            return await self.render_from_file(request.source_path, request.destination)
        assert request.source is not None
        return await self.render_from_text(request.source, request.destination, request.mode)

    async def render_from_text(
        self,
        source: str,
        destination: Path | str,
        mode: OutputMode = OutputMode.FILE,
    ) -> RenderResult:
        """Render diagram source text into ``destination``.

        The source is written to ``{id}.mmd``, rendered to ``{id}.svg`` and the
        temporary source is removed. A failure at any step skips the rest,
        including the removal of the temporary file.
        """
        destination = Path(destination)
        unique = diagram_id(source)
        source_path = destination / f"{unique}{SOURCE_SUFFIX}"
        image_name = f"{unique}{IMAGE_SUFFIX}"
        image_path = destination / image_name

        try:
            await asyncio.to_thread(_write_source, source_path, source)
        except OSError as exc:
            raise DiagramFileError(f"Failed to write diagram source '{source_path}': {exc}") from exc

        await self.renderer.render(source_path, image_path)

        try:
            await asyncio.to_thread(source_path.unlink)
        except OSError as exc:
            raise DiagramFileError(
                f"Failed to remove temporary diagram source '{source_path}': {exc}"
            ) from exc

        logger.debug("Rendered %s from inline source", image_path)

        if mode is OutputMode.INLINE:
            try:
                markup = await asyncio.to_thread(image_path.read_text, encoding="utf-8")
            except OSError as exc:
                raise DiagramFileError(
                    f"Failed to read rendered diagram '{image_path}': {exc}"
                ) from exc
            return RenderResult(markup=markup)

        return RenderResult(path=f"./{image_name}")

    async def render_from_file(
        self,
        source_path: Path | str,
        destination: Path | str,
    ) -> RenderResult:
        """Render an existing diagram file into ``destination``.

        The output name is keyed on the path string rather than the file
        content, so a given path always maps to the same image name.
        """
        unique = diagram_id(os.fspath(source_path))
        image_name = f"{unique}{IMAGE_SUFFIX}"
        destination = Path(destination)
        image_path = destination / image_name

        try:
            await asyncio.to_thread(destination.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise DiagramFileError(
                f"Failed to create output directory '{destination}': {exc}"
            ) from exc

        await self.renderer.render(Path(source_path), image_path)
        logger.debug("Rendered %s from %s", image_path, source_path)
        return RenderResult(path=f"./{image_name}")


__all__ = [
    "IMAGE_SUFFIX",
    "SOURCE_SUFFIX",
    "DiagramRenderer",
    "RenderGateway",
    "RenderRequest",
    "RenderResult",
    "diagram_id",
]
