from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from mermaidsmith.core.exceptions import RenderError


FAKE_SVG = '<svg xmlns="http://www.w3.org/2000/svg" id="fake"></svg>'


class FakeRenderer:
    """Renderer double writing a fixed SVG and recording every invocation."""

    def __init__(
        self,
        *,
        markup: str = FAKE_SVG,
        fail_when: Callable[[Path], bool] | None = None,
        delay: Callable[[Path], float] | None = None,
    ) -> None:
        self.markup = markup
        self.fail_when = fail_when
        self.delay = delay
        self.calls: list[tuple[Path, Path]] = []
        self.sources: list[str] = []
        self.active = 0
        self.peak = 0

    async def render(self, source: Path, target: Path) -> None:
        self.calls.append((source, target))
        if source.exists():
            self.sources.append(source.read_text(encoding="utf-8"))
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.delay is not None:
                await asyncio.sleep(self.delay(source))
            else:
                await asyncio.sleep(0)
            if self.fail_when is not None and self.fail_when(source):
                raise RenderError("Mermaid CLI exited with status 1: Parse error on line 1")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.markup, encoding="utf-8")
        finally:
            self.active -= 1


def source_contains(token: str) -> Callable[[Path], bool]:
    def predicate(source: Path) -> bool:
        return source.exists() and token in source.read_text(encoding="utf-8")

    return predicate


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()
