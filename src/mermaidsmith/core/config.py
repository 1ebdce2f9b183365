"""Configuration models used by the diagram transformer.

TransformerConfig

`simple` (`bool`)
: Embed diagrams as `<div class="mermaid">` wrappers instead of rendering
  them. Code blocks, links and images all become wrappers and the Mermaid CLI
  is never invoked.

`max_concurrency` (`int | None`)
: Upper bound on renderer invocations running at once within a phase. Leave
  unset to launch every match of a phase immediately.

`renderer` (`RendererConfig`)
: Settings forwarded to the Mermaid CLI renderer.

RendererConfig

`executable` (`str | None`)
: Explicit path to `mmdc`. When omitted the executable is looked up on `PATH`
  and then in well-known install locations.

`background` (`str`)
: Background colour passed to `mmdc -b`.

`config_file` (`Path | None`)
: Mermaid configuration file passed to `mmdc -c`.

`extra_args` (`list[str]`)
: Additional arguments appended to every `mmdc` invocation.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class RendererConfig(BaseModel):
    """Options controlling the external Mermaid CLI."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    executable: str | None = None
    background: str = "transparent"
    config_file: Path | None = None
    extra_args: list[str] = Field(default_factory=list)


class TransformerConfig(BaseModel):
    """Options bound to a transformer instance."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    simple: bool = False
    max_concurrency: int | None = Field(default=None, ge=1)
    renderer: RendererConfig = Field(default_factory=RendererConfig)


__all__ = ["RendererConfig", "TransformerConfig"]
