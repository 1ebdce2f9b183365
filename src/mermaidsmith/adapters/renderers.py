"""Renderer implementations backing the render gateway."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import logging
from pathlib import Path
import shutil
import warnings

from mermaidsmith.core.config import RendererConfig
from mermaidsmith.core.exceptions import RendererNotFoundError, RenderError


logger = logging.getLogger(__name__)

MERMAID_CLI_NAMES: tuple[str, ...] = ("mmdc",)
MERMAID_CLI_HINT_PATHS: tuple[Path, ...] = (
    Path("/snap/bin/mmdc"),
    Path("/usr/local/bin/mmdc"),
)


def _resolve_cli(names: Sequence[str], hints: Sequence[Path]) -> tuple[str | None, bool]:
    """Return an executable path and whether it was discovered via $PATH."""
    for name in names:
        resolved = shutil.which(name)
        if resolved:
            return resolved, True
    for candidate in hints:
        if candidate and candidate.exists():
            return str(candidate), False
    return None, False


def _warn_add_to_path(command: str, path: str) -> None:
    """Emit a guidance warning when a CLI was found outside $PATH."""
    message = (
        f"Found '{command}' at '{path}'. Add this directory to PATH so mermaidsmith can "
        "detect it automatically."
    )
    warnings.warn(message, stacklevel=3)


async def _run_cli(command: list[str], *, description: str) -> None:
    """Execute a local CLI, raising a render error on failure."""
    logger.debug("Running %s", " ".join(command))
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise RenderError(f"Failed to execute {description}: {exc}") from exc

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        detail = stderr.decode("utf-8", "replace").strip() or stdout.decode(
            "utf-8", "replace"
        ).strip()
        message = f"{description} exited with status {process.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise RenderError(message)


class MermaidCliRenderer:
    """Render Mermaid diagrams with the official ``mmdc`` command line tool."""

    description = "Mermaid CLI"

    def __init__(
        self,
        executable: str,
        *,
        background: str = "transparent",
        config_file: Path | None = None,
        extra_args: Sequence[str] = (),
    ) -> None:
        self.executable = executable
        self.background = background
        self.config_file = config_file
        self.extra_args = tuple(extra_args)

    @classmethod
    def discover(cls, config: RendererConfig | None = None) -> MermaidCliRenderer:
        """Locate ``mmdc`` and return a renderer bound to it.

        Raises :class:`RendererNotFoundError` when no executable can be found.
        """
        config = config or RendererConfig()
        if config.executable:
            executable = shutil.which(config.executable)
            if executable is None:
                raise RendererNotFoundError(
                    f"Mermaid CLI executable '{config.executable}' could not be located."
                )
        else:
            executable, discovered_via_path = _resolve_cli(
                MERMAID_CLI_NAMES, MERMAID_CLI_HINT_PATHS
            )
            if executable is None:
                raise RendererNotFoundError(
                    "Mermaid CLI (mmdc) could not be located. Install it with "
                    "`npm install -g @mermaid-js/mermaid-cli` or pass its path explicitly."
                )
            if not discovered_via_path:
                _warn_add_to_path("mmdc", executable)

        return cls(
            executable,
            background=config.background,
            config_file=config.config_file,
            extra_args=config.extra_args,
        )

    def command(self, source: Path, target: Path) -> list[str]:
        """Return the argument vector rendering ``source`` into ``target``."""
        command = [
            self.executable,
            "-i",
            str(source),
            "-o",
            str(target),
            "-b",
            self.background,
        ]
        if self.config_file is not None:
            command.extend(["-c", str(self.config_file)])
        command.extend(self.extra_args)
        return command

    async def render(self, source: Path, target: Path) -> None:
        await _run_cli(self.command(source, target), description=self.description)
        if not target.exists():
            raise RenderError(f"{self.description} did not produce the expected file '{target}'.")


__all__ = ["MERMAID_CLI_HINT_PATHS", "MermaidCliRenderer"]
