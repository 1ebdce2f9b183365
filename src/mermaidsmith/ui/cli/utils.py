"""Filesystem helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path


def determine_output_target(
    source: Path,
    output: Path | None,
    output_dir: Path | None,
) -> Path:
    """Return the file the transformed document is written to."""
    if output is not None:
        if output.exists() and output.is_dir():
            return output / f"{source.stem}.html"
        return output

    directory = output_dir if output_dir is not None else source.parent
    target = directory / f"{source.stem}.html"
    if target.resolve() == source.resolve():
        target = directory / f"{source.stem}.mermaid.html"
    return target


def write_output_file(target: Path, content: str) -> None:
    """Persist HTML content to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write HTML output to '{target}': {exc}") from exc


__all__ = ["determine_output_target", "write_output_file"]
