"""Per-document state shared across a transformation call."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .diagnostics import Diagnostic, DiagnosticEmitter, NullEmitter, Severity
from .nodes import Position


class OutputMode(Enum):
    """How rendered diagrams are handed back to the document."""

    FILE = "file"
    """Write an image next to the document and reference it."""

    INLINE = "inline"
    """Inline the rendered image markup into the document."""


@dataclass
class DocumentContext:
    """Paths, output mode and diagnostics for the document being transformed."""

    source_path: Path
    output_dir: Path | None = None
    output_mode: OutputMode = OutputMode.FILE
    diagnostics: list[Diagnostic] = field(default_factory=list)
    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)

    def __post_init__(self) -> None:
        self.source_path = Path(self.source_path)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @property
    def source_dir(self) -> Path:
        return self.source_path.parent

    @property
    def errors(self) -> list[Diagnostic]:
        return [entry for entry in self.diagnostics if entry.severity is Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return any(entry.severity is Severity.ERROR for entry in self.diagnostics)

    def info(self, message: str, position: Position | None = None) -> Diagnostic:
        """Record an informational diagnostic and forward it to the emitter."""
        diagnostic = Diagnostic(Severity.INFO, message, position)
        self.diagnostics.append(diagnostic)
        self.emitter.event(
            "diagram_replaced",
            {
                "message": message,
                "position": diagnostic.location,
                "source": str(self.source_path),
            },
        )
        return diagnostic

    def error(self, exc: BaseException | str, position: Position | None = None) -> Diagnostic:
        """Record an error diagnostic, passing the underlying error text through."""
        exception = exc if isinstance(exc, BaseException) else None
        message = str(exc).strip() or type(exc).__name__
        diagnostic = Diagnostic(Severity.ERROR, message, position, exception=exception)
        self.diagnostics.append(diagnostic)
        self.emitter.error(str(diagnostic), exception)
        return diagnostic


def resolve_destination(context: DocumentContext) -> Path:
    """Return the directory rendered diagrams are written to."""
    if context.output_dir is not None:
        return context.output_dir
    return context.source_dir


__all__ = ["DocumentContext", "OutputMode", "resolve_destination"]
