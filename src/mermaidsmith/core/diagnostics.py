"""Diagnostic records and emitters shared across the transformation pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any, Protocol, runtime_checkable

from .nodes import Position


logger = logging.getLogger(__name__)

PLUGIN_NAME = "mermaidsmith"


class Severity(Enum):
    """Classification of a recorded diagnostic."""

    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Message recorded against a document while it is transformed."""

    severity: Severity
    message: str
    position: Position | None = None
    origin: str = PLUGIN_NAME
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def location(self) -> str:
        return str(self.position) if self.position is not None else ""

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.position is not None else ""
        return f"{prefix}{self.message}"


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None and self.debug_enabled:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None and self.debug_enabled:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "diagram_replaced":
        message = data.get("message") or "diagram replaced"
        location = data.get("position")
        return f"{location}: {message}" if location else str(message)

    return None


__all__ = [
    "PLUGIN_NAME",
    "Diagnostic",
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "Severity",
    "format_event_message",
]
