"""Public API surface for programmatic conversions."""

from __future__ import annotations

from .service import (
    ConversionRequest,
    ConversionResponse,
    ConversionService,
    UnsupportedInputError,
    resolve_output_mode,
)


__all__ = [
    "ConversionRequest",
    "ConversionResponse",
    "ConversionService",
    "UnsupportedInputError",
    "resolve_output_mode",
]
