# valuation_engine/core/errors.py
"""
Typed errors for the valuation & investment engine.

Exports
-------
- EngineError, InvalidInputError, MissingMarketDataError
- ENGINE_ERRORS
- require_positive(name, value)
"""

from __future__ import annotations

import math

# =========================
# Exception types
# =========================


class EngineError(ValueError):
    """Base class for engine failures. Subclasses ValueError so callers can catch either."""


class InvalidInputError(EngineError):
    """A required economic quantity is missing, non-finite or not strictly positive."""

    def __init__(self, field: str, value: object, reason: str = "must be > 0") -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason} (got {value!r})")


class MissingMarketDataError(EngineError):
    """Raised only by strict market parsing; the engine itself degrades to defaults."""


# Selector tuple for grouped exception handling
ENGINE_ERRORS = (
    InvalidInputError,
    MissingMarketDataError,
)


def require_positive(field: str, value: float | int | None) -> float:
    """Return value as float, or raise InvalidInputError when it is not a finite number > 0."""
    if value is None:
        raise InvalidInputError(field, value, "is required")
    v = float(value)
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidInputError(field, value)
    return v


__all__ = [
    "EngineError",
    "InvalidInputError",
    "MissingMarketDataError",
    "ENGINE_ERRORS",
    "require_positive",
]
