# valuation_engine/core/valuation/__init__.py

from .model import DEFAULT_AS_OF_YEAR, estimate_value

__all__ = [
    "DEFAULT_AS_OF_YEAR",
    "estimate_value",
]
