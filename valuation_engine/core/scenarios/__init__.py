# valuation_engine/core/scenarios/__init__.py

from .generator import DEFAULT_OVERLAYS, apply_overlay, generate_scenarios, validate_overlays

__all__ = [
    "DEFAULT_OVERLAYS",
    "apply_overlay",
    "generate_scenarios",
    "validate_overlays",
]
