# valuation_engine/core/finance/__init__.py

from .amortization import (
    YearDebt,
    amortization_schedule,
    monthly_payment,
)
from .engine import DEFAULT_HORIZON_YEARS, analyze
from .irr import irr, npv

__all__ = [
    "analyze",
    "DEFAULT_HORIZON_YEARS",
    "YearDebt",
    "amortization_schedule",
    "monthly_payment",
    "irr",
    "npv",
]
