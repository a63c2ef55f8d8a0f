# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_property, make_valuation, make_loan_terms
"""

from .utils import (
    make_assumptions,
    make_listing,
    make_loan_terms,
    make_market_conditions,
    make_market_statistics,
    make_property,
    make_rental,
    make_valuation,
)

__all__ = [
    "make_assumptions",
    "make_listing",
    "make_loan_terms",
    "make_market_conditions",
    "make_market_statistics",
    "make_property",
    "make_rental",
    "make_valuation",
]
