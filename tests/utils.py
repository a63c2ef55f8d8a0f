# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from typing import Any

from valuation_engine.core.valuation.model import estimate_value
from valuation_engine.schemas.models import (
    ComparableListing,
    ConditionTier,
    LoanTerms,
    MarketConditions,
    MarketStatistics,
    OperatingAssumptions,
    PropertyCategory,
    PropertyInput,
    RentalEstimate,
    ValuationResult,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_ZIP = "98103"  # King county
DEFAULT_PRICE = 500_000.0
DEFAULT_RENT = 2_800.0
DEFAULT_DOWN = 0.20
DEFAULT_RATE = 0.07
DEFAULT_TERM = 30
AS_OF_YEAR = 2026


# -----------------------------
# Property & market factories
# -----------------------------


def make_property(**overrides: Any) -> PropertyInput:
    base: dict[str, Any] = {
        "location_code": DEFAULT_ZIP,
        "living_area": 1800.0,
        "lot_area": 5000.0,
        "bedrooms": 3,
        "bathrooms": 2.0,
        "year_built": 2000,
        "category": PropertyCategory.DETACHED,
        "condition": ConditionTier.WELL_MAINTAINED,
    }
    base.update(overrides)
    return PropertyInput(**base)


def make_market_statistics(**overrides: Any) -> MarketStatistics:
    base: dict[str, Any] = {
        "median_price_per_area": 480.0,
        "sale_to_list_ratio": 1.0,
        "months_of_supply": 2.5,
        "sentiment_score": 0.02,
    }
    base.update(overrides)
    return MarketStatistics(**base)


def make_market_conditions(**overrides: Any) -> MarketConditions:
    """Neutral market: no rule fires on its own."""
    base: dict[str, Any] = {
        "zipcode": DEFAULT_ZIP,
        "median_price": 650_000.0,
        "price_per_area": 400.0,
        "days_on_market": 40.0,
        "months_supply": 2.5,
        "year_over_year_appreciation": 2.5,
        "average_rent": 2_700.0,
        "vacancy_rate": 7.5,
        "population": 50_000,
        "median_income": 65_000.0,
        "unemployment_rate": 5.0,
        "crime_index": 40.0,
        "school_rating": 7.0,
    }
    base.update(overrides)
    return MarketConditions(**base)


def make_listing(price: float, living_area: float | None = 1500.0, address: str | None = None) -> ComparableListing:
    return ComparableListing(address=address, price=price, living_area=living_area)


# -----------------------------
# Financial factories
# -----------------------------


def make_rental(monthly_rent: float = DEFAULT_RENT, **overrides: Any) -> RentalEstimate:
    return RentalEstimate(monthly_rent=monthly_rent, **overrides)


def make_loan_terms(**overrides: Any) -> LoanTerms:
    base: dict[str, Any] = {
        "purchase_price": DEFAULT_PRICE,
        "down_payment_fraction": DEFAULT_DOWN,
        "annual_interest_rate": DEFAULT_RATE,
        "amortization_years": DEFAULT_TERM,
    }
    base.update(overrides)
    return LoanTerms(**base)


def make_assumptions(**overrides: Any) -> OperatingAssumptions:
    return OperatingAssumptions(**overrides)


def make_valuation(prop: PropertyInput | None = None, market: MarketStatistics | None = None) -> ValuationResult:
    return estimate_value(prop or make_property(), market or make_market_statistics(), as_of_year=AS_OF_YEAR)


def expected_payment(principal: float, annual_rate: float, years: int) -> float:
    """Reference annuity formula, written independently of the engine."""
    r = annual_rate / 12.0
    n = years * 12
    return principal * r / (1.0 - (1.0 + r) ** -n)


# -----------------------------
# Canonical payloads
# -----------------------------


def make_inputs_payload(**run: Any) -> dict[str, Any]:
    """A flat AppInputs-shaped JSON payload using loose market keys."""
    payload: dict[str, Any] = {
        "property": {
            "location_code": DEFAULT_ZIP,
            "living_area": 1800,
            "lot_area": 5000,
            "bedrooms": 3,
            "bathrooms": 2,
            "year_built": 2000,
            "category": "Single Family House",
            "condition": "Well Maintained",
        },
        "rental": {"monthly_rent": DEFAULT_RENT},
        "loan": {"purchase_price": DEFAULT_PRICE},
        "market_statistics": {"median_ppsf": 480, "sale_to_list_ratio": 1.0, "months_of_supply": 2.5},
        "market": {"zipcode": DEFAULT_ZIP, "vacancyRate": 4.0, "daysOnMarket": 25},
    }
    if run:
        payload["run"] = run
    return payload
