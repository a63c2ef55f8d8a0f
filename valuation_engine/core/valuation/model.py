# valuation_engine/core/valuation/model.py
"""
Rule-based property valuation.

Inputs:
  - PropertyInput    : size, lot, rooms, age, condition, category
  - MarketStatistics : price per area, sale-to-list, supply, sentiment (all optional)
  - GeoProfile       : location coefficients (resolved from the location code if omitted)

Output:
  - ValuationResult  : point estimate with a fixed ±3% band, 0..5 year forecast,
                       rule-based rent and yield grade

Design goals
------------
- Deterministic: identical inputs give bit-identical outputs (no clock, no randomness).
- Tolerant: every missing market input degrades to a documented default.
- Auditable: all breakpoints live in tables.py.
"""

from __future__ import annotations

import logging
import math
from typing import Final

from valuation_engine.core.errors import require_positive
from valuation_engine.core.geo import resolve
from valuation_engine.schemas.models import (
    GeoProfile,
    MarketStatistics,
    PropertyCategory,
    PropertyInput,
    ValuationResult,
)

from . import tables as t

logger = logging.getLogger(__name__)

# Reference year for age calculations; pass as_of_year to value as of another year.
DEFAULT_AS_OF_YEAR: Final[int] = 2026
BASE_SCHOOL_RATING: Final[float] = 7.5


# ----------------------------
# Market inputs with defaults
# ----------------------------


def _positive_or(value: float | None, default: float) -> float:
    return float(value) if value is not None and value > 0 else default


def _market_inputs(market: MarketStatistics | None, geo: GeoProfile) -> tuple[float, float, float, float]:
    """Return (price_per_area, sale_to_list, months_of_supply, sentiment) with defaults applied."""
    m = market or MarketStatistics()
    ppa = _positive_or(m.median_price_per_area, geo.default_price_per_area)
    s2l = _positive_or(m.sale_to_list_ratio, t.DEFAULT_SALE_TO_LIST)
    supply = _positive_or(m.months_of_supply, t.DEFAULT_MONTHS_OF_SUPPLY)
    sentiment = m.sentiment_score if m.sentiment_score else t.DEFAULT_SENTIMENT
    return ppa, s2l, supply, float(sentiment)


# ----------------------------
# Components
# ----------------------------


def bed_bath_value(bedrooms: int, bathrooms: float, living_area: float, geo: GeoProfile) -> float:
    """Room contribution, discounted when rooms outnumber what the floor area supports."""
    expected_beds = t.expected_rooms(living_area, t.EXPECTED_BEDROOMS)
    expected_baths = t.expected_rooms(living_area, t.EXPECTED_BATHROOMS)

    bed_mult = t.surplus_discount(bedrooms - expected_beds, t.BEDROOM_SURPLUS_DISCOUNTS)
    bath_mult = t.surplus_discount(bathrooms - expected_baths, t.BATHROOM_SURPLUS_DISCOUNTS)

    return bedrooms * geo.bedroom_value * bed_mult + bathrooms * geo.bathroom_value * bath_mult


def market_momentum(sale_to_list: float, months_of_supply: float, sentiment: float) -> float:
    supply_pressure = max(0.0, (t.SUPPLY_BASELINE_MONTHS - months_of_supply) * t.SUPPLY_WEIGHT)
    demand_heat = (sale_to_list - t.DEMAND_BASELINE_S2L) * t.DEMAND_WEIGHT
    sentiment_boost = sentiment * t.SENTIMENT_WEIGHT
    lo, hi = t.MOMENTUM_BOUNDS
    return max(lo, min(hi, 1.0 + supply_pressure + demand_heat + sentiment_boost))


def forecast_series(value: float, growth: float, years: int = t.FORECAST_YEARS) -> tuple[float, ...]:
    return tuple(value * (1.0 + growth) ** i for i in range(years + 1))


def rule_based_rent(prop: PropertyInput) -> float:
    bed_mult = t.RENT_BEDROOM_MULTIPLIERS.get(prop.bedrooms, 1.0)
    boost = t.RENT_CONDITION_BOOST.get(prop.condition, 1.0)
    return prop.living_area * t.RENT_PER_AREA * bed_mult * boost


# ----------------------------
# Public API
# ----------------------------


def estimate_value(
    prop: PropertyInput,
    market: MarketStatistics | None = None,
    geo: GeoProfile | None = None,
    *,
    as_of_year: int = DEFAULT_AS_OF_YEAR,
) -> ValuationResult:
    """
    Estimate market value for one property.

    Raises:
        InvalidInputError: living_area is not > 0 (a caller bug, not a data gap).
    """
    area = require_positive("living_area", prop.living_area)
    geo = geo or resolve(prop.location_code)
    ppa, s2l, supply, sentiment = _market_inputs(market, geo)

    age = max(0, as_of_year - prop.year_built)

    size_adjusted_ppa = ppa * t.size_multiplier(area)
    rooms = bed_bath_value(prop.bedrooms, prop.bathrooms, area, geo)
    lot = t.lot_premium(prop.lot_area, geo.lot_value_per_area_unit)
    base_value = size_adjusted_ppa * area + rooms + lot

    age_mult = t.age_factor(age, prop.condition)
    momentum = market_momentum(s2l, supply, sentiment)
    cond_mult = t.condition_factor(prop.condition)

    value = base_value * age_mult * momentum * cond_mult * geo.amenity_multiplier * t.category_factor(prop.category)

    growth = max(0.0, geo.base_appreciation_rate + sentiment * t.SENTIMENT_GROWTH_WEIGHT)

    # Rule-based investment view used for the grade
    rent = rule_based_rent(prop)
    tax = value * geo.tax_rate
    insurance = value * t.YIELD_INSURANCE_RATE
    maint_rate = t.YIELD_MAINTENANCE_NEWER if t.uses_newer_maintenance(age, prop.condition) else t.YIELD_MAINTENANCE_OLDER
    maintenance = value * maint_rate
    hoa = 0.0 if prop.category is PropertyCategory.DETACHED else t.HOA_MONTHLY_ATTACHED
    annual_expenses = tax + insurance + maintenance + hoa * 12.0
    net_yield = (rent * 12.0 - annual_expenses) / value * 100.0

    logger.debug(
        "valued %s (%s): base=%.0f age=%.3f momentum=%.3f cond=%.2f -> %.0f",
        prop.location_code or "<none>",
        geo.name,
        base_value,
        age_mult,
        momentum,
        cond_mult,
        value,
    )

    return ValuationResult(
        point_estimate=value,
        low_bound=value * (1.0 - t.CONFIDENCE_BAND),
        high_bound=value * (1.0 + t.CONFIDENCE_BAND),
        forecast=forecast_series(value, growth),
        grade=t.grade_for(net_yield),
        county=geo.name,
        geo=geo,
        subject=prop,
        as_of_year=as_of_year,
        base_value=base_value,
        age_factor=age_mult,
        market_momentum=momentum,
        condition_factor=cond_mult,
        forecast_growth_rate=growth,
        estimated_rent=rent,
        property_tax=tax,
        insurance=insurance,
        maintenance=maintenance,
        hoa_monthly=hoa,
        net_yield=net_yield,
        school_rating=int(math.floor(BASE_SCHOOL_RATING + geo.niche_score)),
        months_of_supply=supply,
        sale_to_list_ratio=s2l,
        news=list((market.recent_news if market else None) or []),
    )
