# valuation_engine/core/valuation/tables.py
"""
Piecewise coefficient tables for the rule-based valuation model.

Every threshold lives in an ordered tuple so breakpoints can be audited and
tested in isolation. Comparison direction is part of each table's contract and
is noted next to it.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Final, NamedTuple

from valuation_engine.schemas.models import ConditionTier, PropertyCategory

_NEW = ConditionTier.NEW_LUXURY
_RENO = ConditionTier.RENOVATED
_WELL = ConditionTier.WELL_MAINTAINED
_ORIG = ConditionTier.ORIGINAL
_FIX = ConditionTier.FIXER_UPPER

# ----------------------------
# Size → price-per-area multiplier (living_area < upper)
# ----------------------------

SIZE_BANDS: Final[tuple[tuple[float, float], ...]] = (
    (1000.0, 1.18),
    (1500.0, 1.10),
    (2000.0, 1.05),
    (2500.0, 1.00),
    (3500.0, 0.96),
    (5000.0, 0.92),
    (math.inf, 0.88),
)


def size_multiplier(living_area: float) -> float:
    for upper, mult in SIZE_BANDS:
        if living_area < upper:
            return mult
    return SIZE_BANDS[-1][1]


# ----------------------------
# Age / condition depreciation (age <= max_age)
# factor = base - slope * (age - origin), floored at AGE_FACTOR_FLOOR
# ----------------------------


class AgeCurve(NamedTuple):
    base: float
    slope: float


class AgeBand(NamedTuple):
    max_age: float
    origin: int
    curves: MappingProxyType
    fallback: AgeCurve


AGE_FACTOR_FLOOR: Final[float] = 0.5


def _band(max_age: float, origin: int, fallback: AgeCurve, **by_tier: AgeCurve) -> AgeBand:
    curves: dict[ConditionTier, AgeCurve] = {}
    for name, curve in by_tier.items():
        for tier in _TIER_GROUPS[name]:
            curves[tier] = curve
    return AgeBand(max_age, origin, MappingProxyType(curves), fallback)


_TIER_GROUPS: Final = MappingProxyType(
    {
        "premium": (_NEW, _RENO),
        "renovated": (_RENO,),
        "well_or_new": (_WELL, _NEW),
        "well": (_WELL,),
    }
)

AGE_BANDS: Final[tuple[AgeBand, ...]] = (
    _band(5, 0, AgeCurve(1.08, 0.012), premium=AgeCurve(1.12, 0.015)),
    _band(15, 0, AgeCurve(0.98, 0.003), premium=AgeCurve(1.05, 0.003)),
    _band(30, 15, AgeCurve(0.88, 0.015), well_or_new=AgeCurve(0.95, 0.012), renovated=AgeCurve(1.02, 0.008)),
    _band(50, 30, AgeCurve(0.65, 0.010), well=AgeCurve(0.75, 0.008), renovated=AgeCurve(0.90, 0.006)),
    _band(math.inf, 50, AgeCurve(0.60, 0.005), premium=AgeCurve(0.85, 0.0), well=AgeCurve(0.68, 0.0)),
)


def age_factor(age: float, condition: ConditionTier | None) -> float:
    """Depreciation multiplier for a property of the given age and condition."""
    for band in AGE_BANDS:
        if age <= band.max_age:
            curve = band.curves.get(condition, band.fallback)
            return max(AGE_FACTOR_FLOOR, curve.base - curve.slope * (age - band.origin))
    raise AssertionError("unreachable: last age band is open-ended")


# ----------------------------
# Condition tier → value multiplier
# ----------------------------

CONDITION_FACTORS: Final = MappingProxyType(
    {
        _NEW: 1.15,
        _RENO: 1.08,
        _WELL: 1.00,
        _ORIG: 0.91,
        _FIX: 0.79,
    }
)


def condition_factor(condition: ConditionTier | None) -> float:
    return CONDITION_FACTORS.get(condition, 1.0)


CATEGORY_FACTORS: Final = MappingProxyType(
    {
        PropertyCategory.DETACHED: 1.0,
        PropertyCategory.ATTACHED: 0.91,
    }
)


def category_factor(category: PropertyCategory | None) -> float:
    return CATEGORY_FACTORS.get(category, 1.0)


# ----------------------------
# Bedrooms / bathrooms
# expected = clamp(floor(area / per_room), lo, hi); surplus > threshold → discount
# ----------------------------

EXPECTED_BEDROOMS: Final = (500.0, 2.0, 5.0)
EXPECTED_BATHROOMS: Final = (700.0, 1.5, 4.0)

# (surplus threshold, multiplier), checked in order (surplus > threshold)
BEDROOM_SURPLUS_DISCOUNTS: Final[tuple[tuple[float, float], ...]] = ((1.0, 0.85), (0.0, 0.95))
BATHROOM_SURPLUS_DISCOUNTS: Final[tuple[tuple[float, float], ...]] = ((0.5, 0.90),)


def expected_rooms(living_area: float, rule: tuple[float, float, float]) -> float:
    per_room, lo, hi = rule
    return max(lo, min(hi, float(math.floor(living_area / per_room))))


def surplus_discount(surplus: float, table: tuple[tuple[float, float], ...]) -> float:
    for threshold, mult in table:
        if surplus > threshold:
            return mult
    return 1.0


# ----------------------------
# Lot premium: marginal rate per band (lower < lot_area <= upper)
# ----------------------------

LOT_FREE_ALLOWANCE: Final[float] = 4000.0

LOT_BANDS: Final[tuple[tuple[float, float, float], ...]] = (
    # (lower, upper, fraction of lot value per area unit)
    (4000.0, 8000.0, 0.85),
    (8000.0, 15000.0, 0.65),
    (15000.0, math.inf, 0.45),
)


def lot_premium(lot_area: float, lot_value_per_area_unit: float) -> float:
    premium = 0.0
    for lower, upper, rate in LOT_BANDS:
        if lot_area <= lower:
            break
        premium += (min(lot_area, upper) - lower) * lot_value_per_area_unit * rate
    return premium


# ----------------------------
# Market momentum
# ----------------------------

SUPPLY_BASELINE_MONTHS: Final[float] = 3.5
SUPPLY_WEIGHT: Final[float] = 0.04
DEMAND_BASELINE_S2L: Final[float] = 0.97
DEMAND_WEIGHT: Final[float] = 1.5
SENTIMENT_WEIGHT: Final[float] = 0.12
MOMENTUM_BOUNDS: Final[tuple[float, float]] = (0.85, 1.25)

# Defaults when market statistics are missing
DEFAULT_SALE_TO_LIST: Final[float] = 1.0
DEFAULT_MONTHS_OF_SUPPLY: Final[float] = 2.5
DEFAULT_SENTIMENT: Final[float] = 0.02

CONFIDENCE_BAND: Final[float] = 0.03
SENTIMENT_GROWTH_WEIGHT: Final[float] = 0.015
FORECAST_YEARS: Final[int] = 5

# ----------------------------
# Rule-based rent and yield
# ----------------------------

RENT_PER_AREA: Final[float] = 2.45

RENT_BEDROOM_MULTIPLIERS: Final = MappingProxyType({1: 1.28, 2: 1.18, 3: 1.0, 4: 1.15, 5: 1.35})

RENT_CONDITION_BOOST: Final = MappingProxyType(
    {
        _NEW: 1.15,
        _RENO: 1.08,
        _WELL: 1.00,
        _ORIG: 0.94,
        _FIX: 0.85,
    }
)

YIELD_INSURANCE_RATE: Final[float] = 0.003
YIELD_MAINTENANCE_NEWER: Final[float] = 0.006
YIELD_MAINTENANCE_OLDER: Final[float] = 0.015
NEWER_PROPERTY_AGE: Final[int] = 15
HOA_MONTHLY_ATTACHED: Final[float] = 250.0

# (net yield % strictly above, grade), checked in order
GRADE_THRESHOLDS: Final[tuple[tuple[float, str], ...]] = ((4.5, "A+"), (3.5, "A"), (2.5, "B+"))
FLOOR_GRADE: Final[str] = "B"


def grade_for(net_yield: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if net_yield > threshold:
            return grade
    return FLOOR_GRADE


def uses_newer_maintenance(age: float, condition: ConditionTier | None) -> bool:
    return age < NEWER_PROPERTY_AGE or condition is _RENO
