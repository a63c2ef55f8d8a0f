# valuation_engine/core/geo/profiles.py
"""
Location coefficients keyed by county, with zip-code routing.

All tables are built once at import and exposed read-only (MappingProxyType over
frozen models), so lookups are safe from any thread.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

from valuation_engine.schemas.models import GeoProfile

DEFAULT_PROFILE_KEY: Final[str] = "Default"

_ZIP_TO_COUNTY: Final = MappingProxyType(
    {
        "98275": "Snohomish",
        "98012": "Snohomish",
        "98208": "Snohomish",
        "98052": "King",
        "98103": "King",
        "98004": "King",
        "98033": "King",
        "98402": "Pierce",
        "98391": "Pierce",
        "98682": "Clark",
    }
)

_PROFILES: Final = MappingProxyType(
    {
        "King": GeoProfile(
            name="King",
            tax_rate=0.0094,
            base_appreciation_rate=0.045,
            lot_value_per_area_unit=75.0,
            niche_score=0.6,
            school_premium=1.08,
            walkability_factor=1.05,
            job_proximity_factor=1.12,
            crime_discount=0.98,
            transit_premium=1.06,
            county_premium=1.15,
            default_price_per_area=465.0,
            bedroom_value=35_000.0,
            bathroom_value=25_000.0,
        ),
        "Snohomish": GeoProfile(
            name="Snohomish",
            tax_rate=0.0089,
            base_appreciation_rate=0.042,
            lot_value_per_area_unit=40.0,
            niche_score=0.4,
            school_premium=1.04,
            walkability_factor=1.02,
            job_proximity_factor=1.06,
            crime_discount=0.99,
            transit_premium=1.03,
            county_premium=1.08,
            default_price_per_area=385.0,
            bedroom_value=28_000.0,
            bathroom_value=20_000.0,
        ),
        "Pierce": GeoProfile(
            name="Pierce",
            tax_rate=0.0102,
            base_appreciation_rate=0.038,
            lot_value_per_area_unit=25.0,
            niche_score=0.2,
            school_premium=1.02,
            walkability_factor=1.01,
            job_proximity_factor=1.03,
            crime_discount=0.97,
            transit_premium=1.02,
            county_premium=1.0,
            default_price_per_area=310.0,
        ),
        "Clark": GeoProfile(
            name="Clark",
            tax_rate=0.0091,
            base_appreciation_rate=0.04,
            lot_value_per_area_unit=28.0,
            niche_score=0.3,
            school_premium=1.03,
            walkability_factor=1.02,
            job_proximity_factor=1.04,
            crime_discount=0.98,
            transit_premium=1.02,
            county_premium=1.03,
        ),
        DEFAULT_PROFILE_KEY: GeoProfile(
            name=DEFAULT_PROFILE_KEY,
            tax_rate=0.0092,
            base_appreciation_rate=0.04,
            lot_value_per_area_unit=35.0,
        ),
    }
)

_COUNTY_BY_LOWER: Final = MappingProxyType({k.lower(): k for k in _PROFILES})

# Zip-level fallback school ratings (average on a 10-point scale)
_SCHOOL_RATINGS: Final = MappingProxyType(
    {
        "98004": 9.2,
        "98005": 9.0,
        "98006": 8.8,
        "98007": 8.9,
        "98008": 8.7,
        "98052": 8.5,
        "98053": 8.3,
        "98033": 8.6,
        "98034": 8.4,
        "98074": 9.1,
        "98075": 9.0,
        "98027": 8.7,
        "98029": 8.6,
        "98102": 7.8,
        "98103": 7.5,
        "98105": 7.9,
        "98112": 8.2,
        "98115": 7.6,
        "98117": 7.7,
        "98119": 8.0,
        "98402": 6.5,
        "98403": 6.8,
        "98404": 6.3,
        "99201": 6.7,
        "99202": 6.9,
        "99203": 7.1,
    }
)
DEFAULT_SCHOOL_RATING: Final[float] = 7.2


def county_for(location_code: str | None) -> str:
    """
    Resolve a zip code or county name to a known county key.

    Unknown codes (and blanks) map to "Default".
    """
    code = (location_code or "").strip()
    if not code:
        return DEFAULT_PROFILE_KEY
    if code in _ZIP_TO_COUNTY:
        return _ZIP_TO_COUNTY[code]
    # ZIP+4 and similar suffixes
    head = code.split("-", 1)[0]
    if head in _ZIP_TO_COUNTY:
        return _ZIP_TO_COUNTY[head]
    key = code.lower().removesuffix(" county").strip()
    return _COUNTY_BY_LOWER.get(key, DEFAULT_PROFILE_KEY)


def resolve(location_code: str | None) -> GeoProfile:
    """Return the GeoProfile for a location code. Always succeeds."""
    return _PROFILES[county_for(location_code)]


def known_counties() -> tuple[str, ...]:
    return tuple(k for k in _PROFILES if k != DEFAULT_PROFILE_KEY)


def school_rating_for(location_code: str | None) -> float:
    """Fallback average school rating for a zip code (10-point scale)."""
    code = (location_code or "").strip().split("-", 1)[0]
    return _SCHOOL_RATINGS.get(code, DEFAULT_SCHOOL_RATING)


def school_grade(rating: float) -> str:
    """Convert a 10-point school rating to a letter grade."""
    if rating >= 9.0:
        return "A"
    if rating >= 8.0:
        return "B"
    if rating >= 7.0:
        return "C"
    if rating >= 6.0:
        return "D"
    return "F"
