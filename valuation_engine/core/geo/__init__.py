# valuation_engine/core/geo/__init__.py

from .profiles import (
    DEFAULT_PROFILE_KEY,
    county_for,
    known_counties,
    resolve,
    school_grade,
    school_rating_for,
)

__all__ = [
    "DEFAULT_PROFILE_KEY",
    "county_for",
    "known_counties",
    "resolve",
    "school_grade",
    "school_rating_for",
]
