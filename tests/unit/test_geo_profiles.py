# tests/unit/test_geo_profiles.py
import pytest
from pydantic import ValidationError

from valuation_engine.core.geo import county_for, known_counties, resolve, school_grade, school_rating_for
from valuation_engine.schemas.models import ConditionTier, PropertyCategory, PropertyInput


@pytest.mark.parametrize(
    "code, county",
    [
        ("98103", "King"),
        ("98103-1234", "King"),
        (" 98012 ", "Snohomish"),
        ("98402", "Pierce"),
        ("98682", "Clark"),
        ("king county", "King"),
        ("PIERCE", "Pierce"),
        ("00000", "Default"),
        ("", "Default"),
        (None, "Default"),
    ],
)
def test_county_routing(code, county):
    assert county_for(code) == county


def test_resolve_returns_tiered_profiles():
    assert resolve("98103").default_price_per_area == 465.0
    assert resolve("Snohomish").default_price_per_area == 385.0
    assert resolve("Pierce").default_price_per_area == 310.0
    assert resolve("nowhere").default_price_per_area == 350.0
    assert resolve("98103") is resolve("King")


def test_profiles_are_frozen():
    geo = resolve("King")
    with pytest.raises(ValidationError):
        geo.tax_rate = 0.5


def test_known_counties_excludes_default():
    assert set(known_counties()) == {"King", "Snohomish", "Pierce", "Clark"}


def test_school_ratings():
    assert school_rating_for("98004") == 9.2
    assert school_rating_for("98004-0001") == 9.2
    assert school_rating_for("12345") == 7.2
    assert school_grade(9.2) == "A"
    assert school_grade(8.0) == "B"
    assert school_grade(5.5) == "F"


def test_label_coercion_on_property_input():
    p = PropertyInput(living_area=1500, year_built=1990, category="townhouse", condition="FIXER-UPPER")
    assert p.category is PropertyCategory.ATTACHED
    assert p.condition is ConditionTier.FIXER_UPPER

    unknown = PropertyInput(living_area=1500, year_built=1990, category="castle", condition="haunted")
    assert unknown.category is None
    assert unknown.condition is None
