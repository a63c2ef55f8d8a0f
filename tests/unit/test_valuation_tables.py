# tests/unit/test_valuation_tables.py
import pytest

from valuation_engine.core.valuation import tables as t
from valuation_engine.schemas.models import ConditionTier, PropertyCategory


@pytest.mark.parametrize(
    "area, expected",
    [
        (999.99, 1.18),
        (1000.0, 1.10),
        (1499.99, 1.10),
        (1500.0, 1.05),
        (2000.0, 1.00),
        (2500.0, 0.96),
        (3499.99, 0.96),
        (3500.0, 0.92),
        (5000.0, 0.88),
        (12_000.0, 0.88),
    ],
)
def test_size_breakpoints_use_strict_less_than(area, expected):
    assert t.size_multiplier(area) == expected


def test_lot_premium_free_allowance():
    assert t.lot_premium(0.0, 75.0) == 0.0
    assert t.lot_premium(4000.0, 75.0) == 0.0


def test_lot_premium_boundary_8000_vs_8001():
    v = 100.0
    at_8000 = t.lot_premium(8000.0, v)
    assert at_8000 == pytest.approx(4000.0 * v * 0.85)
    # One extra unit is priced at the second-tier rate only
    assert t.lot_premium(8001.0, v) - at_8000 == pytest.approx(v * 0.65)


def test_lot_premium_large_lot_sums_all_bands():
    v = 10.0
    expected = 4000 * v * 0.85 + 7000 * v * 0.65 + 5000 * v * 0.45
    assert t.lot_premium(20_000.0, v) == pytest.approx(expected)


@pytest.mark.parametrize(
    "age, condition, expected",
    [
        (0, ConditionTier.NEW_LUXURY, 1.12),
        (5, ConditionTier.RENOVATED, 1.12 - 0.015 * 5),
        (5, None, 1.08 - 0.012 * 5),
        (6, ConditionTier.RENOVATED, 1.05 - 0.003 * 6),
        (26, ConditionTier.WELL_MAINTAINED, 0.95 - 0.012 * 11),
        (26, ConditionTier.RENOVATED, 1.02 - 0.008 * 11),
        (40, ConditionTier.ORIGINAL, 0.65 - 0.010 * 10),
        (80, ConditionTier.WELL_MAINTAINED, 0.68),
        (80, ConditionTier.NEW_LUXURY, 0.85),
    ],
)
def test_age_factor_bands(age, condition, expected):
    assert t.age_factor(age, condition) == pytest.approx(expected)


def test_age_factor_floor():
    # 0.65 - 0.010 * 20 = 0.45 -> floored
    assert t.age_factor(50, ConditionTier.FIXER_UPPER) == t.AGE_FACTOR_FLOOR
    assert t.age_factor(200, None) == t.AGE_FACTOR_FLOOR


def test_condition_and_category_factors():
    assert t.condition_factor(ConditionTier.FIXER_UPPER) == 0.79
    assert t.condition_factor(None) == 1.0
    assert t.category_factor(PropertyCategory.ATTACHED) == 0.91
    assert t.category_factor(None) == 1.0


def test_expected_rooms_clamped():
    assert t.expected_rooms(1800.0, t.EXPECTED_BEDROOMS) == 3
    assert t.expected_rooms(800.0, t.EXPECTED_BEDROOMS) == 2
    assert t.expected_rooms(9000.0, t.EXPECTED_BEDROOMS) == 5
    assert t.expected_rooms(1800.0, t.EXPECTED_BATHROOMS) == 2


def test_surplus_discounts():
    assert t.surplus_discount(2, t.BEDROOM_SURPLUS_DISCOUNTS) == 0.85
    assert t.surplus_discount(1, t.BEDROOM_SURPLUS_DISCOUNTS) == 0.95
    assert t.surplus_discount(0, t.BEDROOM_SURPLUS_DISCOUNTS) == 1.0
    assert t.surplus_discount(1.0, t.BATHROOM_SURPLUS_DISCOUNTS) == 0.90
    assert t.surplus_discount(0.5, t.BATHROOM_SURPLUS_DISCOUNTS) == 1.0


@pytest.mark.parametrize(
    "net_yield, grade",
    [(5.0, "A+"), (4.5, "A"), (3.51, "A"), (3.5, "B+"), (2.5, "B"), (-1.0, "B")],
)
def test_grade_thresholds(net_yield, grade):
    assert t.grade_for(net_yield) == grade


def test_newer_maintenance_rule():
    assert t.uses_newer_maintenance(10, None)
    assert not t.uses_newer_maintenance(15, None)
    assert t.uses_newer_maintenance(40, ConditionTier.RENOVATED)
