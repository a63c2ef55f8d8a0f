# tests/unit/test_scenarios.py
from __future__ import annotations

import pytest

from valuation_engine.core.finance import analyze
from valuation_engine.core.scenarios import DEFAULT_OVERLAYS, apply_overlay, generate_scenarios, validate_overlays
from valuation_engine.schemas.models import OperatingAssumptions, ScenarioOverlay
from tests.utils import make_loan_terms, make_rental


def _overlays(**changes: dict) -> tuple[ScenarioOverlay, ...]:
    by_name = {ov.name: ov for ov in DEFAULT_OVERLAYS}
    for name, update in changes.items():
        by_name[name] = by_name[name].model_copy(update=update)
    return tuple(by_name.values())


@pytest.mark.parametrize(
    "rent, loan",
    [
        (2_800.0, {}),
        (1_500.0, {}),
        (5_000.0, {"annual_interest_rate": 0.045}),
        (2_800.0, {"down_payment_fraction": 1.0}),
        (3_200.0, {"purchase_price": 900_000.0, "amortization_years": 15}),
    ],
)
def test_scenario_ordering(sample_valuation, rent, loan):
    s = generate_scenarios(sample_valuation, make_rental(rent), make_loan_terms(**loan))
    cons, mod, opt = s.ordered()
    assert cons.monthly_cash_flow <= mod.monthly_cash_flow <= opt.monthly_cash_flow
    assert cons.internal_rate_of_return is not None
    assert opt.internal_rate_of_return is not None
    assert cons.internal_rate_of_return <= mod.internal_rate_of_return <= opt.internal_rate_of_return


def test_moderate_equals_base_case(sample_valuation):
    rental, loan = make_rental(), make_loan_terms()
    s = generate_scenarios(sample_valuation, rental, loan)
    base = analyze(sample_valuation, rental, loan)
    assert s.moderate == base


def test_parallel_matches_sequential(sample_valuation):
    rental, loan = make_rental(), make_loan_terms()
    seq = generate_scenarios(sample_valuation, rental, loan)
    par = generate_scenarios(sample_valuation, rental, loan, parallel=True)
    assert par == seq


def test_default_overlay_magnitudes(sample_valuation):
    s = generate_scenarios(sample_valuation, make_rental(), make_loan_terms())
    assert s.conservative.interest_rate == pytest.approx(7.5)
    assert s.optimistic.interest_rate == pytest.approx(6.5)
    assert s.conservative.income.monthly_rent == round(2_800 * 0.95)
    assert s.optimistic.income.monthly_rent == round(2_800 * 1.05)
    assert [ov.name for ov in s.overlays] == ["conservative", "moderate", "optimistic"]


def test_optimistic_rate_floored_at_zero(sample_valuation):
    s = generate_scenarios(sample_valuation, make_rental(), make_loan_terms(annual_interest_rate=0.003))
    assert s.optimistic.interest_rate == 0.0
    assert s.optimistic.monthly_mortgage == pytest.approx(400_000 / 360, abs=0.01)


def test_apply_overlay_does_not_mutate_inputs():
    rental, loan, opx = make_rental(), make_loan_terms(), OperatingAssumptions()
    cons = DEFAULT_OVERLAYS[0]
    r2, l2, o2 = apply_overlay(cons, rental, loan, opx, base_appreciation=0.04)
    assert rental.monthly_rent == 2_800.0
    assert loan.annual_interest_rate == 0.07
    assert opx.expense_multiplier == 1.0
    assert r2.monthly_rent == pytest.approx(2_660.0)
    assert l2.annual_interest_rate == pytest.approx(0.075)
    assert o2.expense_multiplier == pytest.approx(1.10)
    assert o2.appreciation_rate == pytest.approx(0.02)


def test_expense_multiplier_is_capped():
    opx = OperatingAssumptions(expense_multiplier=1.45)
    _, _, o2 = apply_overlay(DEFAULT_OVERLAYS[0], make_rental(), make_loan_terms(), opx, base_appreciation=0.04)
    assert o2.expense_multiplier == 1.5


def test_validate_defaults():
    by_name = validate_overlays(DEFAULT_OVERLAYS)
    assert set(by_name) == {"conservative", "moderate", "optimistic"}


@pytest.mark.parametrize(
    "overlays",
    [
        DEFAULT_OVERLAYS[:2],
        DEFAULT_OVERLAYS + (DEFAULT_OVERLAYS[0],),
        _overlays(conservative={"rent_adjustment": 0.01}),
        _overlays(conservative={"interest_rate_delta": -0.001}),
        _overlays(optimistic={"expense_multiplier": 1.05}),
        _overlays(optimistic={"appreciation_delta": -0.01}),
        _overlays(moderate={"rent_growth_delta": 0.001}),
    ],
)
def test_non_monotone_overlays_rejected(sample_valuation, overlays):
    with pytest.raises(ValueError):
        validate_overlays(overlays)
    with pytest.raises(ValueError):
        generate_scenarios(sample_valuation, make_rental(), make_loan_terms(), overlays=overlays)


def test_custom_monotone_overlays_accepted(sample_valuation):
    overlays = _overlays(conservative={"interest_rate_delta": 0.01, "rent_adjustment": -0.10})
    s = generate_scenarios(sample_valuation, make_rental(), make_loan_terms(), overlays=overlays)
    assert s.conservative.interest_rate == pytest.approx(8.0)
