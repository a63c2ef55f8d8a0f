# valuation_engine/core/scenarios/generator.py
"""
Conservative / moderate / optimistic scenario runs of the cash-flow model.

Each scenario is the base inputs plus one overlay of deltas. Overlays are
validated to be monotone (conservative never better than base on any input,
optimistic never worse), which makes the scenario ordering of cash flow and
IRR hold by construction.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Final

from valuation_engine.core.finance.engine import DEFAULT_HORIZON_YEARS, analyze
from valuation_engine.schemas.models import (
    InvestmentAnalysis,
    LoanTerms,
    OperatingAssumptions,
    RentalEstimate,
    ScenarioOverlay,
    ScenarioSet,
    ValuationResult,
)

logger = logging.getLogger(__name__)

_ORDER: Final[tuple[str, ...]] = ("conservative", "moderate", "optimistic")

DEFAULT_OVERLAYS: Final[tuple[ScenarioOverlay, ...]] = (
    ScenarioOverlay(
        name="conservative",
        interest_rate_delta=0.005,
        rent_adjustment=-0.05,
        expense_multiplier=1.10,
        appreciation_delta=-0.02,
        rent_growth_delta=-0.01,
        expense_growth_delta=0.005,
        description="Higher rate, lower rent, higher expenses, slower appreciation",
    ),
    ScenarioOverlay(name="moderate", description="Base case: inputs as given"),
    ScenarioOverlay(
        name="optimistic",
        interest_rate_delta=-0.005,
        rent_adjustment=0.05,
        expense_multiplier=0.90,
        appreciation_delta=0.01,
        rent_growth_delta=0.005,
        expense_growth_delta=-0.005,
        description="Lower rate, higher rent, lower expenses, stronger appreciation",
    ),
)

# Bounds mirror OperatingAssumptions / LoanTerms validation
_GROWTH_BOUNDS: Final = (-0.2, 0.2)
_APPRECIATION_BOUNDS: Final = (-0.5, 0.5)
_EXPENSE_MULT_MAX: Final = 1.5


def _clamp(x: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, x))


def _direction(ov: ScenarioOverlay) -> tuple[float, ...]:
    """Each component > 0 means 'more favorable than base'."""
    return (
        -ov.interest_rate_delta,
        ov.rent_adjustment,
        1.0 - ov.expense_multiplier,
        ov.appreciation_delta,
        ov.rent_growth_delta,
        -ov.expense_growth_delta,
    )


def validate_overlays(overlays: tuple[ScenarioOverlay, ...] | list[ScenarioOverlay]) -> dict[str, ScenarioOverlay]:
    """
    Check that overlays name each scenario exactly once and are monotone.

    Rules:
      - moderate is the identity overlay
      - conservative: every component no more favorable than base
      - optimistic: every component no less favorable than base
    """
    by_name = {ov.name: ov for ov in overlays}
    if len(by_name) != len(overlays) or set(by_name) != set(_ORDER):
        raise ValueError(f"overlays must name each of {_ORDER} exactly once")

    if any(d != 0.0 for d in _direction(by_name["moderate"])):
        raise ValueError("moderate overlay must not change the base inputs")
    if any(d > 0.0 for d in _direction(by_name["conservative"])):
        raise ValueError("conservative overlay must not improve any input over the base case")
    if any(d < 0.0 for d in _direction(by_name["optimistic"])):
        raise ValueError("optimistic overlay must not worsen any input relative to the base case")
    return by_name


def apply_overlay(
    overlay: ScenarioOverlay,
    rental: RentalEstimate,
    loan_terms: LoanTerms,
    assumptions: OperatingAssumptions,
    base_appreciation: float,
) -> tuple[RentalEstimate, LoanTerms, OperatingAssumptions]:
    """Return overlaid copies of the inputs (originals are not mutated)."""
    rent = rental.model_copy(update={"monthly_rent": rental.monthly_rent * (1.0 + overlay.rent_adjustment)})
    loan = loan_terms.model_copy(
        update={"annual_interest_rate": _clamp(loan_terms.annual_interest_rate + overlay.interest_rate_delta, (0.0, 1.0))}
    )
    opx = assumptions.model_copy(
        update={
            "expense_multiplier": min(_EXPENSE_MULT_MAX, assumptions.expense_multiplier * overlay.expense_multiplier),
            "appreciation_rate": _clamp(base_appreciation + overlay.appreciation_delta, _APPRECIATION_BOUNDS),
            "rent_growth": _clamp(assumptions.rent_growth + overlay.rent_growth_delta, _GROWTH_BOUNDS),
            "expense_growth": _clamp(assumptions.expense_growth + overlay.expense_growth_delta, _GROWTH_BOUNDS),
        }
    )
    return rent, loan, opx


def generate_scenarios(
    valuation: ValuationResult,
    rental: RentalEstimate,
    base_loan_terms: LoanTerms,
    *,
    assumptions: OperatingAssumptions | None = None,
    overlays: tuple[ScenarioOverlay, ...] | None = None,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
    parallel: bool = False,
) -> ScenarioSet:
    """
    Run the cash-flow model once per overlay and bundle the three results.

    Args:
        valuation: Shared valuation for all scenarios.
        rental: Base rental estimate.
        base_loan_terms: Base financing; the moderate scenario uses it unchanged.
        assumptions: Base operating assumptions (defaults if None).
        overlays: Custom overlays; validated for monotonicity.
        horizon_years: Projection length.
        parallel: Evaluate the three scenarios on a small thread pool. Results are identical.

    Raises:
        InvalidInputError: from the cash-flow model (non-positive price or rent).
        ValueError: overlays are incomplete or not monotone.
    """
    by_name = validate_overlays(overlays if overlays is not None else DEFAULT_OVERLAYS)
    base = assumptions or OperatingAssumptions()
    base_appreciation = base.appreciation_rate if base.appreciation_rate is not None else valuation.geo.base_appreciation_rate

    def _run(name: str) -> InvestmentAnalysis:
        rent, loan, opx = apply_overlay(by_name[name], rental, base_loan_terms, base, base_appreciation)
        return analyze(valuation, rent, loan, horizon_years, assumptions=opx)

    if parallel:
        with ThreadPoolExecutor(max_workers=len(_ORDER)) as executor:
            results = dict(zip(_ORDER, executor.map(_run, _ORDER), strict=True))
    else:
        results = {name: _run(name) for name in _ORDER}

    logger.debug(
        "scenarios cf/mo: %s",
        ", ".join(f"{n}={results[n].monthly_cash_flow:.0f}" for n in _ORDER),
    )

    return ScenarioSet(
        conservative=results["conservative"],
        moderate=results["moderate"],
        optimistic=results["optimistic"],
        overlays=tuple(by_name[n] for n in _ORDER),
    )
