# valuation_engine/orchestrator/pipeline.py
"""
Deterministic property-analysis pipeline

Purpose
-------
Run the engine stages in order for one property:
  1) Valuation Model       -> ValuationResult
  2) Scenario Generator    -> ScenarioSet (moderate = base case)
  3) Scoring               -> risk / recommendation scores
  4) Insight Synthesis     -> insights, warnings, scenario notes, IRR rating

Design
------
- Pure Python, no I/O; the caller supplies every record.
- Market conditions are optional; a missing school rating falls back to the
  zip-level table.

Public API
----------
run_property_analysis(property, rental, loan_terms, ...) -> PropertyAnalysisReport
run_from_inputs(cfg: AppInputs) -> PropertyAnalysisReport
"""

from __future__ import annotations

import logging

from valuation_engine.core.finance.engine import DEFAULT_HORIZON_YEARS
from valuation_engine.core.geo.profiles import school_rating_for
from valuation_engine.core.insights.synthesis import explain, irr_rating, scenario_notes
from valuation_engine.core.scenarios.generator import generate_scenarios
from valuation_engine.core.scoring.scores import score
from valuation_engine.core.valuation.model import DEFAULT_AS_OF_YEAR, estimate_value
from valuation_engine.inputs.inputs import AppInputs
from valuation_engine.schemas.models import (
    LoanTerms,
    MarketConditions,
    MarketStatistics,
    OperatingAssumptions,
    PropertyAnalysisReport,
    PropertyInput,
    RentalEstimate,
    ScenarioOverlay,
)

logger = logging.getLogger(__name__)


def _with_school_rating(market: MarketConditions | None, location_code: str) -> MarketConditions:
    m = market or MarketConditions()
    if m.school_rating is None:
        m = m.model_copy(update={"school_rating": school_rating_for(location_code)})
    return m


def run_property_analysis(
    property: PropertyInput,
    rental: RentalEstimate,
    loan_terms: LoanTerms,
    *,
    market_statistics: MarketStatistics | None = None,
    market: MarketConditions | None = None,
    assumptions: OperatingAssumptions | None = None,
    overlays: tuple[ScenarioOverlay, ...] | None = None,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
    as_of_year: int = DEFAULT_AS_OF_YEAR,
    parallel: bool = False,
) -> PropertyAnalysisReport:
    """
    Value the property, run the three scenarios, and score the base case.

    Raises:
        InvalidInputError: living area, purchase price or rent is not > 0, or horizon < 1.
        ValueError: custom overlays are incomplete or not monotone.
    """
    valuation = estimate_value(property, market_statistics, as_of_year=as_of_year)
    scenarios = generate_scenarios(
        valuation,
        rental,
        loan_terms,
        assumptions=assumptions,
        overlays=overlays,
        horizon_years=horizon_years,
        parallel=parallel,
    )
    base = scenarios.moderate
    conditions = _with_school_rating(market, property.location_code)

    card = score(base, conditions, property)
    report = explain(base, conditions, property, rental, valuation)

    logger.info(
        "analysis %s: value=%.0f cf/mo=%.0f risk=%d rec=%d",
        property.location_code or "<no location>",
        valuation.point_estimate,
        base.monthly_cash_flow,
        card.risk_score,
        card.recommendation_score,
    )

    return PropertyAnalysisReport(
        valuation=valuation,
        analysis=base,
        scenarios=scenarios,
        risk_score=card.risk_score,
        recommendation_score=card.recommendation_score,
        insights=report.insights,
        warnings=report.warnings,
        scenario_notes=scenario_notes(scenarios),
        irr_rating=irr_rating(base.internal_rate_of_return),
    )


def run_from_inputs(cfg: AppInputs) -> PropertyAnalysisReport:
    """Run the pipeline from a loaded AppInputs payload."""
    return run_property_analysis(
        cfg.property,
        cfg.rental,
        cfg.loan,
        market_statistics=cfg.market_statistics,
        market=cfg.market,
        assumptions=cfg.assumptions,
        horizon_years=cfg.run.horizon,
        as_of_year=cfg.run.as_of_year,
        parallel=cfg.run.parallel,
    )
