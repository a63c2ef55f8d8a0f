# valuation_engine/core/scoring/scores.py
"""
Risk and recommendation scores (0..100) for one analyzed deal.

Both scores are threshold sums over the base-case InvestmentAnalysis and the
local MarketConditions. A market field that is None skips its rule; a DSCR of
None (all-cash purchase) skips the DSCR rules.
"""

from __future__ import annotations

from valuation_engine.schemas.models import InvestmentAnalysis, MarketConditions, PropertyInput, ScoreCard

RISK_BASELINE = 50

# (threshold, points) tiers, first match wins; evaluated as value > threshold
CASH_FLOW_TIERS: tuple[tuple[float, int], ...] = ((500.0, 30), (200.0, 20), (0.0, 10))
CAP_RATE_TIERS: tuple[tuple[float, int], ...] = ((8.0, 20), (6.0, 15), (4.0, 10))
COC_TIERS: tuple[tuple[float, int], ...] = ((12.0, 20), (8.0, 15), (5.0, 10))
APPRECIATION_TIERS: tuple[tuple[float, int], ...] = ((5.0, 8), (3.0, 5))
# evaluated as value < threshold
VACANCY_TIERS: tuple[tuple[float, int], ...] = ((5.0, 7), (7.0, 4))
PRICE_VS_MARKET_TIERS: tuple[tuple[float, int], ...] = ((0.9, 15), (1.0, 10), (1.1, 5))


def _clamp_score(x: int) -> int:
    return max(0, min(100, x))


def _above(value: float | None, tiers: tuple[tuple[float, int], ...]) -> int:
    if value is None:
        return 0
    for threshold, points in tiers:
        if value > threshold:
            return points
    return 0


def _below(value: float | None, tiers: tuple[tuple[float, int], ...]) -> int:
    if value is None:
        return 0
    for threshold, points in tiers:
        if value < threshold:
            return points
    return 0


def price_per_area(analysis: InvestmentAnalysis, prop: PropertyInput | None) -> float | None:
    """Purchase price per unit of living area, or None without a usable area."""
    if prop is None or not prop.living_area or prop.living_area <= 0:
        return None
    return analysis.purchase_price / prop.living_area


def risk_score(analysis: InvestmentAnalysis, market: MarketConditions) -> int:
    """Higher is safer. Starts at 50 and moves by fixed steps per rule."""
    s = RISK_BASELINE
    dscr = analysis.debt_service_coverage_ratio

    if dscr is not None and dscr > 1.25:
        s += 10
    if analysis.cap_rate > 6:
        s += 10
    if analysis.cash_on_cash_return > 8:
        s += 10
    if market.vacancy_rate is not None and market.vacancy_rate < 5:
        s += 5
    if market.year_over_year_appreciation is not None and market.year_over_year_appreciation > 4:
        s += 5
    if market.unemployment_rate is not None and market.unemployment_rate < 4:
        s += 5
    if market.school_rating is not None and market.school_rating >= 8:
        s += 5

    if dscr is not None and dscr < 1.0:
        s -= 15
    if analysis.cap_rate < 4:
        s -= 10
    if analysis.monthly_cash_flow < 0:
        s -= 20
    if market.vacancy_rate is not None and market.vacancy_rate > 8:
        s -= 10
    if market.crime_index is not None and market.crime_index > 70:
        s -= 10
    if market.days_on_market is not None and market.days_on_market > 60:
        s -= 5

    return _clamp_score(s)


def recommendation_score(
    analysis: InvestmentAnalysis,
    market: MarketConditions,
    prop: PropertyInput | None = None,
) -> int:
    """Sum of tiered points for cash flow, returns, market strength and entry price."""
    s = 0
    s += _above(analysis.monthly_cash_flow, CASH_FLOW_TIERS)
    s += _above(analysis.cap_rate, CAP_RATE_TIERS)
    s += _above(analysis.cash_on_cash_return, COC_TIERS)
    s += _above(market.year_over_year_appreciation, APPRECIATION_TIERS)
    s += _below(market.vacancy_rate, VACANCY_TIERS)

    ppa = price_per_area(analysis, prop)
    if ppa is not None and market.price_per_area:
        s += _below(ppa / market.price_per_area, PRICE_VS_MARKET_TIERS)

    return _clamp_score(s)


def score(
    analysis: InvestmentAnalysis,
    market: MarketConditions,
    property: PropertyInput | None = None,
) -> ScoreCard:
    return ScoreCard(
        risk_score=risk_score(analysis, market),
        recommendation_score=recommendation_score(analysis, market, property),
    )
