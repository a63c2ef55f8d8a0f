# valuation_engine/core/insights/synthesis.py
"""
Plain-language insights and warnings for one analyzed deal.

Inputs:
  - InvestmentAnalysis : base-case (moderate) cash-flow model output
  - MarketConditions   : local market statistics (any field may be None)
  - PropertyInput      : the subject property
  - RentalEstimate     : the rent used for the analysis

Output:
  - InsightReport      : positive findings (insights) and risks (warnings)

Design goals
------------
- Deterministic: pure functions, stable ordering of messages.
- Total: missing market fields skip their message instead of failing.
"""

from __future__ import annotations

from valuation_engine.core.scoring.scores import price_per_area
from valuation_engine.schemas.models import (
    InsightReport,
    InvestmentAnalysis,
    MarketConditions,
    PropertyInput,
    RentalEstimate,
    ScenarioSet,
    ValuationResult,
)

OLDER_PROPERTY_YEAR = 1980
OVERPRICED_RATIO = 1.15
IRR_SPREAD_WARNING = 10.0

IRR_RATINGS: tuple[tuple[float, str], ...] = ((15.0, "Excellent"), (10.0, "Good"), (7.0, "Fair"))


def _usd(x: float) -> str:
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.0f}"


# ----------------------------
# Insights
# ----------------------------


def _insights(
    analysis: InvestmentAnalysis,
    market: MarketConditions,
    rental: RentalEstimate,
    valuation: ValuationResult | None,
) -> list[str]:
    out: list[str] = []

    cf = analysis.monthly_cash_flow
    if cf > 300:
        out.append(f"Strong positive cash flow of {_usd(cf)}/month")
    elif cf > 0:
        out.append(f"Modest cash flow of {_usd(cf)}/month")

    if analysis.cap_rate > 8:
        out.append(f"Excellent cap rate of {analysis.cap_rate:.2f}%, above market average")
    elif analysis.cap_rate > 5:
        out.append(f"Good cap rate of {analysis.cap_rate:.2f}%")

    if market.year_over_year_appreciation is not None and market.year_over_year_appreciation > 5:
        out.append(f"Strong market appreciation of {market.year_over_year_appreciation:.1f}% annually")

    if market.days_on_market is not None and market.days_on_market < 30:
        out.append(f"Hot market: properties sell in {market.days_on_market:.0f} days on average")

    rent_to_price = rental.monthly_rent * 12 / analysis.purchase_price
    if rent_to_price > 0.01:
        out.append(f"Strong rent-to-price ratio of {rent_to_price * 100:.2f}%")

    school = market.school_rating
    if school is None and valuation is not None:
        school = valuation.school_rating
    if school is not None and school >= 8:
        out.append(f"Excellent school rating ({school:g}/10)")

    if analysis.yearly_projections:
        last = analysis.final_year
        out.append(f"{last.year}-year projection: {_usd(last.property_value)} value, {_usd(last.equity)} equity")

    irr = analysis.internal_rate_of_return
    if irr is not None and irr > 15:
        out.append(f"Exceptional IRR of {irr:.2f}%")

    return out


# ----------------------------
# Warnings
# ----------------------------


def _warnings(
    analysis: InvestmentAnalysis,
    market: MarketConditions,
    prop: PropertyInput | None,
) -> list[str]:
    out: list[str] = []

    dscr = analysis.debt_service_coverage_ratio
    if dscr is not None and dscr < 1.0:
        out.append(f"DSCR of {dscr:.2f} is below 1.0")

    if analysis.monthly_cash_flow < -100:
        out.append("Significant negative cash flow")

    if market.vacancy_rate is not None and market.vacancy_rate > 8:
        out.append(f"High vacancy rate of {market.vacancy_rate:.1f}%")

    if market.crime_index is not None and market.crime_index > 70:
        out.append(f"Higher crime index ({market.crime_index:g})")

    if prop is not None and prop.year_built < OLDER_PROPERTY_YEAR:
        out.append(f"Older property (built {prop.year_built})")

    if market.days_on_market is not None and market.days_on_market > 60:
        out.append(f"Properties take {market.days_on_market:.0f} days to sell")

    ppa = price_per_area(analysis, prop)
    if ppa is not None and market.price_per_area and ppa > market.price_per_area * OVERPRICED_RATIO:
        premium = (ppa / market.price_per_area - 1.0) * 100.0
        out.append(f"Price per sqft is {premium:.0f}% above market")

    return out


# ----------------------------
# Public API
# ----------------------------


def explain(
    analysis: InvestmentAnalysis,
    market: MarketConditions,
    property: PropertyInput | None,
    rental: RentalEstimate,
    valuation: ValuationResult | None = None,
) -> InsightReport:
    """
    Build the insight/warning lists for a base-case analysis.

    `valuation` is optional; when given, its school rating backs up a missing
    market school rating.
    """
    return InsightReport(
        insights=_insights(analysis, market, rental, valuation),
        warnings=_warnings(analysis, market, property),
    )


def scenario_notes(scenarios: ScenarioSet) -> list[str]:
    """Short comparison of the three scenarios (downside, spread, base case)."""
    notes: list[str] = []
    cons, mod, opt = scenarios.ordered()

    if cons.monthly_cash_flow < 0:
        notes.append(
            f"Conservative scenario shows negative cash flow ({_usd(cons.monthly_cash_flow)}/month); "
            "consider a larger down payment or negotiating the price"
        )
    else:
        notes.append("Positive cash flow even in the conservative scenario")

    lo, hi = cons.internal_rate_of_return, opt.internal_rate_of_return
    if lo is not None and hi is not None and hi - lo > IRR_SPREAD_WARNING:
        notes.append(f"High variance between scenarios: IRR ranges from {lo:.2f}% to {hi:.2f}%")

    if mod.cash_on_cash_return > 8:
        notes.append(f"Strong base-case cash-on-cash return of {mod.cash_on_cash_return:.2f}%")
    else:
        notes.append(f"Modest base-case cash-on-cash return of {mod.cash_on_cash_return:.2f}%")

    return notes


def irr_rating(irr: float | None) -> str:
    """Label an IRR given in percent."""
    if irr is None:
        return "N/A"
    for threshold, label in IRR_RATINGS:
        if irr > threshold:
            return label
    return "Poor"
