from __future__ import annotations

import statistics
from collections.abc import Sequence
from typing import Final, cast

import numpy as np

from valuation_engine.schemas.models import (
    ComparableListing,
    MarketAnalysis,
    MarketConditions,
    MarketTrend,
    TopListing,
)

# Quick per-listing screen (not the full cash-flow model)
_DEFAULT_LISTING_AREA: Final[float] = 1500.0
_RENT_PER_AREA: Final[float] = 1.5
_EXPENSE_RATE: Final[float] = 0.03
_SCREEN_LTV: Final[float] = 0.8
_SCREEN_RATE: Final[float] = 0.07

_MAX_SCREENED: Final[int] = 10
_TOP_N: Final[int] = 5

_POTENTIAL_BASELINE: Final[int] = 50

_TREND_LABELS: Final[dict[str, str]] = {
    "hot": "High demand, fast sales",
    "moderate": "Balanced market conditions",
    "slow": "Slower market, more negotiating power",
}


def _screen(listing: ComparableListing) -> TopListing:
    rent = (listing.living_area or _DEFAULT_LISTING_AREA) * _RENT_PER_AREA
    expenses = listing.price * _EXPENSE_RATE
    mortgage = listing.price * _SCREEN_LTV * _SCREEN_RATE / 12.0
    cash_flow = rent - expenses / 12.0 - mortgage
    cap_rate = (rent * 12.0 - expenses) / listing.price * 100.0
    return TopListing(
        address=listing.address or "N/A",
        price=listing.price,
        estimated_rent=float(round(rent)),
        estimated_cash_flow=float(round(cash_flow)),
        cap_rate=round(cap_rate, 2),
    )


def market_trend(market: MarketConditions) -> MarketTrend:
    dom = market.days_on_market
    yoy = market.year_over_year_appreciation
    if dom is not None and yoy is not None and dom < 30 and yoy > 5:
        return "hot"
    if (dom is not None and dom > 60) or (yoy is not None and yoy < 2):
        return "slow"
    return "moderate"


def investment_potential(market: MarketConditions, price_to_rent: float) -> int:
    """0..100; starts at 50 and adds points for appreciation, vacancy, speed, price-to-rent and income."""
    p = _POTENTIAL_BASELINE
    yoy = market.year_over_year_appreciation
    if yoy is not None:
        p += 15 if yoy > 5 else 8 if yoy > 3 else 0
    vac = market.vacancy_rate
    if vac is not None:
        p += 10 if vac < 5 else 5 if vac < 7 else 0
    dom = market.days_on_market
    if dom is not None:
        p += 10 if dom < 30 else 5 if dom < 45 else 0
    if price_to_rent > 0:
        p += 10 if price_to_rent < 15 else 5 if price_to_rent < 18 else 0
    if market.median_income is not None and market.median_income > 70_000:
        p += 5
    return max(0, min(100, p))


def market_insights(market: MarketConditions, trend: MarketTrend, price_to_rent: float, potential: int) -> list[str]:
    out = [
        f"Market trend: {trend.upper()} ({_TREND_LABELS[trend]})",
        f"Investment potential score: {potential}/100",
    ]

    yoy = market.year_over_year_appreciation
    if yoy is not None:
        if yoy > 5:
            out.append(f"Strong {yoy:.1f}% annual appreciation")
        elif yoy < 2:
            out.append(f"Low {yoy:.1f}% appreciation rate")

    vac = market.vacancy_rate
    if vac is not None:
        if vac < 5:
            out.append(f"Low {vac:.1f}% vacancy rate, high rental demand")
        elif vac > 8:
            out.append(f"Higher {vac:.1f}% vacancy rate")

    if price_to_rent > 0:
        if price_to_rent < 15:
            out.append(f"Favorable price-to-rent ratio of {price_to_rent:.1f}, good for investors")
        elif price_to_rent > 20:
            out.append(f"High price-to-rent ratio of {price_to_rent:.1f}, an appreciation play")

    if market.median_income is not None and market.median_income > 80_000:
        out.append(f"High median income (${market.median_income:,.0f}), quality tenants")
    if market.days_on_market is not None and market.days_on_market < 30:
        out.append(f"Fast-moving market: {market.days_on_market:.0f} days average")
    if market.population is not None and market.population > 100_000:
        out.append(f"Large population ({market.population:,}), diverse rental pool")
    return out


def analyze_market(
    market: MarketConditions,
    listings: Sequence[ComparableListing],
    zipcode: str | None = None,
) -> MarketAnalysis:
    """
    Summarize a zip-code market from its conditions and current listings.

      - the first 10 positively priced listings are screened with a quick
        rent/expense/mortgage estimate
      - average price/rent fall back to market median price / average rent
        when no listing qualifies
      - median/p25/p75 listing prices via statistics.median and np.percentile
      - top 5 screened listings by estimated cap rate
    """
    zc = zipcode or market.zipcode
    if not zc:
        raise ValueError("zipcode must be given or present on market conditions")

    priced = [lst for lst in listings if lst.price > 0][:_MAX_SCREENED]
    screened = [_screen(lst) for lst in priced]

    if screened:
        avg_price = sum(s.price for s in screened) / len(screened)
        avg_rent = sum(s.estimated_rent for s in screened) / len(screened)
    else:
        avg_price = market.median_price or 0.0
        avg_rent = market.average_rent or 0.0
    price_to_rent = avg_price / (avg_rent * 12.0) if avg_rent > 0 else 0.0

    prices = [lst.price for lst in priced]
    median_price = p25 = p75 = None
    if prices:
        median_price = float(statistics.median(prices))
        p25 = float(cast(float, np.percentile(prices, 25)))
        p75 = float(cast(float, np.percentile(prices, 75)))

    trend = market_trend(market)
    potential = investment_potential(market, price_to_rent)
    top = sorted(screened, key=lambda s: s.cap_rate, reverse=True)[:_TOP_N]

    return MarketAnalysis(
        zipcode=str(zc),
        market=market,
        average_property_price=float(round(avg_price)),
        average_rent=float(round(avg_rent)),
        price_to_rent_ratio=round(price_to_rent, 2),
        median_listing_price=median_price,
        p25_listing_price=p25,
        p75_listing_price=p75,
        market_trend=trend,
        investment_potential=potential,
        insights=market_insights(market, trend, price_to_rent, potential),
        top_properties=tuple(top),
    )
