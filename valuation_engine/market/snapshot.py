from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from valuation_engine.core.errors import MissingMarketDataError
from valuation_engine.schemas.models import MarketConditions, MarketStatistics

# Accepted spellings -> MarketStatistics field
_STAT_KEYS: dict[str, str] = {
    "median_price_per_area": "median_price_per_area",
    "median_ppsf": "median_price_per_area",
    "median_price_per_sqft": "median_price_per_area",
    "sale_to_list_ratio": "sale_to_list_ratio",
    "months_of_supply": "months_of_supply",
    "months_supply": "months_of_supply",
    "sentiment_score": "sentiment_score",
    "sentiment": "sentiment_score",
}

# Accepted spellings -> MarketConditions field
_CONDITION_KEYS: dict[str, str] = {
    "zipcode": "zipcode",
    "zip_code": "zipcode",
    "median_price": "median_price",
    "medianPrice": "median_price",
    "price_per_area": "price_per_area",
    "price_per_sqft": "price_per_area",
    "pricePerSqft": "price_per_area",
    "days_on_market": "days_on_market",
    "daysOnMarket": "days_on_market",
    "months_supply": "months_supply",
    "monthsSupply": "months_supply",
    "year_over_year_appreciation": "year_over_year_appreciation",
    "yearOverYearAppreciation": "year_over_year_appreciation",
    "average_rent": "average_rent",
    "averageRent": "average_rent",
    "vacancy_rate": "vacancy_rate",
    "vacancyRate": "vacancy_rate",
    "population": "population",
    "median_income": "median_income",
    "medianIncome": "median_income",
    "unemployment_rate": "unemployment_rate",
    "unemploymentRate": "unemployment_rate",
    "crime_index": "crime_index",
    "crimeIndex": "crime_index",
    "school_rating": "school_rating",
    "schoolRating": "school_rating",
}

_STAT_FIELDS = ("median_price_per_area", "sale_to_list_ratio", "months_of_supply", "sentiment_score")


def _section(user_inputs: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Nested form ({key: {...}}) or flat form."""
    nested = user_inputs.get(key)
    if isinstance(nested, Mapping):
        return nested
    return user_inputs


def _number(key: str, raw: Any) -> float | None:
    if raw is None or raw == "":
        return None
    try:
        val = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"market key '{key}' must be numeric, got {raw!r}") from e
    if not math.isfinite(val):
        raise ValueError(f"market key '{key}' must be finite")
    return val


def build_market_statistics(
    user_inputs: Mapping[str, Any],
    *,
    sentiment: Mapping[str, Any] | None = None,
    strict: bool = False,
) -> MarketStatistics:
    """
    Construct MarketStatistics from a loosely-keyed mapping.

    Expected structure (either top-level or under 'market_statistics'):
    {
      "median_ppsf": 512.0,
      "sale_to_list_ratio": 1.02,
      "months_of_supply": 1.8
    }

    `sentiment` is an optional {"sentiment": float, "news": [str, ...]} record
    kept separately from the sales statistics.

    Non-strict mode tolerates any missing key (the valuation model substitutes
    defaults). Strict mode raises MissingMarketDataError when any field is absent.
    """
    market = _section(user_inputs, "market_statistics")
    values: dict[str, Any] = {}
    for key, raw in market.items():
        field = _STAT_KEYS.get(key)
        if field is not None and field not in values:
            val = _number(key, raw)
            if val is not None:
                values[field] = val

    news: list[str] = [str(n) for n in market.get("recent_news") or market.get("news") or []]
    if sentiment is not None:
        score = _number("sentiment", sentiment.get("sentiment", sentiment.get("sentiment_score")))
        if score is not None:
            values["sentiment_score"] = score
        news = [str(n) for n in sentiment.get("news") or []] or news

    if strict:
        missing = [f for f in _STAT_FIELDS if f not in values]
        if missing:
            raise MissingMarketDataError(f"market statistics missing: {', '.join(missing)}")

    return MarketStatistics(**values, recent_news=news)


def market_statistics_for(
    location_code: str,
    table: Mapping[str, Mapping[str, Any]],
    sentiment_table: Mapping[str, Mapping[str, Any]] | None = None,
) -> MarketStatistics:
    """Look up per-zip statistics (and sentiment) rows; absent rows give an empty record."""
    code = (location_code or "").strip()
    row = table.get(code) or {}
    sent = (sentiment_table or {}).get(code)
    return build_market_statistics(row, sentiment=sent)


def build_market_conditions(user_inputs: Mapping[str, Any]) -> MarketConditions:
    """
    Construct MarketConditions from snake_case or camelCase keys, either
    top-level or under 'market'. Unknown keys are ignored.
    """
    market = _section(user_inputs, "market")
    values: dict[str, Any] = {}
    for key, raw in market.items():
        field = _CONDITION_KEYS.get(key)
        if field is None or field in values or raw is None:
            continue
        values[field] = str(raw) if field == "zipcode" else raw
    return MarketConditions.model_validate(values)
