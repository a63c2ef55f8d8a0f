# valuation_engine/__init__.py
"""Residential valuation and rental investment analysis engine."""

from valuation_engine.core.errors import EngineError, InvalidInputError, MissingMarketDataError
from valuation_engine.core.finance.engine import analyze
from valuation_engine.core.scenarios.generator import generate_scenarios
from valuation_engine.core.valuation.model import estimate_value
from valuation_engine.market.analysis import analyze_market
from valuation_engine.orchestrator.pipeline import run_property_analysis

__version__ = "0.1.0"

__all__ = [
    "EngineError",
    "InvalidInputError",
    "MissingMarketDataError",
    "analyze",
    "analyze_market",
    "estimate_value",
    "generate_scenarios",
    "run_property_analysis",
]
