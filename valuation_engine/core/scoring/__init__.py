# valuation_engine/core/scoring/__init__.py

from .scores import price_per_area, recommendation_score, risk_score, score

__all__ = ["score", "risk_score", "recommendation_score", "price_per_area"]
