# tests/conftest.py
from __future__ import annotations

import pytest

from valuation_engine.core.finance.engine import analyze
from tests.utils import (
    make_assumptions,
    make_loan_terms,
    make_market_conditions,
    make_market_statistics,
    make_property,
    make_rental,
    make_valuation,
)


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clean_engine_env(monkeypatch):
    for key in ("VALENGINE_OUT", "VALENGINE_HORIZON", "VALENGINE_AS_OF_YEAR", "VALENGINE_PARALLEL"):
        monkeypatch.delenv(key, raising=False)
    yield


# -------- Domain fixtures --------
@pytest.fixture
def sample_property():
    return make_property()


@pytest.fixture
def sample_market_statistics():
    return make_market_statistics()


@pytest.fixture
def neutral_market():
    return make_market_conditions()


@pytest.fixture
def sample_valuation(sample_property, sample_market_statistics):
    return make_valuation(sample_property, sample_market_statistics)


# -------- Financial fixtures --------
@pytest.fixture
def baseline_loan_terms():
    """Factory for the canonical $500k / 20% down / 7% / 30y loan (overridable)."""

    def _factory(**overrides):
        return make_loan_terms(**overrides)

    return _factory


@pytest.fixture
def baseline_analysis(sample_valuation):
    """Factory to run the cash-flow model on the canonical deal."""

    def _factory(*, rent=None, loan=None, assumptions=None, horizon_years=10):
        rental = make_rental() if rent is None else make_rental(rent)
        return analyze(
            sample_valuation,
            rental,
            loan or make_loan_terms(),
            horizon_years,
            assumptions=assumptions or make_assumptions(),
        )

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
