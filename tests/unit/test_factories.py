# tests/unit/test_factories.py
from __future__ import annotations

import tests
from tests import make_loan_terms, make_property, make_rental, make_valuation
from tests.utils import AS_OF_YEAR, DEFAULT_PRICE, DEFAULT_RENT, DEFAULT_ZIP


def test_package_reexports_resolve() -> None:
    for name in tests.__all__:
        assert callable(getattr(tests, name))


def test_factory_defaults_are_canonical_deal() -> None:
    assert make_property().location_code == DEFAULT_ZIP
    assert make_rental().monthly_rent == DEFAULT_RENT
    assert make_loan_terms().purchase_price == DEFAULT_PRICE
    val = make_valuation()
    assert val.as_of_year == AS_OF_YEAR
    assert val.point_estimate > 0
