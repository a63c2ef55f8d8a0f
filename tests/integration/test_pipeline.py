# tests/integration/test_pipeline.py
"""
End-to-end pipeline tests

Purpose
-------
Verify the full property-analysis flow (valuation -> scenarios -> scoring ->
insights) and the CLI entry point that writes the JSON report.
"""

from __future__ import annotations

import json
import sys

import pytest

import main as cli
from valuation_engine import InvalidInputError, run_property_analysis
from valuation_engine.inputs.inputs import InputsLoader
from valuation_engine.orchestrator.pipeline import run_from_inputs
from valuation_engine.schemas.models import MarketConditions
from tests.utils import (
    make_inputs_payload,
    make_loan_terms,
    make_market_conditions,
    make_market_statistics,
    make_property,
    make_rental,
)

pytestmark = pytest.mark.integration


def test_run_property_analysis_end_to_end():
    report = run_property_analysis(
        make_property(),
        make_rental(),
        make_loan_terms(),
        market_statistics=make_market_statistics(),
        market=make_market_conditions(),
    )
    assert report.analysis == report.scenarios.moderate
    cons, mod, opt = report.scenarios.ordered()
    assert cons.monthly_cash_flow <= mod.monthly_cash_flow <= opt.monthly_cash_flow
    assert 0 <= report.risk_score <= 100
    assert 0 <= report.recommendation_score <= 100
    assert report.irr_rating in ("Excellent", "Good", "Fair", "Poor", "N/A")
    assert len(report.scenario_notes) >= 2
    assert any(i.startswith("10-year projection") for i in report.insights)
    assert len(report.analysis.yearly_projections) == 10


def test_pipeline_is_deterministic_and_parallel_safe():
    args = (make_property(), make_rental(), make_loan_terms())
    a = run_property_analysis(*args, market_statistics=make_market_statistics())
    b = run_property_analysis(*args, market_statistics=make_market_statistics(), parallel=True)
    assert a == b


def test_missing_market_data_degrades_gracefully():
    report = run_property_analysis(make_property(), make_rental(), make_loan_terms(), horizon_years=5)
    assert report.valuation.months_of_supply == 2.5
    assert len(report.analysis.yearly_projections) == 5
    assert report.irr_rating != ""


def test_school_rating_backfilled_from_zip(monkeypatch):
    captured: dict[str, MarketConditions] = {}

    import valuation_engine.orchestrator.pipeline as pipeline

    real_score = pipeline.score

    def _spy(analysis, market, prop=None):
        captured["market"] = market
        return real_score(analysis, market, prop)

    monkeypatch.setattr(pipeline, "score", _spy)
    run_property_analysis(make_property(location_code="98004"), make_rental(), make_loan_terms())
    assert captured["market"].school_rating == 9.2


def test_invalid_area_surfaces_immediately():
    with pytest.raises(InvalidInputError):
        run_property_analysis(make_property(living_area=0.0), make_rental(), make_loan_terms())


def test_run_from_inputs_honors_run_options():
    cfg = InputsLoader().load_json(json.dumps(make_inputs_payload(horizon=7, as_of_year=2030)))
    report = run_from_inputs(cfg)
    assert report.valuation.as_of_year == 2030
    assert len(report.analysis.yearly_projections) == 7


def test_cli_writes_reports(tmp_path, monkeypatch, capsys):
    payload = make_inputs_payload()
    payload["listings"] = [
        {"address": "1 A St", "price": 420000, "living_area": 1600},
        {"address": "2 B St", "price": 380000},
    ]
    cfg_path = tmp_path / "inputs.json"
    cfg_path.write_text(json.dumps(payload), encoding="utf-8")
    out_path = tmp_path / "report.json"

    monkeypatch.setattr(sys, "argv", ["main.py", "--config", str(cfg_path), "--out", str(out_path), "--horizon", "12"])
    cli.main()

    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert set(data) >= {"valuation", "analysis", "scenarios", "risk_score", "recommendation_score", "insights"}
    assert len(data["analysis"]["yearly_projections"]) == 12

    market = json.loads((tmp_path / "report_market.json").read_text(encoding="utf-8"))
    assert market["zipcode"] == "98103"
    assert len(market["top_properties"]) == 2

    printed = capsys.readouterr().out
    assert "Report written to" in printed


def test_cli_runs_sample_inputs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["main.py"])
    cli.main()
    data = json.loads((tmp_path / "property_analysis.json").read_text(encoding="utf-8"))
    assert data["valuation"]["county"] == "King"


def test_cli_reports_engine_errors(tmp_path, monkeypatch, capsys):
    payload = make_inputs_payload()
    payload["property"]["living_area"] = 0
    cfg_path = tmp_path / "inputs.json"
    cfg_path.write_text(json.dumps(payload), encoding="utf-8")
    out_path = tmp_path / "report.json"

    monkeypatch.setattr(sys, "argv", ["main.py", "--config", str(cfg_path), "--out", str(out_path)])
    with pytest.raises(InvalidInputError):
        cli.main()

    assert "Error during analysis: living_area" in capsys.readouterr().out
    assert not out_path.exists()
