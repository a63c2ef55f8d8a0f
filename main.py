# main.py
"""
Entry Point: Residential Valuation & Investment Analysis Engine

Purpose
-------
Run the property-analysis pipeline end-to-end and emit a JSON report:
  1) Load inputs (sample defaults or --config JSON).
  2) Value the property, run conservative / moderate / optimistic scenarios,
     score the base case and synthesize insights.
  3) Write the PropertyAnalysisReport as JSON; when the inputs carry zip-level
     listings, also write a market analysis next to it.

Usage
-----
    python main.py
    python main.py --config data/sample/inputs.json --out report.json --horizon 10 --verbose
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from valuation_engine.core.errors import ENGINE_ERRORS
from valuation_engine.inputs.inputs import AppInputs, InputsLoader, RunOptions
from valuation_engine.market.analysis import analyze_market
from valuation_engine.orchestrator.pipeline import run_from_inputs
from valuation_engine.schemas.models import (
    LoanTerms,
    MarketConditions,
    MarketStatistics,
    PropertyInput,
    RentalEstimate,
)


def build_sample_inputs() -> AppInputs:
    """Return a demo payload: a renovated Seattle single-family rental."""
    return AppInputs(
        property=PropertyInput(
            location_code="98103",
            living_area=1850,
            lot_area=5000,
            bedrooms=3,
            bathrooms=2,
            year_built=1995,
            category="Single Family House",
            condition="Renovated",
        ),
        rental=RentalEstimate(monthly_rent=3600.0),
        loan=LoanTerms(purchase_price=850_000.0),
        market_statistics=MarketStatistics(median_price_per_area=520.0, sale_to_list_ratio=1.01, months_of_supply=2.0),
        market=MarketConditions(
            zipcode="98103",
            price_per_area=500.0,
            days_on_market=21,
            year_over_year_appreciation=4.5,
            vacancy_rate=4.0,
            unemployment_rate=3.6,
            crime_index=45,
        ),
        run=RunOptions(),
    )


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Residential Valuation & Investment Analysis Engine")
    p.add_argument("--config", type=str, default=None, help="Path to JSON inputs (flat or wrapped AppInputs).")
    p.add_argument("--out", type=str, default=None, help="Output JSON path (overrides config).")
    p.add_argument("--horizon", type=int, default=None, help="Projection horizon in years (overrides config).")
    p.add_argument("--as-of-year", type=int, default=None, help="Reference year for property age (overrides config).")
    p.add_argument("--parallel", action="store_true", default=None, help="Evaluate scenarios on a thread pool.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args()


def main():
    """Run end-to-end analysis and write property_analysis.json (or chosen output)."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loader = InputsLoader()
    cfg = loader.load(args.config) if args.config else build_sample_inputs()
    cfg = loader.with_overrides(
        cfg,
        out=args.out,
        horizon=args.horizon,
        as_of_year=args.as_of_year,
        parallel=args.parallel,
    )

    try:
        report = run_from_inputs(cfg)
    except ENGINE_ERRORS as e:
        print(f"Error during analysis: {e}")
        raise

    out_path = Path(cfg.run.out)
    out_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    print(f"Report written to {out_path}")
    print(
        f"Estimate ${report.valuation.point_estimate:,.0f} (grade {report.valuation.grade}), "
        f"cash flow ${report.analysis.monthly_cash_flow:,.0f}/mo, "
        f"IRR {report.irr_rating}, risk {report.risk_score}/100, recommendation {report.recommendation_score}/100"
    )

    if cfg.listings:
        market = analyze_market(cfg.market, cfg.listings, zipcode=cfg.market.zipcode or cfg.property.location_code)
        market_path = out_path.with_name(f"{out_path.stem}_market.json")
        market_path.write_text(market.model_dump_json(indent=2), encoding="utf-8")
        print(f"Market analysis written to {market_path} (trend: {market.market_trend})")


if __name__ == "__main__":
    main()
