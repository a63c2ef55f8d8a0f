# valuation_engine/inputs/inputs.py
"""
Inputs loader for the valuation engine.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Tolerant market sections: loosely-keyed statistics and camelCase market
  conditions are normalized before validation.
- Run options (output path, horizon, valuation year, parallel scenarios) with
  environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Flat (root = AppInputs)
   {
     "property": { ... PropertyInput ... },
     "rental": { "monthly_rent": 2800 },
     "loan": { "purchase_price": 500000 },
     "assumptions": { ... OperatingAssumptions, optional ... },
     "market_statistics": { "median_ppsf": 512, ... },
     "market": { "vacancyRate": 4.2, ... },
     "run": { "out": "property_analysis.json", "horizon": 10 }
   }

2) Wrapped
   {
     "inputs": { ... everything above except "run" ... },
     "run": { ... }
   }

Environment overrides (optional)
--------------------------------
- VALENGINE_OUT          -> AppInputs.run.out
- VALENGINE_HORIZON      -> AppInputs.run.horizon (int)
- VALENGINE_AS_OF_YEAR   -> AppInputs.run.as_of_year (int)
- VALENGINE_PARALLEL     -> AppInputs.run.parallel ("1"/"true"/"yes"/"on")

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> AppInputs
    - load_json(text: str) -> AppInputs
    - with_overrides(cfg, **kwargs) -> AppInputs (non-destructive copies)
- function load_inputs(path: str | Path | None) -> AppInputs  (convenience)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

from valuation_engine.core.valuation.model import DEFAULT_AS_OF_YEAR
from valuation_engine.market.snapshot import build_market_conditions, build_market_statistics
from valuation_engine.schemas.models import (
    ComparableListing,
    LoanTerms,
    MarketConditions,
    MarketStatistics,
    OperatingAssumptions,
    PropertyInput,
    RentalEstimate,
)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the analysis run."""

    out: str = Field("property_analysis.json", description="Path to write the JSON report.")
    horizon: int = Field(10, ge=1, le=50, description="Projection horizon in years.")
    as_of_year: int = Field(DEFAULT_AS_OF_YEAR, ge=1900, le=2200, description="Reference year for property age.")
    parallel: bool = Field(False, description="Evaluate the three scenarios on a thread pool.")


class AppInputs(BaseModel):
    """
    Full input payload for one property analysis.

    Attributes:
        property:          Subject property attributes.
        rental:            Rent estimate used by the cash-flow model.
        loan:              Purchase price and financing.
        assumptions:       Operating expense and growth assumptions.
        market_statistics: Sales statistics for the valuation model (may be empty).
        market:            Market conditions for scoring (may be empty).
        listings:          Optional zip-level listings for market analysis.
        run:               Non-financial, runtime options for the current execution.
    """

    property: PropertyInput
    rental: RentalEstimate
    loan: LoanTerms
    assumptions: OperatingAssumptions = OperatingAssumptions()
    market_statistics: MarketStatistics = MarketStatistics()
    market: MarketConditions = MarketConditions()
    listings: list[ComparableListing] = Field(default_factory=list)
    run: RunOptions = RunOptions()


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Responsibilities:
        - Read JSON from a file or string
        - Accept both the flat and wrapped shapes
        - Normalize market sections, then validate with Pydantic
        - Apply environment overrides for run options

    Default search (when path=None):
        1) ./data/sample/inputs.json
        2) ./config.json
    """

    env_prefix: str = "VALENGINE_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        """
        Load inputs from a JSON file (path). If path is None, try defaults.

        Returns:
            AppInputs (validated).
        """
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        return self._finish(raw)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (flat or wrapped shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Inputs JSON root must be an object")
        return self._finish(raw)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        horizon: int | None = None,
        as_of_year: int | None = None,
        parallel: bool | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if horizon is not None:
            updates["horizon"] = horizon
        if as_of_year is not None:
            updates["as_of_year"] = as_of_year
        if parallel is not None:
            updates["parallel"] = parallel
        return self._update_run(cfg, updates)

    # ---------- Internals ----------

    def _finish(self, raw: dict[str, Any]) -> AppInputs:
        data = self._normalize(raw)
        cfg = self._parse_root(data)
        return self._apply_env_overrides(cfg)

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/inputs.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/inputs.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            json_file = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(json_file, dict):
            raise ValueError(f"Inputs JSON root must be an object in {p}")
        return cast(dict[str, Any], json_file)

    def _normalize(self, raw: dict[str, Any]) -> dict[str, Any]:
        """
        Unwrap the wrapped shape and run the tolerant market builders so that
        alias keys (median_ppsf, camelCase conditions) validate cleanly.
        """
        if isinstance(raw.get("inputs"), dict):
            data = dict(raw["inputs"])
            if "run" in raw:
                data["run"] = raw["run"]
        else:
            data = dict(raw)

        stats = data.get("market_statistics")
        if isinstance(stats, dict):
            sentiment = stats.get("sentiment_data") if isinstance(stats.get("sentiment_data"), dict) else None
            data["market_statistics"] = build_market_statistics(stats, sentiment=sentiment)

        market = data.get("market")
        if isinstance(market, dict):
            try:
                data["market"] = build_market_conditions(market)
            except ValidationError as e:
                raise ValueError(f"Inputs validation failed (market):\n{e}") from e

        return data

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        """Apply light, optional overrides from environment variables to run options."""
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            updates["out"] = out

        for key in ("horizon", "as_of_year"):
            val = os.getenv(f"{prefix}{key.upper()}")
            if val:
                try:
                    updates[key] = int(val)
                except ValueError:
                    # Ignore bad value; keep validated cfg value
                    pass

        parallel = os.getenv(f"{prefix}PARALLEL")
        if parallel:
            normalized = parallel.strip().lower()
            if normalized in _TRUTHY:
                updates["parallel"] = True
            elif normalized in _FALSY:
                updates["parallel"] = False

        return self._update_run(cfg, updates)

    def _update_run(self, cfg: AppInputs, updates: dict[str, Any]) -> AppInputs:
        if not updates:
            return cfg
        try:
            run_new = RunOptions.model_validate({**cfg.run.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Run options validation failed:\n{e}") from e
        return cfg.model_copy(update={"run": run_new})


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
