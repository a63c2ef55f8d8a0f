# valuation_engine/core/finance/irr.py

from __future__ import annotations

from collections.abc import Iterable, Sequence

# Search bracket for annual rates: -99% .. +1000%
RATE_FLOOR = -0.99
RATE_CEILING = 10.0


def npv(rate: float, cash_flows: Sequence[float]) -> float:
    """Net present value of periodic cash flows at t = 0, 1, 2, ..."""
    return float(sum(cf / ((1.0 + rate) ** t) for t, cf in enumerate(cash_flows)))


def irr(
    cash_flows: Iterable[float],
    *,
    max_iter: int = 200,
    tol: float = 1e-6,
    lo: float = RATE_FLOOR,
    hi: float = RATE_CEILING,
) -> float | None:
    """
    Compute annual IRR (Internal Rate of Return) by bisection over NPV(rate) = 0.

    Conventions:
      - cash_flows[0] is the initial outlay (negative); later entries are annual.
      - The bracket [lo, hi] is fixed, so the search always terminates.

    Returns:
      IRR as a decimal (0.12 for 12%), or None if there is no sign change, the
      bracket does not contain a root, or the iteration cap is hit first.
    """
    amounts = [float(x) for x in cash_flows]
    if len(amounts) < 2:
        return None

    # Must have sign change to have a real IRR
    has_pos = any(a > 0 for a in amounts)
    has_neg = any(a < 0 for a in amounts)
    if not (has_pos and has_neg):
        return None

    f_lo = npv(lo, amounts)
    f_hi = npv(hi, amounts)
    if f_lo == 0.0:
        return lo
    if f_hi == 0.0:
        return hi
    if f_lo * f_hi > 0.0:
        # never bracketed
        return None

    for _ in range(max_iter):
        mid = (lo + hi) / 2.0
        val = npv(mid, amounts)
        if abs(val) < tol or (hi - lo) / 2.0 < tol:
            return mid
        if (val > 0.0) == (f_lo > 0.0):
            lo, f_lo = mid, val
        else:
            hi = mid

    return None
