# valuation_engine/core/finance/amortization.py

from __future__ import annotations

from dataclasses import dataclass

_EPS = 1e-6  # for floating cleanup


@dataclass(frozen=True)
class YearDebt:
    year: int
    interest: float
    principal: float
    payment: float
    ending_balance: float


def monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """Monthly P&I payment for a fully amortizing fixed-rate loan (rate is an annual fraction)."""
    if principal < 0:
        raise ValueError("principal must be >= 0")
    if years < 0:
        raise ValueError("years must be >= 0")
    if years == 0 or principal == 0:
        return 0.0
    n = years * 12
    if annual_rate <= 0:
        return principal / n
    r = annual_rate / 12.0
    growth = (1.0 + r) ** n
    return principal * r * growth / (growth - 1.0)


def amortization_schedule(
    principal: float,
    annual_rate: float,
    amort_years: int,
    horizon_years: int,
) -> list[YearDebt]:
    """
    Annual roll-up of a monthly amortization schedule, one row per horizon year.

    Each year's principal is the sum of the 12 monthly principal components
    against the running balance. The final scheduled payment clears any
    floating residue, and years after payoff are zero-payment rows.
    """
    if principal < 0:
        raise ValueError("principal must be >= 0")
    if any(x < 0 for x in (amort_years, horizon_years)):
        raise ValueError("amort_years and horizon_years must be >= 0")

    pay = monthly_payment(principal, annual_rate, amort_years)
    r = max(annual_rate, 0.0) / 12.0
    total_months = amort_years * 12

    out: list[YearDebt] = []
    bal = float(principal)
    month = 0

    for y in range(1, horizon_years + 1):
        interest_y = 0.0
        principal_y = 0.0
        for _ in range(12):
            if bal <= 0.0 or month >= total_months:
                break
            month += 1
            interest = bal * r
            principal_pay = bal if month == total_months else min(bal, max(0.0, pay - interest))
            bal -= principal_pay
            # Clean tiny residual drift
            if bal < _EPS:
                bal = 0.0
            interest_y += interest
            principal_y += principal_pay
        out.append(
            YearDebt(
                y,
                interest=interest_y,
                principal=principal_y,
                payment=interest_y + principal_y,
                ending_balance=bal,
            )
        )

    return out
