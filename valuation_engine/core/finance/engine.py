# valuation_engine/core/finance/engine.py
from __future__ import annotations

import logging

from valuation_engine.core.errors import InvalidInputError, require_positive
from valuation_engine.core.valuation.tables import uses_newer_maintenance
from valuation_engine.schemas.models import (
    ExpenseBreakdown,
    IncomeBreakdown,
    InvestmentAnalysis,
    LoanTerms,
    OperatingAssumptions,
    PropertyCategory,
    RentalEstimate,
    ValuationResult,
    YearlyEquity,
    YearlyProjection,
)

from .amortization import amortization_schedule, monthly_payment
from .irr import irr

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_YEARS = 10


def _usd(x: float) -> float:
    """Round currency to whole units."""
    return float(round(x))


def _pct(x: float) -> float:
    return round(x, 2)


def _grow(val: float, rate: float, years: int) -> float:
    return val * ((1.0 + (rate or 0.0)) ** years)


def _annual_expenses(
    valuation: ValuationResult,
    gross_income: float,
    a: OperatingAssumptions,
) -> dict[str, float]:
    """Year-1 operating expenses by line (full precision)."""
    value = valuation.point_estimate
    prop = valuation.subject
    k = a.expense_multiplier

    maint_rate = a.maintenance_rate_newer if uses_newer_maintenance(valuation.age, prop.condition) else a.maintenance_rate
    lines = {
        "property_tax": value * valuation.geo.tax_rate,
        "insurance": value * a.insurance_rate * k,
        "maintenance": value * maint_rate * k,
        "property_management": gross_income * a.management_rate * k,
        "hoa": 0.0 if prop.category is PropertyCategory.DETACHED else a.hoa_monthly * 12.0,
        "utilities": a.utilities_monthly * 12.0,
        "vacancy": gross_income * a.vacancy_rate * k,
    }
    lines["total"] = sum(lines.values())
    return lines


def analyze(
    valuation: ValuationResult,
    rental: RentalEstimate,
    loan_terms: LoanTerms,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
    *,
    assumptions: OperatingAssumptions | None = None,
) -> InvestmentAnalysis:
    """
    Run the amortization and cash-flow model for one set of assumptions.

    Raises:
        InvalidInputError: purchase price or monthly rent is not > 0, or horizon < 1.
    """
    price = require_positive("purchase_price", loan_terms.purchase_price)
    rent = require_positive("monthly_rent", rental.monthly_rent)
    if horizon_years < 1:
        raise InvalidInputError("horizon_years", horizon_years, "must be >= 1")

    a = assumptions or OperatingAssumptions()
    rate = loan_terms.annual_interest_rate
    term = loan_terms.amortization_years

    # Loan sizing
    down = price * loan_terms.down_payment_fraction
    loan0 = price - down
    closing = price * a.closing_cost_rate
    total_investment = down + closing
    mortgage = monthly_payment(loan0, rate, term)
    annual_debt_service = mortgage * 12.0

    # Income
    annual_rent = rent * 12.0
    other_income = rental.other_income_monthly * 12.0
    gross = annual_rent + other_income

    # Expenses & NOI (NOI excludes debt service)
    exp = _annual_expenses(valuation, gross, a)
    total_opex = exp["total"]
    noi = gross - total_opex

    monthly_cf = rent + rental.other_income_monthly - mortgage - total_opex / 12.0
    annual_cf = monthly_cf * 12.0

    cap_rate = noi / price * 100.0
    coc = (annual_cf / total_investment * 100.0) if total_investment > 0 else 0.0
    grm = price / annual_rent
    dscr = (noi / annual_debt_service) if annual_debt_service > 0 else None

    appreciation = a.appreciation_rate if a.appreciation_rate is not None else valuation.geo.base_appreciation_rate
    value0 = valuation.point_estimate

    # Debt schedule (monthly payments rolled up per year)
    sched = amortization_schedule(loan0, rate, term, horizon_years)

    years: list[YearlyProjection] = []
    equity_rows: list[YearlyEquity] = []
    flows = [-total_investment]
    cumulative = 0.0
    equity_final = 0.0

    for y in range(1, horizon_years + 1):
        value_y = _grow(value0, appreciation, y)
        value_prev = _grow(value0, appreciation, y - 1)
        income_y = _grow(gross, a.rent_growth, y - 1)
        opex_y = _grow(total_opex, a.expense_growth, y - 1)

        sd = sched[y - 1]
        cash_flow = income_y - opex_y - sd.payment
        cumulative += cash_flow
        equity = value_y - sd.ending_balance
        total_return = equity + cumulative - total_investment

        flows.append(cash_flow)
        equity_final = equity

        # Publish rounded value/balance and derive equity from them so the identity is exact
        value_r = _usd(value_y)
        balance_r = _usd(sd.ending_balance)
        years.append(
            YearlyProjection(
                year=y,
                property_value=value_r,
                appreciation=_usd(value_y - value_prev),
                rental_income=_usd(income_y),
                operating_expenses=_usd(opex_y),
                debt_service=_usd(sd.payment),
                cash_flow=_usd(cash_flow),
                cumulative_cash_flow=_usd(cumulative),
                principal_paid=_usd(sd.principal),
                loan_balance=balance_r,
                equity=value_r - balance_r,
                total_return=_usd(total_return),
            )
        )
        equity_rows.append(
            YearlyEquity(
                year=y,
                loan_balance=balance_r,
                property_value=value_r,
                equity=value_r - balance_r,
                equity_percentage=_pct(equity / value_y * 100.0) if value_y > 0 else 0.0,
            )
        )

    # Terminal year realizes remaining equity through a hypothetical sale
    flows[-1] += equity_final
    irr_val = irr(flows)

    y1 = sched[0]
    first_year_gain = annual_cf + y1.principal + (_grow(value0, appreciation, 1) - value0)
    roi = (first_year_gain / total_investment * 100.0) if total_investment > 0 else 0.0

    logger.debug(
        "analyzed price=%.0f rate=%.4f rent=%.0f: noi=%.0f cf/mo=%.2f irr=%s",
        price,
        rate,
        rent,
        noi,
        monthly_cf,
        "n/a" if irr_val is None else f"{irr_val:.4f}",
    )

    return InvestmentAnalysis(
        purchase_price=_usd(price),
        down_payment=_usd(down),
        loan_amount=_usd(loan0),
        interest_rate=_pct(rate * 100.0),
        loan_term_years=term,
        monthly_mortgage=round(mortgage, 2),
        income=IncomeBreakdown(
            monthly_rent=_usd(rent),
            annual_rent=_usd(annual_rent),
            other_income=_usd(other_income),
            gross_income=_usd(gross),
        ),
        expenses=ExpenseBreakdown(**{k: _usd(v) for k, v in exp.items()}),
        noi=_usd(noi),
        monthly_cash_flow=_usd(monthly_cf),
        annual_cash_flow=_usd(annual_cf),
        cap_rate=_pct(cap_rate),
        cash_on_cash_return=_pct(coc),
        gross_rent_multiplier=_pct(grm),
        debt_service_coverage_ratio=None if dscr is None else _pct(dscr),
        return_on_investment=_pct(roi),
        internal_rate_of_return=None if irr_val is None else _pct(irr_val * 100.0),
        total_investment=_usd(total_investment),
        appreciation_rate=_pct(appreciation * 100.0),
        yearly_projections=tuple(years),
        equity_build_up=tuple(equity_rows),
    )
