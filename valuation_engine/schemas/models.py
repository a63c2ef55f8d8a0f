# valuation_engine/schemas/models.py

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =========================
# Closed enumerations
# =========================


def _norm_label(value: str) -> str:
    return " ".join(value.strip().lower().replace("_", " ").replace("-", " ").split())


class ConditionTier(str, Enum):
    """Ordered condition tiers, best first."""

    NEW_LUXURY = "New/Luxury"
    RENOVATED = "Renovated"
    WELL_MAINTAINED = "Well Maintained"
    ORIGINAL = "Original"
    FIXER_UPPER = "Fixer-upper"

    @classmethod
    def parse(cls, value: Any) -> ConditionTier | None:
        """Map a label (or alias) to a tier; unknown labels return None."""
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _CONDITION_ALIASES.get(_norm_label(value))


class PropertyCategory(str, Enum):
    """Structure type. Attached homes share walls (townhome-style)."""

    DETACHED = "Single Family House"
    ATTACHED = "Townhome"

    @classmethod
    def parse(cls, value: Any) -> PropertyCategory | None:
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        return _CATEGORY_ALIASES.get(_norm_label(value))


_CONDITION_ALIASES: dict[str, ConditionTier] = {
    "new/luxury": ConditionTier.NEW_LUXURY,
    "new / luxury": ConditionTier.NEW_LUXURY,
    "new luxury": ConditionTier.NEW_LUXURY,
    "new": ConditionTier.NEW_LUXURY,
    "luxury": ConditionTier.NEW_LUXURY,
    "renovated": ConditionTier.RENOVATED,
    "well maintained": ConditionTier.WELL_MAINTAINED,
    "wellmaintained": ConditionTier.WELL_MAINTAINED,
    "original": ConditionTier.ORIGINAL,
    "fixer upper": ConditionTier.FIXER_UPPER,
    "fixer": ConditionTier.FIXER_UPPER,
}

_CATEGORY_ALIASES: dict[str, PropertyCategory] = {
    "single family house": PropertyCategory.DETACHED,
    "single family": PropertyCategory.DETACHED,
    "detached": PropertyCategory.DETACHED,
    "house": PropertyCategory.DETACHED,
    "townhome": PropertyCategory.ATTACHED,
    "townhouse": PropertyCategory.ATTACHED,
    "attached": PropertyCategory.ATTACHED,
}


# =========================
# Location coefficients
# =========================


class GeoProfile(BaseModel):
    """
    Fixed bundle of location coefficients for one county. Multipliers are applied
    to the rule-based value; 1.0 is neutral.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., description="County key (e.g., 'King') or 'Default'.")
    tax_rate: float = Field(..., ge=0, le=1, description="Annual property tax as a fraction of value.")
    base_appreciation_rate: float = Field(..., description="Baseline annual appreciation as a fraction (0.045 = 4.5%/yr).")
    lot_value_per_area_unit: float = Field(..., ge=0, description="Land value per lot area unit (sqft) before tier discounts.")
    school_premium: float = Field(1.0, gt=0)
    walkability_factor: float = Field(1.0, gt=0)
    job_proximity_factor: float = Field(1.0, gt=0)
    crime_discount: float = Field(1.0, gt=0)
    transit_premium: float = Field(1.0, gt=0)
    county_premium: float = Field(1.0, gt=0, description="Informational county premium; not applied to value.")
    niche_score: float = Field(0.0, description="Neighborhood quality bump added to the base school rating.")

    # County-tier extensions
    default_price_per_area: float = Field(350.0, gt=0, description="Price per area used when market data is absent.")
    bedroom_value: float = Field(22_000.0, ge=0, description="Contribution of one bedroom to base value.")
    bathroom_value: float = Field(16_000.0, ge=0, description="Contribution of one bathroom to base value.")

    @property
    def amenity_multiplier(self) -> float:
        """Product of school, walkability, job-proximity, crime and transit factors."""
        return self.school_premium * self.walkability_factor * self.job_proximity_factor * self.crime_discount * self.transit_premium


# =========================
# Core inputs
# =========================


class PropertyInput(BaseModel):
    """Structured attributes of the subject property. Areas are in square feet."""

    location_code: str = Field("", description="Zip code or county name used to resolve the GeoProfile.")
    living_area: float = Field(..., description="Finished living area. Must be > 0.")
    lot_area: float = Field(0.0, ge=0, description="Lot size.")
    bedrooms: int = Field(3, ge=0)
    bathrooms: float = Field(2.0, ge=0)
    year_built: int = Field(..., ge=1600, le=2200)
    category: PropertyCategory | None = Field(
        PropertyCategory.DETACHED, description="Structure type; unrecognized labels become None (neutral)."
    )
    condition: ConditionTier | None = Field(
        ConditionTier.WELL_MAINTAINED, description="Condition tier; unrecognized labels become None (neutral)."
    )

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v: Any) -> PropertyCategory | None:
        return PropertyCategory.parse(v)

    @field_validator("condition", mode="before")
    @classmethod
    def _coerce_condition(cls, v: Any) -> ConditionTier | None:
        return ConditionTier.parse(v)


class MarketStatistics(BaseModel):
    """
    Aggregate statistics for the property's location. Every field is optional;
    the valuation model substitutes documented defaults for gaps.
    """

    median_price_per_area: float | None = Field(None, description="Median sale price per sqft.")
    sale_to_list_ratio: float | None = Field(None, ge=0, description="Median sale price / list price (1.0 = at list).")
    months_of_supply: float | None = Field(None, ge=0, description="Months of inventory at the current sales pace.")
    sentiment_score: float | None = Field(None, description="News sentiment, roughly in [-1, 1].")
    recent_news: list[str] = Field(default_factory=list, description="Recent headlines backing the sentiment score.")


class RentalEstimate(BaseModel):
    """Rental estimate supplied by an external provider."""

    monthly_rent: float = Field(..., description="Expected monthly rent. Must be > 0.")
    rent_low: float | None = Field(None, ge=0)
    rent_high: float | None = Field(None, ge=0)
    confidence: float | None = Field(None, ge=0, le=100, description="Provider confidence in percent.")
    other_income_monthly: float = Field(0.0, ge=0, description="Parking, storage, laundry and similar monthly income.")


class LoanTerms(BaseModel):
    """Acquisition price and fixed-rate mortgage parameters."""

    purchase_price: float = Field(..., description="Contract price. Must be > 0.")
    down_payment_fraction: float = Field(0.20, ge=0, le=1, description="Down payment as a fraction of price (0.20 = 20%).")
    annual_interest_rate: float = Field(0.07, ge=0, le=1, description="Annual note rate as a fraction (0.07 = 7%).")
    amortization_years: int = Field(30, ge=1, le=50, description="Fully amortizing term in years.")


class OperatingAssumptions(BaseModel):
    """
    Expense ratios and growth assumptions for the cash-flow model.

    Value-based lines (tax, insurance, maintenance) use the valuation point
    estimate; income-based lines (management, vacancy) use gross income.
    """

    insurance_rate: float = Field(0.003, ge=0, le=0.05, description="Annual insurance as a fraction of value.")
    maintenance_rate: float = Field(0.015, ge=0, le=0.10, description="Annual maintenance as a fraction of value.")
    maintenance_rate_newer: float = Field(
        0.006, ge=0, le=0.10, description="Maintenance rate when age < 15 years or the property is renovated."
    )
    management_rate: float = Field(0.08, ge=0, le=0.25, description="Management fee as a fraction of gross income.")
    vacancy_rate: float = Field(0.05, ge=0, le=0.25, description="Vacancy reserve as a fraction of gross income.")
    hoa_monthly: float = Field(250.0, ge=0, description="Monthly HOA fee for non-detached properties.")
    utilities_monthly: float = Field(50.0, ge=0, description="Owner-paid utilities per month.")
    closing_cost_rate: float = Field(0.03, ge=0, le=0.2, description="Closing/initial costs as a fraction of price.")
    rent_growth: float = Field(0.03, ge=-0.2, le=0.2, description="Annual rent growth.")
    expense_growth: float = Field(0.025, ge=-0.2, le=0.2, description="Annual operating expense growth.")
    appreciation_rate: float | None = Field(
        None, ge=-0.5, le=0.5, description="Annual appreciation; None uses the location's base rate."
    )
    expense_multiplier: float = Field(1.0, gt=0, le=1.5, description="Scales the ratio-based expense lines.")


# =========================
# Valuation outputs
# =========================


Grade = Literal["A+", "A", "B+", "B"]


class ValuationResult(BaseModel):
    """Rule-based value estimate, confidence band and five-year price path."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    point_estimate: float = Field(..., gt=0)
    low_bound: float = Field(..., gt=0)
    high_bound: float = Field(..., gt=0)
    forecast: tuple[float, ...] = Field(..., description="Projected value for years 0..5 (year 0 = point estimate).")
    grade: Grade

    county: str
    geo: GeoProfile
    subject: PropertyInput = Field(..., description="The property that was valued.")
    as_of_year: int

    # Components, useful for audits
    base_value: float
    age_factor: float
    market_momentum: float
    condition_factor: float
    forecast_growth_rate: float

    # Rule-based investment view
    estimated_rent: float = Field(..., description="Rule-based monthly rent estimate.")
    property_tax: float
    insurance: float
    maintenance: float
    hoa_monthly: float
    net_yield: float = Field(..., description="Net yield in percent.")

    school_rating: int
    months_of_supply: float
    sale_to_list_ratio: float
    news: list[str] = Field(default_factory=list)
    confidence: float = 96.0
    model_type: str = "Rule-Based"

    @property
    def age(self) -> int:
        return max(0, self.as_of_year - self.subject.year_built)


# =========================
# Investment outputs
# =========================


class IncomeBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    monthly_rent: float
    annual_rent: float
    other_income: float
    gross_income: float


class ExpenseBreakdown(BaseModel):
    """Year-1 annual operating expenses (excludes debt service)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    property_tax: float
    insurance: float
    maintenance: float
    property_management: float
    hoa: float
    utilities: float
    vacancy: float
    total: float


class YearlyProjection(BaseModel):
    """One row per projected year. Currency in whole units."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    year: int = Field(..., ge=1)
    property_value: float
    appreciation: float = Field(..., description="Value gained during this year.")
    rental_income: float
    operating_expenses: float
    debt_service: float
    cash_flow: float
    cumulative_cash_flow: float
    principal_paid: float
    loan_balance: float
    equity: float
    total_return: float


class YearlyEquity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    year: int
    loan_balance: float
    property_value: float
    equity: float
    equity_percentage: float


class InvestmentAnalysis(BaseModel):
    """
    Full single-scenario analysis. Currency in whole units, rates and returns in
    percent (2 dp), ratios unitless (2 dp).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    purchase_price: float
    down_payment: float
    loan_amount: float
    interest_rate: float = Field(..., description="Annual note rate in percent.")
    loan_term_years: int
    monthly_mortgage: float = Field(..., description="Monthly P&I payment, rounded to the cent.")

    income: IncomeBreakdown
    expenses: ExpenseBreakdown

    noi: float
    monthly_cash_flow: float
    annual_cash_flow: float

    cap_rate: float
    cash_on_cash_return: float
    gross_rent_multiplier: float
    debt_service_coverage_ratio: float | None = Field(None, description="None when there is no debt service.")
    return_on_investment: float
    internal_rate_of_return: float | None = Field(None, description="None when the IRR could not be solved.")

    total_investment: float
    appreciation_rate: float = Field(..., description="Appreciation used for the projection, in percent.")
    yearly_projections: tuple[YearlyProjection, ...]
    equity_build_up: tuple[YearlyEquity, ...]

    @property
    def monthly_rent(self) -> float:
        return self.income.monthly_rent

    @property
    def final_year(self) -> YearlyProjection:
        return self.yearly_projections[-1]


class ScenarioOverlay(BaseModel):
    """Deltas applied to the base inputs before running one scenario."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Literal["conservative", "moderate", "optimistic"]
    interest_rate_delta: float = Field(0.0, description="Absolute change to the annual rate (0.005 = +50 bps).")
    rent_adjustment: float = Field(0.0, gt=-1, description="Relative rent change (-0.05 = 5% lower rent).")
    expense_multiplier: float = Field(1.0, gt=0, le=1.5, description="Scales the ratio-based expense lines.")
    appreciation_delta: float = Field(0.0, description="Absolute change to annual appreciation.")
    rent_growth_delta: float = Field(0.0)
    expense_growth_delta: float = Field(0.0)
    description: str = ""


class ScenarioSet(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    conservative: InvestmentAnalysis
    moderate: InvestmentAnalysis
    optimistic: InvestmentAnalysis
    overlays: tuple[ScenarioOverlay, ...] = Field(default_factory=tuple)

    def ordered(self) -> tuple[InvestmentAnalysis, InvestmentAnalysis, InvestmentAnalysis]:
        """Least to most favorable."""
        return (self.conservative, self.moderate, self.optimistic)


# =========================
# Market conditions & scoring
# =========================


class MarketConditions(BaseModel):
    """
    Zip-level market and demographic data used by scoring and market analysis.
    Percent-valued fields use percent units (5.0 = 5%). Missing fields skip the
    rules that depend on them.
    """

    model_config = ConfigDict(extra="ignore")

    zipcode: str | None = None
    median_price: float | None = Field(None, ge=0)
    price_per_area: float | None = Field(None, ge=0)
    days_on_market: float | None = Field(None, ge=0)
    months_supply: float | None = Field(None, ge=0)
    year_over_year_appreciation: float | None = None
    average_rent: float | None = Field(None, ge=0)
    vacancy_rate: float | None = Field(None, ge=0, le=100)
    population: int | None = Field(None, ge=0)
    median_income: float | None = Field(None, ge=0)
    unemployment_rate: float | None = Field(None, ge=0, le=100)
    crime_index: float | None = Field(None, ge=0)
    school_rating: float | None = Field(None, ge=0, le=10)


class ScoreCard(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    risk_score: int = Field(..., ge=0, le=100, description="Higher is safer.")
    recommendation_score: int = Field(..., ge=0, le=100)


class InsightReport(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    insights: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ComparableListing(BaseModel):
    """A listing in the analyzed zip code (already retrieved upstream)."""

    model_config = ConfigDict(extra="ignore")

    address: str | None = None
    price: float = Field(..., ge=0)
    living_area: float | None = Field(None, gt=0)


class TopListing(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    address: str
    price: float
    estimated_rent: float
    estimated_cash_flow: float
    cap_rate: float


MarketTrend = Literal["hot", "moderate", "slow"]


class MarketAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    zipcode: str
    market: MarketConditions
    average_property_price: float
    average_rent: float
    price_to_rent_ratio: float
    median_listing_price: float | None = None
    p25_listing_price: float | None = None
    p75_listing_price: float | None = None
    market_trend: MarketTrend
    investment_potential: int = Field(..., ge=0, le=100)
    insights: list[str] = Field(default_factory=list)
    top_properties: tuple[TopListing, ...] = Field(default_factory=tuple)


class PropertyAnalysisReport(BaseModel):
    """End-to-end result for one property: valuation, base case, scenarios, scores and narrative."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    valuation: ValuationResult
    analysis: InvestmentAnalysis
    scenarios: ScenarioSet
    risk_score: int
    recommendation_score: int
    insights: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    scenario_notes: list[str] = Field(default_factory=list)
    irr_rating: str = "N/A"
