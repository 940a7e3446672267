"""Data contracts for fixed-deposit calculations."""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PeriodUnit = Literal["months", "years"]
CompoundingFrequency = Literal[1, 2, 4, 12]

MAX_PERIOD_YEARS = 100


class FinancialInputs(BaseModel):
    """Raw deposit parameters as entered by the user."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    principal: float = Field(100000.0, ge=0, description="Amount deposited at period 0.")
    annualRatePercent: float = Field(
        6.5,
        ge=0,
        description="Annual interest rate expressed as a percentage (e.g. 6.5 for 6.5%).",
    )
    period: float = Field(1.0, ge=0, description="Deposit term, in `periodUnit` units.")
    periodUnit: PeriodUnit = "years"
    compoundingFrequency: CompoundingFrequency = Field(
        4,
        description="Times per year interest is capitalised.",
    )

    @model_validator(mode="after")
    def ensure_bounded_term(self) -> "FinancialInputs":
        years = self.period if self.periodUnit == "years" else self.period / 12
        if years > MAX_PERIOD_YEARS:
            raise ValueError(f"period must not exceed {MAX_PERIOD_YEARS} years")
        return self


class CanonicalParameters(BaseModel):
    """Unit-consistent parameters consumed by the interest engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    principal: float
    rateFraction: float
    periodYears: float
    compoundingFrequency: int


class CalculationResult(BaseModel):
    """Maturity value and interest earned, unrounded."""

    model_config = ConfigDict(extra="forbid")

    maturityValue: float
    totalInterest: float


class ProjectionPoint(BaseModel):
    """Single row of a whole-year growth projection."""

    model_config = ConfigDict(extra="forbid")

    periodIndex: int = Field(..., ge=0)
    label: str
    principal: float
    totalValue: float


class ChartRow(BaseModel):
    """Row shape consumed by the stacked principal/total area chart."""

    year: str
    totalValue: float
    principal: float


class DisplayValues(BaseModel):
    maturityValue: str
    totalInterest: str
    rate: str
    compounding: str


class DepositResponse(BaseModel):
    """Everything the calculator view needs after an input change."""

    inputs: FinancialInputs
    parameters: CanonicalParameters
    result: CalculationResult
    projection: List[ChartRow]
    display: DisplayValues
