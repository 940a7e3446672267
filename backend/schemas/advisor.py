"""Data contracts for the interest-rate advisor."""

from pydantic import BaseModel, ConfigDict, Field

from backend.schemas.deposit import MAX_PERIOD_YEARS, FinancialInputs


class AdvisoryRequest(BaseModel):
    """What the advisor is asked about. The period is always in months."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    fdAmount: float = Field(..., ge=0, description="The amount for the fixed deposit.")
    fdPeriod: float = Field(
        ...,
        ge=0,
        le=MAX_PERIOD_YEARS * 12,
        description="The period (in months) for the fixed deposit.",
    )


class AdvisoryResponse(BaseModel):
    """A suggested rate, as a decimal fraction (0.065 for 6.5%), and why."""

    model_config = ConfigDict(frozen=True)

    suggestedInterestRate: float = Field(..., ge=0, le=1)
    reasoning: str

    @property
    def suggestedRateFraction(self) -> float:
        return self.suggestedInterestRate


class SuggestionResponse(AdvisoryResponse):
    suggestedRatePercent: float


class ApplySuggestionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    inputs: FinancialInputs
    suggestion: AdvisoryResponse
