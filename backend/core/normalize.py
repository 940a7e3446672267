"""Conversion of raw deposit inputs into canonical units."""

from backend.schemas.deposit import CanonicalParameters, FinancialInputs

MONTHS_PER_YEAR = 12


def normalize(inputs: FinancialInputs) -> CanonicalParameters:
    """Express the term in years and the rate as a decimal fraction."""
    if inputs.periodUnit == "years":
        period_years = inputs.period
    else:
        period_years = inputs.period / MONTHS_PER_YEAR

    return CanonicalParameters(
        principal=inputs.principal,
        rateFraction=inputs.annualRatePercent / 100,
        periodYears=period_years,
        compoundingFrequency=int(inputs.compoundingFrequency),
    )


def period_in_months(inputs: FinancialInputs) -> float:
    """Term in months, whatever unit the user picked."""
    if inputs.periodUnit == "years":
        return inputs.period * MONTHS_PER_YEAR
    return inputs.period
