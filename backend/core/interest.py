"""Compound interest engine."""

import logging
import math

from backend.schemas.deposit import CalculationResult, CanonicalParameters

logger = logging.getLogger(__name__)


def maturity_value(principal: float, rate: float, frequency: int, years: float) -> float:
    """
    Value of `principal` after `years` at annual `rate`, capitalised
    `frequency` times a year:

        A = P * (1 + r / n) ** (n * t)

    Degenerate inputs (any of P, r, t, n not positive) leave the principal
    unchanged. So does arithmetic that overflows or is not finite.
    """
    if principal <= 0 or rate <= 0 or years <= 0 or frequency <= 0:
        return principal

    try:
        amount = principal * (1 + rate / frequency) ** (frequency * years)
    except OverflowError:
        logger.debug("compound growth overflowed for P=%s r=%s n=%s t=%s", principal, rate, frequency, years)
        return principal

    if not math.isfinite(amount):
        return principal
    return amount


def compute(params: CanonicalParameters) -> CalculationResult:
    """Maturity value and interest earned. Values are never rounded here."""
    principal = params.principal
    amount = maturity_value(
        principal,
        params.rateFraction,
        params.compoundingFrequency,
        params.periodYears,
    )
    if amount == principal or not math.isfinite(principal):
        return CalculationResult(maturityValue=principal, totalInterest=0.0)
    return CalculationResult(maturityValue=amount, totalInterest=amount - principal)
