"""Single entry point recomputing everything derived from the deposit inputs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from backend.core.formatting import (
    compounding_label,
    format_currency,
    format_rate_percent,
)
from backend.core.interest import compute
from backend.core.normalize import normalize
from backend.core.projection import generate_projection, to_chart_rows
from backend.schemas.deposit import (
    CalculationResult,
    CanonicalParameters,
    DepositResponse,
    DisplayValues,
    FinancialInputs,
    ProjectionPoint,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositSnapshot:
    inputs: FinancialInputs
    parameters: CanonicalParameters
    result: CalculationResult
    projection: List[ProjectionPoint]


def recompute(inputs: FinancialInputs) -> DepositSnapshot:
    """Derive parameters, result and projection. Call on every input change."""
    parameters = normalize(inputs)
    result = compute(parameters)
    projection = generate_projection(
        parameters.principal,
        inputs.annualRatePercent,
        parameters.periodYears,
        parameters.compoundingFrequency,
    )
    logger.debug(
        "recomputed deposit: maturity=%s interest=%s points=%d",
        result.maturityValue,
        result.totalInterest,
        len(projection),
    )
    return DepositSnapshot(
        inputs=inputs,
        parameters=parameters,
        result=result,
        projection=projection,
    )


def build_response(snapshot: DepositSnapshot) -> DepositResponse:
    """Shape a snapshot for the frontend, rounding only for display."""
    return DepositResponse(
        inputs=snapshot.inputs,
        parameters=snapshot.parameters,
        result=snapshot.result,
        projection=to_chart_rows(snapshot.projection),
        display=DisplayValues(
            maturityValue=format_currency(snapshot.result.maturityValue),
            totalInterest=format_currency(snapshot.result.totalInterest),
            rate=format_rate_percent(snapshot.parameters.rateFraction),
            compounding=compounding_label(snapshot.parameters.compoundingFrequency),
        ),
    )
