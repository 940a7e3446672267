from __future__ import annotations

import math
from typing import Iterable, Iterator, List

from backend.core.interest import maturity_value
from backend.schemas.deposit import ChartRow, ProjectionPoint


def year_label(index: int) -> str:
    return f"Year {index}"


def iter_projection(
    principal: float,
    annual_rate_percent: float,
    period_years: float,
    compounding_frequency: int,
) -> Iterator[ProjectionPoint]:
    """
    Yield one point per whole year from year 0 to ceil(period_years), inclusive.

    Conventions:
      - Year 0 is the initial deposit (totalValue == principal).
      - Each point is the compound formula evaluated at t = i years, so when
        the term has a fractional remainder the last point lies slightly
        beyond it (e.g. 1.5 years -> Years 0, 1, 2).
      - Nothing is yielded unless principal, rate and term are all positive
        and finite.

    Pure: iterating twice with the same arguments yields the same points.
    """
    if principal <= 0 or annual_rate_percent <= 0 or period_years <= 0:
        return
    if not all(math.isfinite(value) for value in (principal, annual_rate_percent, period_years)):
        return

    rate = annual_rate_percent / 100
    periods = math.ceil(period_years)

    for i in range(periods + 1):
        yield ProjectionPoint(
            periodIndex=i,
            label=year_label(i),
            principal=principal,
            totalValue=maturity_value(principal, rate, compounding_frequency, i),
        )


def generate_projection(
    principal: float,
    annual_rate_percent: float,
    period_years: float,
    compounding_frequency: int,
) -> List[ProjectionPoint]:
    return list(
        iter_projection(principal, annual_rate_percent, period_years, compounding_frequency)
    )


def to_chart_rows(points: Iterable[ProjectionPoint]) -> List[ChartRow]:
    """Chart records, rounded to currency precision for display."""
    return [
        ChartRow(
            year=point.label,
            totalValue=round(point.totalValue, 2),
            principal=point.principal,
        )
        for point in points
    ]


__all__ = [
    "iter_projection",
    "generate_projection",
    "to_chart_rows",
    "year_label",
]
