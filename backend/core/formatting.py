"""Display helpers for amounts and rates. Rounding happens here, not in the engine."""

from typing import Dict

COMPOUNDING_LABELS: Dict[int, str] = {
    12: "Monthly",
    4: "Quarterly",
    2: "Half-Yearly",
    1: "Annually",
}

CURRENCY_SYMBOL = "₹"

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def _group_indian(digits: str) -> str:
    # last three digits, then groups of two: 12,34,56,789
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: float) -> str:
    """Format an amount in rupees with Indian digit grouping, e.g. ₹1,06,660.29."""
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}{CURRENCY_SYMBOL}{_group_indian(whole)}.{fraction}"


def format_axis_value(value: float) -> str:
    """Short tick label for the value axis (1.1L, 2.5Cr, ...)."""
    if value >= CRORE:
        return f"{value / CRORE:.1f}Cr"
    if value >= LAKH:
        return f"{value / LAKH:.1f}L"
    if value >= THOUSAND:
        return f"{value / THOUSAND:.1f}K"
    return f"{value:g}"


def format_rate_percent(rate_fraction: float) -> str:
    return f"{rate_fraction * 100:.2f}%"


def compounding_label(frequency: int) -> str:
    return COMPOUNDING_LABELS.get(frequency, f"{frequency}x per year")
