from __future__ import annotations

from typing import Iterable, List

from kpc_ai_dashboard.core.schema import PAYMENT_BUCKETS


def payment_midpoint(text: str) -> float:
    """
    Map a monthly-spend answer to a representative amount (10,000 KRW units).

    Unmatched or empty answers map to 0, the same as an explicit "no paid
    plan". Only used for averaging, never for display.
    """
    if not text:
        return 0.0
    for label, midpoint in PAYMENT_BUCKETS:
        if label in text:
            return midpoint
    return 0.0


def payment_midpoints(values: Iterable[str]) -> List[float]:
    return [payment_midpoint(v or "") for v in values]


def paid_count(values: Iterable[str]) -> int:
    return sum(1 for a in payment_midpoints(values) if a > 0)


def average_spend(values: Iterable[str]) -> float:
    amounts = payment_midpoints(values)
    if not amounts:
        return 0.0
    return sum(amounts) / len(amounts)


def paid_rate(values: Iterable[str]) -> float:
    """Share (0.0-1.0) of answers with a non-zero spend bucket."""
    amounts = payment_midpoints(values)
    if not amounts:
        return 0.0
    return sum(1 for a in amounts if a > 0) / len(amounts)
