from __future__ import annotations

from .model import PayResult


def compute_pay(
    *,
    regular_hours: float,
    overtime_hours: float,
    hourly_rate: float,
    overtime_multiplier: float,
) -> PayResult:
    """Regular and overtime pay at native float precision.

    Round only for display: stored values feed period totals.
    """
    regular_pay = regular_hours * hourly_rate
    overtime_pay = overtime_hours * hourly_rate * overtime_multiplier
    return PayResult(regular_pay=regular_pay, overtime_pay=overtime_pay, total_pay=regular_pay + overtime_pay)
