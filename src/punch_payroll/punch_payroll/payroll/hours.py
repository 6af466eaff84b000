from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import Instant, hours_between


@dataclass(frozen=True)
class HoursBreakdown:
    total_hours: float
    break_hours: float
    work_hours: float
    regular_hours: float
    overtime_hours: float


def _clamped_interval(start: Optional[Instant], end: Optional[Instant]) -> float:
    # Negative intervals (device skew, out-before-in) count as no data.
    if start is None or end is None:
        return 0.0
    return max(0.0, hours_between(start, end))


def compute_hours(
    *,
    clock_in: Optional[Instant],
    clock_out: Optional[Instant],
    break_in: Optional[Instant],
    break_out: Optional[Instant],
    scheduled_regular_hours: float,
) -> HoursBreakdown:
    """Split a day into total, break, regular and overtime hours.

    Slots are datetimes or epoch milliseconds and are measured as elapsed time.
    """
    total_hours = _clamped_interval(clock_in, clock_out)
    break_hours = _clamped_interval(break_in, break_out)
    work_hours = total_hours - break_hours
    regular_hours = max(0.0, min(work_hours, float(scheduled_regular_hours)))
    overtime_hours = max(0.0, work_hours - regular_hours)

    return HoursBreakdown(
        total_hours=total_hours,
        break_hours=break_hours,
        work_hours=work_hours,
        regular_hours=regular_hours,
        overtime_hours=overtime_hours,
    )
