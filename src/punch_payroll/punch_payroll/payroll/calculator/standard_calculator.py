from __future__ import annotations

from typing import Optional

from .base import PayrollCalculator
from ..hours import HoursBreakdown, compute_hours
from ..model import PayResult
from ..pay import compute_pay
from ...common.datetime_utils import Instant
from ...employees.model import EmployeePayProfile
from ...sessions.model import DaySession


def _instant(ms: Optional[int], wall) -> Optional[Instant]:
    # Sessions built from punches carry real instants; hand-made ones may not.
    return wall if ms is None else ms


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: daily threshold splits regular/overtime, overtime at rate * multiplier."""

    def hours(self, session: DaySession, profile: EmployeePayProfile) -> HoursBreakdown:
        return compute_hours(
            clock_in=_instant(session.clock_in_ms, session.clock_in),
            clock_out=_instant(session.clock_out_ms, session.clock_out),
            break_in=_instant(session.break_in_ms, session.break_in),
            break_out=_instant(session.break_out_ms, session.break_out),
            scheduled_regular_hours=profile.scheduled_regular_hours,
        )

    def pay(self, hours: HoursBreakdown, profile: EmployeePayProfile) -> PayResult:
        return compute_pay(
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            hourly_rate=profile.hourly_rate,
            overtime_multiplier=profile.overtime_multiplier,
        )
