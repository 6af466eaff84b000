from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionState
from ..payroll.model import PayResult


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class DaySession:
    """One employee's reconstructed attendance for one local calendar day.

    Slot datetimes are local wall time for display. The matching ``*_ms`` fields
    carry the real instants (epoch milliseconds) that durations are measured on.
    """

    employee_id: str
    work_date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_in: Optional[datetime] = None
    break_out: Optional[datetime] = None
    clock_in_ms: Optional[int] = None
    clock_out_ms: Optional[int] = None
    break_in_ms: Optional[int] = None
    break_out_ms: Optional[int] = None
    total_hours: float = 0.0
    break_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    processed: bool = False

    @property
    def state(self) -> SessionState:
        if self.processed:
            return SessionState.PROCESSED
        if self.clock_in is not None and self.clock_out is not None:
            return SessionState.COMPLETE
        return SessionState.PARTIAL

    @property
    def work_hours(self) -> float:
        return max(0.0, self.total_hours - self.break_hours)


@dataclass(frozen=True)
class ProcessedDay:
    """Persisted per-day record: the session, its pay and the terms used."""

    session: DaySession
    pay: PayResult
    hourly_rate: float
    overtime_multiplier: float
    scheduled_regular_hours: float

    @property
    def employee_id(self) -> str:
        return self.session.employee_id

    @property
    def work_date(self) -> date:
        return self.session.work_date

    def as_dict(self) -> dict:
        s = self.session
        return {
            "employee_id": s.employee_id,
            "work_date": s.work_date.isoformat(),
            "state": s.state.value,
            "clock_in": _iso(s.clock_in),
            "clock_out": _iso(s.clock_out),
            "break_in": _iso(s.break_in),
            "break_out": _iso(s.break_out),
            "total_hours": s.total_hours,
            "break_hours": s.break_hours,
            "work_hours": s.work_hours,
            "regular_hours": s.regular_hours,
            "overtime_hours": s.overtime_hours,
            "hourly_rate": self.hourly_rate,
            "overtime_multiplier": self.overtime_multiplier,
            "regular_pay": self.pay.regular_pay,
            "overtime_pay": self.pay.overtime_pay,
            "total_pay": self.pay.total_pay,
        }
