from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PayResult:
    regular_pay: float
    overtime_pay: float
    total_pay: float


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive date window used for payroll aggregation."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError(f"Period end {self.end} is before start {self.start}")

    @classmethod
    def for_month(cls, year: int, month: int) -> "PayPeriod":
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"Month must be 1..12, got {month!r}")
        last_day = calendar.monthrange(int(year), int(month))[1]
        return cls(start=date(int(year), int(month), 1), end=date(int(year), int(month), last_day))

    @classmethod
    def parse_month(cls, value: str) -> "PayPeriod":
        """Parse ``YYYY-MM``."""
        try:
            parsed = datetime.strptime((value or "").strip(), "%Y-%m")
        except ValueError:
            raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM") from None
        return cls.for_month(parsed.year, parsed.month)

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class PayrollSummary:
    employee_id: str
    period: PayPeriod
    total_days: int = 0
    total_regular_hours: float = 0.0
    total_overtime_hours: float = 0.0
    total_regular_pay: float = 0.0
    total_overtime_pay: float = 0.0
    total_pay: float = 0.0


@dataclass(frozen=True)
class PayrollRecord:
    """A closed PayrollSummary as stored."""

    record_id: int
    summary: PayrollSummary
    closed_at: Optional[datetime] = None
