from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import require_non_negative
from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_SCHEDULED_REGULAR_HOURS


@dataclass(frozen=True)
class EmployeePayProfile:
    """Pay terms of an employee, read-only for reconciliation."""

    employee_id: str
    hourly_rate: float
    scheduled_regular_hours: float = DEFAULT_SCHEDULED_REGULAR_HOURS
    overtime_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER

    def validated(self) -> "EmployeePayProfile":
        """Return self if every figure is non-negative, else raise ValidationError."""
        require_non_negative(self.hourly_rate, "hourly_rate")
        require_non_negative(self.scheduled_regular_hours, "scheduled_regular_hours")
        require_non_negative(self.overtime_multiplier, "overtime_multiplier")
        return self
