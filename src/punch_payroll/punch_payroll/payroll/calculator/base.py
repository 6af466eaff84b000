from __future__ import annotations

from abc import ABC, abstractmethod

from ...employees.model import EmployeePayProfile
from ...sessions.model import DaySession
from ..hours import HoursBreakdown
from ..model import PayResult


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def hours(self, session: DaySession, profile: EmployeePayProfile) -> HoursBreakdown:
        raise NotImplementedError

    @abstractmethod
    def pay(self, hours: HoursBreakdown, profile: EmployeePayProfile) -> PayResult:
        raise NotImplementedError
