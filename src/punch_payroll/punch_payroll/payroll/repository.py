from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayPeriod, PayrollRecord, PayrollSummary


class PayrollRecordRepository(Protocol):
    def create(self, summary: PayrollSummary) -> PayrollRecord:
        """Store a closed period; raises DuplicatePayrollError if one already exists."""

        raise NotImplementedError

    def list_for_period(self, period: PayPeriod, *, employee_id: Optional[str] = None) -> Sequence[PayrollRecord]:
        raise NotImplementedError
