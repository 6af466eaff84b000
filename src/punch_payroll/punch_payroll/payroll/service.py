from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, Iterable, Optional

from ..sessions.repository import DaySessionRepository
from .aggregator import aggregate
from .model import PayPeriod, PayrollRecord, PayrollSummary
from .repository import PayrollRecordRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Period payroll as a view over stored processed days."""

    def __init__(
        self,
        sessions: DaySessionRepository,
        records: PayrollRecordRepository,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._sessions = sessions
        self._records = records
        self._transaction = transaction or nullcontext

    def compute_payroll(
        self,
        period: PayPeriod,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> list[PayrollSummary]:
        ids = None if employee_ids is None else sorted({str(e) for e in employee_ids})
        days = self._sessions.get_for_range(start_date=period.start, end_date=period.end, employee_ids=ids)
        summaries = aggregate(days, period=period)
        logger.info("Payroll %s: %d day(s) -> %d employee summary(ies)", period.label, len(days), len(summaries))
        return summaries

    def close_period(
        self,
        period: PayPeriod,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> list[PayrollRecord]:
        """Persist the period's summaries; all or nothing.

        Raises DuplicatePayrollError if any employee already has a record.
        """
        summaries = self.compute_payroll(period, employee_ids)
        with self._transaction():
            records = [self._records.create(s) for s in summaries]
        logger.info("Closed payroll %s for %d employee(s)", period.label, len(records))
        return records

    def list_closed(self, period: PayPeriod, *, employee_id: Optional[str] = None) -> list[PayrollRecord]:
        """Records previously stored by ``close_period`` for exactly this window."""
        return list(self._records.list_for_period(period, employee_id=employee_id))
