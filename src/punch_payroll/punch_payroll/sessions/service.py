from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.exceptions import ValidationError
from .model import ProcessedDay
from .repository import DaySessionRepository


class DaySessionService:
    """Read side of processed attendance: single days and date windows."""

    def __init__(self, sessions: DaySessionRepository):
        self._sessions = sessions

    def get_day(self, employee_id: str, work_date: date) -> Optional[ProcessedDay]:
        return self._sessions.get_for_day(employee_id=str(employee_id), work_date=work_date)

    def list_days(
        self,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> list[ProcessedDay]:
        """Processed days in ``start..end`` ordered by employee, then date."""
        if end < start:
            raise ValidationError(f"End date {end} is before start {start}")
        ids = None if employee_ids is None else sorted({str(e) for e in employee_ids})
        return list(self._sessions.get_for_range(start_date=start, end_date=end, employee_ids=ids))
