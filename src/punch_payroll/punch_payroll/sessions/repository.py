from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import ProcessedDay


class DaySessionRepository(Protocol):
    def upsert(self, day: ProcessedDay) -> None:
        """Insert or replace the record keyed by (employee_id, work_date)."""

        raise NotImplementedError

    def get_for_day(self, *, employee_id: str, work_date: date) -> Optional[ProcessedDay]:
        raise NotImplementedError

    def get_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> Sequence[ProcessedDay]:
        """Processed days with start_date <= work_date <= end_date."""

        raise NotImplementedError
