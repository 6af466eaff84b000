from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import DedupKey, PunchEvent


class PunchRepository(Protocol):
    """Storage of accepted punches.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def existing_keys(
        self,
        *,
        device_user_ids: Iterable[str],
        start_ms: int,
        end_ms: int,
    ) -> set[DedupKey]:
        """Dedup keys already stored for these device users within [start_ms, end_ms]."""

        raise NotImplementedError

    def insert_new(self, events: Sequence[PunchEvent]) -> int:
        """Insert events whose dedup key is not yet stored; returns rows inserted."""

        raise NotImplementedError

    def get_for_day(self, *, employee_id: str, work_date: date) -> Sequence[PunchEvent]:
        """All stored punches of one employee day, in arrival order."""

        raise NotImplementedError

    def get_unconsumed(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[PunchEvent]:
        raise NotImplementedError

    def mark_consumed(self, *, employee_id: str, work_date: date) -> int:
        raise NotImplementedError
