from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import PunchType
from ..punches.model import PunchEvent
from .model import DaySession

DayKey = tuple[str, date]


def group_by_day(events: Iterable[PunchEvent]) -> dict[DayKey, list[PunchEvent]]:
    """Partition events by (employee_id, work_date), keeping arrival order."""
    groups: dict[DayKey, list[PunchEvent]] = {}
    for e in events:
        groups.setdefault((e.employee_id, e.work_date), []).append(e)
    return groups


class SessionBuilder:
    """Assign one day's punches to session slots.

    First ClockIn / last ClockOut / first BreakIn / last BreakOut. Ordering
    anomalies are recorded as-is; the hours calculator clamps them.
    """

    def build(self, employee_id: str, work_date: date, events: Sequence[PunchEvent]) -> Optional[DaySession]:
        if not events:
            return None

        # Order by real instant; wall time repeats during a DST fall-back hour.
        # sorted() is stable: same-millisecond punches keep arrival order.
        ordered = sorted(events, key=lambda e: e.timestamp_ms)

        clock_in = clock_out = break_in = break_out = None
        for e in ordered:
            if e.punch_type == PunchType.CLOCK_IN:
                if clock_in is None:
                    clock_in = e
            elif e.punch_type == PunchType.CLOCK_OUT:
                clock_out = e
            elif e.punch_type == PunchType.BREAK_IN:
                if break_in is None:
                    break_in = e
            elif e.punch_type == PunchType.BREAK_OUT:
                break_out = e

        return DaySession(
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in.timestamp if clock_in else None,
            clock_out=clock_out.timestamp if clock_out else None,
            break_in=break_in.timestamp if break_in else None,
            break_out=break_out.timestamp if break_out else None,
            clock_in_ms=clock_in.timestamp_ms if clock_in else None,
            clock_out_ms=clock_out.timestamp_ms if clock_out else None,
            break_in_ms=break_in.timestamp_ms if break_in else None,
            break_out_ms=break_out.timestamp_ms if break_out else None,
        )
