from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..core.enums import SkipReason


@dataclass(frozen=True)
class SkippedSession:
    employee_id: str
    work_date: date
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True)
class BatchSummary:
    """Outcome of one reconciliation run; every dropped punch is counted."""

    events_received: int = 0
    events_accepted: int = 0
    duplicates: int = 0
    unmapped_punches: int = 0
    unmapped_device_users: list[str] = field(default_factory=list)
    day_sessions_written: int = 0
    sessions_skipped: list[SkippedSession] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "events_received": self.events_received,
            "events_accepted": self.events_accepted,
            "duplicates": self.duplicates,
            "unmapped_punches": self.unmapped_punches,
            "unmapped_device_users": list(self.unmapped_device_users),
            "day_sessions_written": self.day_sessions_written,
            "sessions_skipped": [
                {
                    "employee_id": s.employee_id,
                    "work_date": s.work_date.strftime("%Y-%m-%d"),
                    "reason": s.reason.value,
                    "detail": s.detail,
                }
                for s in self.sessions_skipped
            ],
        }
