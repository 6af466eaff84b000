from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import epoch_millis
from ..core.constants import DEFAULT_DEVICE_ID
from ..core.enums import PunchType

DedupKey = Tuple[str, int]


@dataclass(frozen=True)
class RawPunch:
    """A punch as delivered by the device, before identity mapping."""

    device_user_id: str
    timestamp: datetime
    punch_type: PunchType
    device_id: str = DEFAULT_DEVICE_ID

    @property
    def dedup_key(self) -> DedupKey:
        return (str(self.device_user_id), epoch_millis(self.timestamp))


@dataclass(frozen=True)
class PunchEvent:
    """Accepted punch mapped to an employee.

    ``timestamp`` is naive local wall time; ``timestamp_ms`` is the epoch value of
    the original instant and, with ``device_user_id``, identifies the physical punch.
    """

    employee_id: str
    device_user_id: str
    timestamp: datetime
    timestamp_ms: int
    punch_type: PunchType
    device_id: str = DEFAULT_DEVICE_ID
    consumed: bool = False
    punch_id: Optional[int] = None

    @property
    def work_date(self) -> date:
        return self.timestamp.date()

    @property
    def dedup_key(self) -> DedupKey:
        return (self.device_user_id, self.timestamp_ms)
