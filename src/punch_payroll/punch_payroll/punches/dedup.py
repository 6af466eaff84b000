from __future__ import annotations

from dataclasses import dataclass, field
from datetime import tzinfo
from typing import AbstractSet, Iterable, Mapping, Optional

from ..common.datetime_utils import to_local_wall_time
from .model import DedupKey, PunchEvent, RawPunch


@dataclass(frozen=True)
class DedupResult:
    accepted: list[PunchEvent]
    duplicates: int = 0
    unmapped_punches: int = 0
    unmapped_device_users: list[str] = field(default_factory=list)


class Deduplicator:
    """Drop punches already persisted (or repeated in the batch) and map identities.

    Pure filter: persisting the accepted events is the caller's job.
    """

    def __init__(self, *, tz: Optional[tzinfo] = None):
        self._tz = tz

    def filter(
        self,
        punches: Iterable[RawPunch],
        *,
        existing_keys: AbstractSet[DedupKey],
        employee_ids: Mapping[str, Optional[str]],
    ) -> DedupResult:
        seen: set[DedupKey] = set(existing_keys)
        accepted: list[PunchEvent] = []
        duplicates = 0
        unmapped = 0
        unmapped_users: set[str] = set()

        for p in punches:
            key = p.dedup_key
            if key in seen:
                duplicates += 1
                continue

            employee_id = employee_ids.get(key[0])
            if not employee_id:
                unmapped += 1
                unmapped_users.add(key[0])
                continue

            seen.add(key)
            accepted.append(
                PunchEvent(
                    employee_id=employee_id,
                    device_user_id=key[0],
                    timestamp=to_local_wall_time(p.timestamp, self._tz),
                    timestamp_ms=key[1],
                    punch_type=p.punch_type,
                    device_id=p.device_id,
                )
            )

        return DedupResult(
            accepted=accepted,
            duplicates=duplicates,
            unmapped_punches=unmapped,
            unmapped_device_users=sorted(unmapped_users),
        )
