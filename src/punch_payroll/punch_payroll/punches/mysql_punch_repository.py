from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, upstream_guard
from .model import DedupKey, PunchEvent
from .repository import PunchRepository

_COLUMNS = "punch_id, employee_id, device_user_id, punch_time, timestamp_ms, punch_type, device_id, consumed"


def _to_event(r: dict) -> PunchEvent:
    return PunchEvent(
        punch_id=int(r["punch_id"]),
        employee_id=str(r["employee_id"]),
        device_user_id=str(r["device_user_id"]),
        timestamp=r["punch_time"],
        timestamp_ms=int(r["timestamp_ms"]),
        punch_type=PunchType(r["punch_type"]),
        device_id=r["device_id"],
        consumed=bool(r["consumed"]),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def existing_keys(self, *, device_user_ids: Iterable[str], start_ms: int, end_ms: int) -> set[DedupKey]:
        ids = sorted({str(d) for d in device_user_ids})
        if not ids:
            return set()

        with upstream_guard("punch store"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT device_user_id, timestamp_ms
                FROM punch_events
                WHERE device_user_id IN ({in_clause(ids)})
                  AND timestamp_ms BETWEEN %s AND %s
                """,
                (*ids, int(start_ms), int(end_ms)),
            )
            return {(str(r["device_user_id"]), int(r["timestamp_ms"])) for r in fetchall(cur)}

    def insert_new(self, events: Sequence[PunchEvent]) -> int:
        if not events:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            # uq_punch_dedup(device_user_id, timestamp_ms) makes the insert idempotent.
            cur.executemany(
                """
                INSERT IGNORE INTO punch_events
                    (employee_id, device_user_id, punch_time, timestamp_ms, work_date, punch_type, device_id, consumed)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                [
                    (
                        e.employee_id,
                        e.device_user_id,
                        e.timestamp,
                        e.timestamp_ms,
                        e.work_date,
                        e.punch_type.value,
                        e.device_id,
                        int(e.consumed),
                    )
                    for e in events
                ],
            )
            return int(cur.rowcount or 0)

    def get_for_day(self, *, employee_id: str, work_date: date) -> Sequence[PunchEvent]:
        with upstream_guard("punch store"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_events
                WHERE employee_id=%s AND work_date=%s
                ORDER BY punch_id ASC
                """,
                (employee_id, work_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def get_unconsumed(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[PunchEvent]:
        clauses = ["consumed=0"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with upstream_guard("punch store"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_events
                WHERE {where}
                ORDER BY punch_id ASC
                """,
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def mark_consumed(self, *, employee_id: str, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_events
                SET consumed=1
                WHERE employee_id=%s AND work_date=%s AND consumed=0
                """,
                (employee_id, work_date),
            )
            return int(cur.rowcount or 0)
