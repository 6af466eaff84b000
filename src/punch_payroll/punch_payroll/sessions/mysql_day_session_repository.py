from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from ..payroll.model import PayResult
from .model import DaySession, ProcessedDay
from .repository import DaySessionRepository

_COLUMNS = """
    employee_id, work_date, clock_in, clock_out, break_in, break_out,
    clock_in_ms, clock_out_ms, break_in_ms, break_out_ms,
    total_hours, break_hours, regular_hours, overtime_hours, processed,
    hourly_rate, overtime_multiplier, scheduled_regular_hours,
    regular_pay, overtime_pay, total_pay
"""
_PLACEHOLDERS = ", ".join(["%s"] * len(_COLUMNS.split(",")))


def _opt_int(value) -> Optional[int]:
    return None if value is None else int(value)


def _to_day(r: dict) -> ProcessedDay:
    return ProcessedDay(
        session=DaySession(
            employee_id=str(r["employee_id"]),
            work_date=r["work_date"],
            clock_in=r.get("clock_in"),
            clock_out=r.get("clock_out"),
            break_in=r.get("break_in"),
            break_out=r.get("break_out"),
            clock_in_ms=_opt_int(r.get("clock_in_ms")),
            clock_out_ms=_opt_int(r.get("clock_out_ms")),
            break_in_ms=_opt_int(r.get("break_in_ms")),
            break_out_ms=_opt_int(r.get("break_out_ms")),
            total_hours=float(r["total_hours"]),
            break_hours=float(r["break_hours"]),
            regular_hours=float(r["regular_hours"]),
            overtime_hours=float(r["overtime_hours"]),
            processed=bool(r["processed"]),
        ),
        pay=PayResult(
            regular_pay=float(r["regular_pay"]),
            overtime_pay=float(r["overtime_pay"]),
            total_pay=float(r["total_pay"]),
        ),
        hourly_rate=float(r["hourly_rate"]),
        overtime_multiplier=float(r["overtime_multiplier"]),
        scheduled_regular_hours=float(r["scheduled_regular_hours"]),
    )


class MySQLDaySessionRepository(DaySessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, day: ProcessedDay) -> None:
        s = day.session
        with db_cursor(self._conn_factory) as (_, cur):
            # DOUBLE columns: no rounding on the way in.
            cur.execute(
                f"""
                INSERT INTO day_sessions ({_COLUMNS})
                VALUES ({_PLACEHOLDERS})
                ON DUPLICATE KEY UPDATE
                    clock_in=VALUES(clock_in), clock_out=VALUES(clock_out),
                    break_in=VALUES(break_in), break_out=VALUES(break_out),
                    clock_in_ms=VALUES(clock_in_ms), clock_out_ms=VALUES(clock_out_ms),
                    break_in_ms=VALUES(break_in_ms), break_out_ms=VALUES(break_out_ms),
                    total_hours=VALUES(total_hours), break_hours=VALUES(break_hours),
                    regular_hours=VALUES(regular_hours), overtime_hours=VALUES(overtime_hours),
                    processed=VALUES(processed),
                    hourly_rate=VALUES(hourly_rate), overtime_multiplier=VALUES(overtime_multiplier),
                    scheduled_regular_hours=VALUES(scheduled_regular_hours),
                    regular_pay=VALUES(regular_pay), overtime_pay=VALUES(overtime_pay),
                    total_pay=VALUES(total_pay)
                """,
                (
                    s.employee_id,
                    s.work_date,
                    s.clock_in,
                    s.clock_out,
                    s.break_in,
                    s.break_out,
                    s.clock_in_ms,
                    s.clock_out_ms,
                    s.break_in_ms,
                    s.break_out_ms,
                    s.total_hours,
                    s.break_hours,
                    s.regular_hours,
                    s.overtime_hours,
                    int(s.processed),
                    day.hourly_rate,
                    day.overtime_multiplier,
                    day.scheduled_regular_hours,
                    day.pay.regular_pay,
                    day.pay.overtime_pay,
                    day.pay.total_pay,
                ),
            )

    def get_for_day(self, *, employee_id: str, work_date: date) -> Optional[ProcessedDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM day_sessions
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_day(r) if r else None

    def get_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Iterable[str]] = None,
    ) -> Sequence[ProcessedDay]:
        clauses = ["processed=1", "work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_ids is not None:
            ids = sorted({str(e) for e in employee_ids})
            if not ids:
                return []
            clauses.append(f"employee_id IN ({in_clause(ids)})")
            params.extend(ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM day_sessions
                WHERE {where}
                ORDER BY employee_id ASC, work_date ASC
                """,
                tuple(params),
            )
            return [_to_day(r) for r in fetchall(cur)]
