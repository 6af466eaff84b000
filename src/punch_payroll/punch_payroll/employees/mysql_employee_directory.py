from __future__ import annotations

from typing import Iterable, Optional

from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_SCHEDULED_REGULAR_HOURS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, upstream_guard
from .directory import EmployeeDirectory
from .model import EmployeePayProfile


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve_employee_ids(self, device_user_ids: Iterable[str]) -> dict[str, Optional[str]]:
        ids = sorted({str(d) for d in device_user_ids})
        if not ids:
            return {}

        placeholders = in_clause(ids)
        with upstream_guard("employee directory"), db_cursor(self._conn_factory) as (_, cur):
            # A device user id may be enrolled explicitly or equal the employee id.
            cur.execute(
                f"""
                SELECT employee_id, device_user_id
                FROM employees
                WHERE is_active=1
                  AND (device_user_id IN ({placeholders}) OR employee_id IN ({placeholders}))
                ORDER BY employee_id
                """,
                (*ids, *ids),
            )
            rows = fetchall(cur)

        resolved: dict[str, Optional[str]] = {d: None for d in ids}
        # Explicit enrollment wins over an id coincidence.
        for r in rows:
            if r.get("device_user_id") is not None and str(r["device_user_id"]) in resolved:
                resolved[str(r["device_user_id"])] = str(r["employee_id"])
        for r in rows:
            emp_id = str(r["employee_id"])
            if emp_id in resolved and resolved[emp_id] is None:
                resolved[emp_id] = emp_id
        return resolved

    def get_pay_profile(self, employee_id: str) -> Optional[EmployeePayProfile]:
        with upstream_guard("employee directory"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, hourly_rate, scheduled_regular_hours, overtime_multiplier
                FROM employees
                WHERE employee_id=%s
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmployeePayProfile(
                employee_id=str(r["employee_id"]),
                hourly_rate=float(r["hourly_rate"] or 0),
                scheduled_regular_hours=float(
                    r["scheduled_regular_hours"]
                    if r.get("scheduled_regular_hours") is not None
                    else DEFAULT_SCHEDULED_REGULAR_HOURS
                ),
                overtime_multiplier=float(
                    r["overtime_multiplier"] if r.get("overtime_multiplier") is not None else DEFAULT_OVERTIME_MULTIPLIER
                ),
            )
