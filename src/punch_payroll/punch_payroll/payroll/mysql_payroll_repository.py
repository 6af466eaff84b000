from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicatePayrollError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import PayPeriod, PayrollRecord, PayrollSummary
from .repository import PayrollRecordRepository


class MySQLPayrollRecordRepository(PayrollRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, summary: PayrollSummary) -> PayrollRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_records
                        (employee_id, period_start, period_end, total_days,
                         total_regular_hours, total_overtime_hours,
                         total_regular_pay, total_overtime_pay, total_pay)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        summary.employee_id,
                        summary.period.start,
                        summary.period.end,
                        summary.total_days,
                        summary.total_regular_hours,
                        summary.total_overtime_hours,
                        summary.total_regular_pay,
                        summary.total_overtime_pay,
                        summary.total_pay,
                    ),
                )
                record_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicatePayrollError(summary.employee_id, summary.period.label) from exc
            raise
        return PayrollRecord(record_id=record_id, summary=summary)

    def list_for_period(self, period: PayPeriod, *, employee_id: Optional[str] = None) -> Sequence[PayrollRecord]:
        clauses = ["period_start=%s", "period_end=%s"]
        params: list[object] = [period.start, period.end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT record_id, employee_id, total_days,
                       total_regular_hours, total_overtime_hours,
                       total_regular_pay, total_overtime_pay, total_pay, closed_at
                FROM payroll_records
                WHERE {where}
                ORDER BY employee_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                PayrollRecord(
                    record_id=int(r["record_id"]),
                    summary=PayrollSummary(
                        employee_id=str(r["employee_id"]),
                        period=period,
                        total_days=int(r["total_days"]),
                        total_regular_hours=float(r["total_regular_hours"]),
                        total_overtime_hours=float(r["total_overtime_hours"]),
                        total_regular_pay=float(r["total_regular_pay"]),
                        total_overtime_pay=float(r["total_overtime_pay"]),
                        total_pay=float(r["total_pay"]),
                    ),
                    closed_at=r.get("closed_at"),
                )
                for r in rows
            ]
