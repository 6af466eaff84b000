from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.datetime_utils import load_timezone
from .core.constants import DEFAULT_DEVICE_ID
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_directory import MySQLEmployeeDirectory
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRecordRepository
from .payroll.service import PayrollService
from .punches.mysql_punch_repository import MySQLPunchRepository
from .reconciliation.service import ReconciliationService
from .sessions.mysql_day_session_repository import MySQLDaySessionRepository
from .sessions.service import DaySessionService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    punches_repo: MySQLPunchRepository
    sessions_repo: MySQLDaySessionRepository
    payroll_repo: MySQLPayrollRecordRepository
    directory: MySQLEmployeeDirectory

    reconciliation_service: ReconciliationService
    payroll_service: PayrollService
    day_session_service: DaySessionService

    default_device_id: str = DEFAULT_DEVICE_ID


def build_container(
    *,
    db_config: dict,
    timezone: Optional[str] = None,
    default_device_id: str = DEFAULT_DEVICE_ID,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    punches_repo = MySQLPunchRepository(conn)
    sessions_repo = MySQLDaySessionRepository(conn)
    payroll_repo = MySQLPayrollRecordRepository(conn)
    directory = MySQLEmployeeDirectory(conn)

    reconciliation_service = ReconciliationService(
        punches_repo,
        sessions_repo,
        directory,
        calculator=StandardPayrollCalculator(),
        tz=load_timezone(timezone),
        transaction=conn.transaction,
    )
    payroll_service = PayrollService(sessions_repo, payroll_repo, transaction=conn.transaction)
    day_session_service = DaySessionService(sessions_repo)

    return Container(
        conn=conn,
        punches_repo=punches_repo,
        sessions_repo=sessions_repo,
        payroll_repo=payroll_repo,
        directory=directory,
        reconciliation_service=reconciliation_service,
        payroll_service=payroll_service,
        day_session_service=day_session_service,
        default_device_id=default_device_id,
    )
