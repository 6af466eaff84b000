from datetime import date, datetime

from src.punch_payroll.punch_payroll.core.enums import SessionState
from src.punch_payroll.punch_payroll.payroll.model import PayResult
from src.punch_payroll.punch_payroll.sessions.model import DaySession, ProcessedDay
from src.punch_payroll.punch_payroll.sessions.mysql_day_session_repository import MySQLDaySessionRepository
from src.punch_payroll.punch_payroll.sessions.service import DaySessionService

DAY = date(2026, 11, 1)


def stored_row(**overrides):
    row = {
        "employee_id": "EMP-1",
        "work_date": DAY,
        "clock_in": datetime(2026, 11, 1, 1, 10),
        "clock_out": datetime(2026, 11, 1, 1, 5),
        "break_in": None,
        "break_out": None,
        "clock_in_ms": 1793596200000,
        "clock_out_ms": 1793599500000,
        "break_in_ms": None,
        "break_out_ms": None,
        "total_hours": 55 / 60,
        "break_hours": 0.0,
        "regular_hours": 55 / 60,
        "overtime_hours": 0.0,
        "processed": 1,
        "hourly_rate": 60.0,
        "overtime_multiplier": 1.5,
        "scheduled_regular_hours": 8.0,
        "regular_pay": 55.0,
        "overtime_pay": 0.0,
        "total_pay": 55.0,
    }
    row.update(overrides)
    return row


def test_get_for_day_maps_row_including_instants(scripted_db):
    db = scripted_db(rows=[stored_row()])

    day = DaySessionService(MySQLDaySessionRepository(db)).get_day("EMP-1", DAY)

    assert day.session.state == SessionState.PROCESSED
    assert day.session.clock_out_ms - day.session.clock_in_ms == 55 * 60 * 1000
    assert day.pay.total_pay == 55.0
    sql, params = db.executed[0]
    assert "FROM day_sessions WHERE employee_id=%s AND work_date=%s" in sql
    assert params == ("EMP-1", DAY)


def test_get_for_day_missing_returns_none(scripted_db):
    assert MySQLDaySessionRepository(scripted_db()).get_for_day(employee_id="EMP-1", work_date=DAY) is None


def test_get_for_range_filters_processed_days_by_employee(scripted_db):
    db = scripted_db(rows=[stored_row(), stored_row(employee_id="EMP-2")])

    days = DaySessionService(MySQLDaySessionRepository(db)).list_days(
        start=date(2026, 11, 1), end=date(2026, 11, 30), employee_ids=["EMP-2", "EMP-1", "EMP-2"]
    )

    assert [d.employee_id for d in days] == ["EMP-1", "EMP-2"]
    sql, params = db.executed[0]
    assert "processed=1" in sql
    assert "employee_id IN (%s, %s)" in sql
    assert "ORDER BY employee_id ASC, work_date ASC" in sql
    assert params == (date(2026, 11, 1), date(2026, 11, 30), "EMP-1", "EMP-2")


def test_get_for_range_with_empty_employee_filter_skips_query(scripted_db):
    db = scripted_db(rows=[stored_row()])

    assert MySQLDaySessionRepository(db).get_for_range(start_date=DAY, end_date=DAY, employee_ids=[]) == []
    assert db.executed == []


def test_upsert_writes_instants_with_every_column(scripted_db):
    db = scripted_db()
    session = DaySession(
        employee_id="EMP-1",
        work_date=DAY,
        clock_in=datetime(2026, 11, 1, 1, 10),
        clock_in_ms=1793596200000,
        processed=True,
    )
    day = ProcessedDay(
        session=session,
        pay=PayResult(regular_pay=0.0, overtime_pay=0.0, total_pay=0.0),
        hourly_rate=20.0,
        overtime_multiplier=1.5,
        scheduled_regular_hours=8.0,
    )

    MySQLDaySessionRepository(db).upsert(day)

    sql, params = db.executed[0]
    assert sql.count("%s") == len(params) == 21
    assert "clock_in_ms=VALUES(clock_in_ms)" in sql
    assert 1793596200000 in params
