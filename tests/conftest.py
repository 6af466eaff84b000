from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.punch_payroll.punch_payroll.core.enums import PunchType
from src.punch_payroll.punch_payroll.core.exceptions import DuplicatePayrollError, UpstreamUnavailableError
from src.punch_payroll.punch_payroll.database.connection import DBConfig, DatabaseConnection
from src.punch_payroll.punch_payroll.employees.model import EmployeePayProfile
from src.punch_payroll.punch_payroll.payroll.model import PayrollRecord
from src.punch_payroll.punch_payroll.payroll.service import PayrollService
from src.punch_payroll.punch_payroll.punches.model import RawPunch
from src.punch_payroll.punch_payroll.reconciliation.service import ReconciliationService


class InMemoryPunches:
    def __init__(self):
        self.rows = []
        self._next_id = 0
        self.insert_calls = 0

    def existing_keys(self, *, device_user_ids, start_ms, end_ms):
        ids = set(device_user_ids)
        return {
            e.dedup_key
            for e in self.rows
            if e.device_user_id in ids and start_ms <= e.timestamp_ms <= end_ms
        }

    def insert_new(self, events):
        self.insert_calls += 1
        stored = {e.dedup_key for e in self.rows}
        inserted = 0
        for e in events:
            if e.dedup_key in stored:
                continue
            self._next_id += 1
            self.rows.append(replace(e, punch_id=self._next_id))
            stored.add(e.dedup_key)
            inserted += 1
        return inserted

    def get_for_day(self, *, employee_id, work_date):
        return [e for e in self.rows if e.employee_id == employee_id and e.work_date == work_date]

    def get_unconsumed(self, *, employee_id=None, start_date=None, end_date=None):
        return [
            e
            for e in self.rows
            if not e.consumed
            and (employee_id is None or e.employee_id == employee_id)
            and (start_date is None or e.work_date >= start_date)
            and (end_date is None or e.work_date <= end_date)
        ]

    def mark_consumed(self, *, employee_id, work_date):
        count = 0
        for i, e in enumerate(self.rows):
            if e.employee_id == employee_id and e.work_date == work_date and not e.consumed:
                self.rows[i] = replace(e, consumed=True)
                count += 1
        return count


class InMemoryDaySessions:
    def __init__(self):
        self.days = {}
        self.upsert_calls = 0

    def upsert(self, day):
        self.upsert_calls += 1
        self.days[(day.employee_id, day.work_date)] = day

    def get_for_day(self, *, employee_id, work_date):
        return self.days.get((employee_id, work_date))

    def get_for_range(self, *, start_date, end_date, employee_ids=None):
        ids = None if employee_ids is None else set(employee_ids)
        items = [
            d
            for d in self.days.values()
            if d.session.processed
            and start_date <= d.work_date <= end_date
            and (ids is None or d.employee_id in ids)
        ]
        items.sort(key=lambda d: (d.employee_id, d.work_date))
        return items


class InMemoryDirectory:
    def __init__(self, device_map=None, profiles=None):
        self.device_map = dict(device_map or {})
        self.profiles = dict(profiles or {})
        self.available = True

    def resolve_employee_ids(self, device_user_ids):
        if not self.available:
            raise UpstreamUnavailableError("employee directory unavailable")
        return {d: self.device_map.get(d) for d in device_user_ids}

    def get_pay_profile(self, employee_id):
        if not self.available:
            raise UpstreamUnavailableError("employee directory unavailable")
        return self.profiles.get(employee_id)


class InMemoryPayrollRecords:
    def __init__(self):
        self.records = {}
        self._next_id = 0

    def create(self, summary):
        key = (summary.employee_id, summary.period.start, summary.period.end)
        if key in self.records:
            raise DuplicatePayrollError(summary.employee_id, summary.period.label)
        self._next_id += 1
        record = PayrollRecord(record_id=self._next_id, summary=summary)
        self.records[key] = record
        return record

    def list_for_period(self, period, *, employee_id=None):
        return [
            r
            for (emp, start, end), r in sorted(self.records.items())
            if start == period.start and end == period.end and (employee_id is None or emp == employee_id)
        ]


class SnapshotTransaction:
    """Restores the given stores if the block raises."""

    def __init__(self, *stores):
        self._stores = stores
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def __call__(self):
        snapshots = [copy.deepcopy(s.__dict__) for s in self._stores]
        try:
            yield
        except Exception:
            for store, snap in zip(self._stores, snapshots):
                store.__dict__.clear()
                store.__dict__.update(snap)
            self.rollbacks += 1
            raise
        self.commits += 1


class ScriptedCursor:
    def __init__(self, db):
        self._db = db
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=None):
        self._db.executed.append((" ".join(sql.split()), tuple(params or ())))

    def fetchone(self):
        rows = self._db.rows
        return rows[0] if rows else None

    def fetchall(self):
        return list(self._db.rows)

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, db):
        self._db = db

    def cursor(self, dictionary=True):
        return ScriptedCursor(self._db)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class ScriptedDatabase(DatabaseConnection):
    """Connection factory whose cursors return ``rows`` and log every statement."""

    def __init__(self, rows=None):
        super().__init__(DBConfig(host="h", port=3306, user="u", password="p", database="d"))
        self.rows = list(rows or [])
        self.executed = []

    def connect(self):
        return ScriptedConnection(self)


@pytest.fixture
def work_day() -> date:
    return date(2026, 1, 5)


@pytest.fixture
def make_raw(work_day):
    def _make(device_user_id: str, hhmm: str, punch_type: PunchType, *, day: date | None = None) -> RawPunch:
        d = day or work_day
        hour, minute = (int(x) for x in hhmm.split(":"))
        return RawPunch(
            device_user_id=device_user_id,
            timestamp=datetime(d.year, d.month, d.day, hour, minute),
            punch_type=punch_type,
        )

    return _make


@pytest.fixture
def punches_repo() -> InMemoryPunches:
    return InMemoryPunches()


@pytest.fixture
def sessions_repo() -> InMemoryDaySessions:
    return InMemoryDaySessions()


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory(
        device_map={"101": "EMP-1", "102": "EMP-2"},
        profiles={
            "EMP-1": EmployeePayProfile(employee_id="EMP-1", hourly_rate=20.0),
            "EMP-2": EmployeePayProfile(
                employee_id="EMP-2", hourly_rate=30.0, scheduled_regular_hours=7.5, overtime_multiplier=2.0
            ),
        },
    )


@pytest.fixture
def payroll_records() -> InMemoryPayrollRecords:
    return InMemoryPayrollRecords()


@pytest.fixture
def reconciliation_tx(punches_repo, sessions_repo) -> SnapshotTransaction:
    return SnapshotTransaction(punches_repo, sessions_repo)


@pytest.fixture
def reconciliation(punches_repo, sessions_repo, directory, reconciliation_tx) -> ReconciliationService:
    return ReconciliationService(punches_repo, sessions_repo, directory, transaction=reconciliation_tx)


@pytest.fixture
def payroll_service(sessions_repo, payroll_records) -> PayrollService:
    return PayrollService(sessions_repo, payroll_records, transaction=SnapshotTransaction(payroll_records))


@pytest.fixture
def scripted_db():
    return ScriptedDatabase
