from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from click.testing import CliRunner

from src.punch_payroll.punch_payroll.cli import cli
from src.punch_payroll.punch_payroll.sessions.service import DaySessionService


@pytest.fixture
def container(reconciliation, payroll_service, sessions_repo):
    return SimpleNamespace(
        reconciliation_service=reconciliation,
        payroll_service=payroll_service,
        day_session_service=DaySessionService(sessions_repo),
        default_device_id="K40-TEST",
    )


@pytest.fixture
def punch_csv(tmp_path):
    path = tmp_path / "punches.csv"
    path.write_text(
        "device_user_id,timestamp,punch_type\n"
        "101,2026-01-05T08:00:00,ClockIn\n"
        "101,2026-01-05T12:00:00,BreakIn\n"
        "101,2026-01-05T12:30:00,BreakOut\n"
        "101,2026-01-05T17:00:00,ClockOut\n"
        "888,2026-01-05T08:00:00,1\n",
        encoding="utf-8",
    )
    return path


def test_import_prints_batch_summary(container, punch_csv):
    result = CliRunner().invoke(cli, ["import", str(punch_csv)], obj=container)

    assert result.exit_code == 0, result.output
    assert "Received 5, accepted 4, duplicates 0, unmapped 1" in result.output
    assert "Day sessions written: 1" in result.output
    assert "Unmapped device users: 888" in result.output


def test_import_json_output(container, punch_csv):
    result = CliRunner().invoke(cli, ["import", str(punch_csv), "--json"], obj=container)

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["events_accepted"] == 4
    assert data["unmapped_device_users"] == ["888"]


def test_import_uses_default_device_id(container, punch_csv, punches_repo):
    CliRunner().invoke(cli, ["import", str(punch_csv)], obj=container)

    assert {e.device_id for e in punches_repo.rows} == {"K40-TEST"}


def test_import_missing_file_fails_cleanly(container, tmp_path):
    result = CliRunner().invoke(cli, ["import", str(tmp_path / "nope.csv")], obj=container)

    assert result.exit_code == 1
    assert "Cannot read punch export" in result.output


def test_payroll_prints_rounded_rows(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    result = runner.invoke(cli, ["payroll", "--month", "2026-01"], obj=container)

    assert result.exit_code == 0, result.output
    row = [line for line in result.output.splitlines() if line.startswith("EMP-1")][0]
    assert row.split() == ["EMP-1", "1", "8.00", "0.50", "160.00", "15.00", "175.00"]


def test_payroll_empty_month(container):
    result = CliRunner().invoke(cli, ["payroll", "--month", "2026-03"], obj=container)

    assert result.exit_code == 0
    assert "No processed attendance" in result.output


def test_payroll_rejects_bad_month(container):
    result = CliRunner().invoke(cli, ["payroll", "--month", "2026-1x"], obj=container)

    assert result.exit_code == 2
    assert "YYYY-MM" in result.output


def test_close_period_twice_reports_conflict(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    first = runner.invoke(cli, ["close-period", "--month", "2026-01"], obj=container)
    second = runner.invoke(cli, ["close-period", "--month", "2026-01"], obj=container)

    assert first.exit_code == 0
    assert "1 record(s)" in first.output
    assert second.exit_code == 1
    assert "already closed" in second.output


def test_process_pending_command(container, directory, punch_csv):
    directory.profiles.pop("EMP-1")
    runner = CliRunner()
    imported = runner.invoke(cli, ["import", str(punch_csv)], obj=container)
    assert "NO_PAY_PROFILE" in imported.output

    from src.punch_payroll.punch_payroll.employees.model import EmployeePayProfile

    directory.profiles["EMP-1"] = EmployeePayProfile(employee_id="EMP-1", hourly_rate=20.0)
    result = runner.invoke(cli, ["process", "--start", "2026-01-01", "--end", "2026-01-31"], obj=container)

    assert result.exit_code == 0, result.output
    assert "Day sessions written: 1" in result.output


def test_process_rejects_bad_date(container):
    result = CliRunner().invoke(cli, ["process", "--start", "05/01/2026"], obj=container)

    assert result.exit_code == 2


def test_days_lists_processed_days_in_window(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    result = runner.invoke(cli, ["days", "--start", "2026-01-01", "--end", "2026-01-31"], obj=container)

    assert result.exit_code == 0, result.output
    row = [line for line in result.output.splitlines() if line.startswith("EMP-1")][0]
    assert row.split() == ["EMP-1", "2026-01-05", "PROCESSED", "08:00", "17:00", "8.50", "8.00", "0.50", "175.00"]


def test_days_json_output(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    result = runner.invoke(cli, ["days", "--date", "2026-01-05", "--json"], obj=container)

    assert result.exit_code == 0, result.output
    [day] = json.loads(result.output)
    assert day["employee_id"] == "EMP-1"
    assert day["clock_in"] == "2026-01-05T08:00:00"
    assert day["break_hours"] == 0.5
    assert day["total_pay"] == 175.0


def test_days_single_employee_and_date_reads_one_day(container, punch_csv, sessions_repo, monkeypatch):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    def no_range(**kwargs):
        raise AssertionError("range query not expected")

    monkeypatch.setattr(sessions_repo, "get_for_range", no_range)

    result = runner.invoke(cli, ["days", "--date", "2026-01-05", "--employee-id", "EMP-1"], obj=container)
    missing = runner.invoke(cli, ["days", "--date", "2026-01-06", "--employee-id", "EMP-1"], obj=container)

    assert result.exit_code == 0, result.output
    assert "EMP-1" in result.output
    assert missing.exit_code == 0
    assert "No processed attendance in 2026-01-06..2026-01-06" in missing.output


@pytest.mark.parametrize(
    "args",
    [
        ["days"],
        ["days", "--start", "2026-01-01"],
        ["days", "--date", "2026-01-05", "--start", "2026-01-01"],
    ],
)
def test_days_requires_one_window(container, args):
    result = CliRunner().invoke(cli, args, obj=container)

    assert result.exit_code == 2


def test_days_rejects_reversed_window(container):
    result = CliRunner().invoke(cli, ["days", "--start", "2026-01-31", "--end", "2026-01-01"], obj=container)

    assert result.exit_code == 1
    assert "before start" in result.output


def test_payroll_accepts_explicit_window(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    inside = runner.invoke(cli, ["payroll", "--start", "2026-01-05", "--end", "2026-01-05"], obj=container)
    outside = runner.invoke(cli, ["payroll", "--start", "2026-01-06", "--end", "2026-01-10"], obj=container)

    assert inside.exit_code == 0, inside.output
    assert any(line.startswith("EMP-1") for line in inside.output.splitlines())
    assert "No processed attendance in 2026-01-06..2026-01-10" in outside.output


@pytest.mark.parametrize(
    "args",
    [
        ["payroll"],
        ["payroll", "--start", "2026-01-01"],
        ["payroll", "--month", "2026-01", "--start", "2026-01-01", "--end", "2026-01-31"],
        ["payroll", "--start", "2026-01-31", "--end", "2026-01-01"],
        ["close-period", "--end", "2026-01-31"],
    ],
)
def test_period_options_are_validated(container, args):
    result = CliRunner().invoke(cli, args, obj=container)

    assert result.exit_code == 2


def test_close_window_then_list_records(container, punch_csv):
    runner = CliRunner()
    runner.invoke(cli, ["import", str(punch_csv)], obj=container)

    closed = runner.invoke(cli, ["close-period", "--start", "2026-01-01", "--end", "2026-01-15"], obj=container)
    records = runner.invoke(cli, ["records", "--start", "2026-01-01", "--end", "2026-01-15"], obj=container)
    other = runner.invoke(cli, ["records", "--month", "2026-01"], obj=container)

    assert closed.exit_code == 0, closed.output
    assert "Closed 2026-01-01..2026-01-15: 1 record(s)" in closed.output
    row = [line for line in records.output.splitlines() if "EMP-1" in line][0]
    assert row.split() == ["1", "EMP-1", "1", "8.00", "0.50", "160.00", "15.00", "175.00"]
    assert "No closed payroll for 2026-01-01..2026-01-31" in other.output
