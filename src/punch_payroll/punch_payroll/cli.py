"""punch-payroll CLI - reconcile clock punches and report payroll."""

from __future__ import annotations

import functools
import json
from typing import Optional

import click

from . import __version__
from .common.datetime_utils import parse_iso_date
from .core.exceptions import DomainError
from .payroll.model import PayPeriod, PayrollSummary
from .punches.source import CsvPunchSource
from .sessions.model import ProcessedDay


def _container(ctx: click.Context):
    # Tests inject a container through ``obj``; otherwise build from settings.
    if ctx.obj is None:
        from .main import create_container

        ctx.obj = create_container()
    return ctx.obj


def _parse_date(ctx, param, value):
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.")


def _period_options(f):
    """--month YYYY-MM, or an explicit --start/--end window."""
    f = click.option("--end", callback=_parse_date, help="Last day of the window (YYYY-MM-DD).")(f)
    f = click.option("--start", callback=_parse_date, help="First day of the window (YYYY-MM-DD).")(f)
    f = click.option("--month", help="Pay period as YYYY-MM.")(f)

    @functools.wraps(f)
    def wrapper(*args, month, start, end, **kwargs):
        return f(*args, period=_resolve_period(month, start, end), **kwargs)

    return wrapper


def _resolve_period(month: Optional[str], start, end) -> PayPeriod:
    if month and (start or end):
        raise click.UsageError("Use either --month or --start/--end, not both.")
    try:
        if month:
            return PayPeriod.parse_month(month)
        if start and end:
            return PayPeriod(start=start, end=end)
    except DomainError as e:
        raise click.BadParameter(str(e))
    raise click.UsageError("Give --month, or both --start and --end.")


def _summary_row(s: PayrollSummary) -> str:
    # Display rounding only; stored figures stay unrounded.
    return (
        f"{s.employee_id:<12} {s.total_days:>4} "
        f"{s.total_regular_hours:>9.2f} {s.total_overtime_hours:>9.2f} "
        f"{s.total_regular_pay:>12.2f} {s.total_overtime_pay:>12.2f} {s.total_pay:>12.2f}"
    )


_SUMMARY_HEADER = f"{'EMPLOYEE':<12} {'DAYS':>4} {'REG_H':>9} {'OT_H':>9} {'REG_PAY':>12} {'OT_PAY':>12} {'TOTAL':>12}"


def _hhmm(value) -> str:
    return value.strftime("%H:%M") if value is not None else "-"


def _day_row(day: ProcessedDay) -> str:
    s = day.session
    return (
        f"{s.employee_id:<12} {s.work_date.isoformat()} {s.state.value:<9} "
        f"{_hhmm(s.clock_in):>5} {_hhmm(s.clock_out):>5} "
        f"{s.work_hours:>7.2f} {s.regular_hours:>7.2f} {s.overtime_hours:>7.2f} {day.pay.total_pay:>10.2f}"
    )


@click.group()
@click.version_option(version=__version__, prog_name="punch-payroll")
@click.pass_context
def cli(ctx):
    """Punch Payroll - reconcile clock punches into day sessions and payroll.

    Settings are selected by APP_ENV (development, testing, production) and
    read from the environment or a .env file.
    """


@cli.command("import")
@click.argument("csv_file", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the batch summary as JSON.")
@click.pass_context
def import_punches(ctx, csv_file, as_json):
    """Read a device export (CSV) and reconcile it as one batch."""
    container = _container(ctx)
    try:
        punches = CsvPunchSource(csv_file, default_device_id=container.default_device_id).fetch()
        summary = container.reconciliation_service.process_batch(punches)
    except DomainError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(summary.as_dict(), indent=2))
        return

    click.echo(
        f"Received {summary.events_received}, accepted {summary.events_accepted}, "
        f"duplicates {summary.duplicates}, unmapped {summary.unmapped_punches}"
    )
    click.echo(f"Day sessions written: {summary.day_sessions_written}")
    if summary.unmapped_device_users:
        click.echo(f"Unmapped device users: {', '.join(summary.unmapped_device_users)}")
    for s in summary.sessions_skipped:
        click.echo(f"Skipped {s.employee_id} {s.work_date.isoformat()}: {s.reason.value}")


@cli.command("process")
@click.option("--employee-id", help="Only this employee.")
@click.option("--start", callback=_parse_date, help="First work date (YYYY-MM-DD).")
@click.option("--end", callback=_parse_date, help="Last work date (YYYY-MM-DD).")
@click.pass_context
def process_pending(ctx, employee_id, start, end):
    """Rebuild days that still have unconsumed stored punches."""
    container = _container(ctx)
    try:
        summary = container.reconciliation_service.process_pending(employee_id=employee_id, start=start, end=end)
    except DomainError as e:
        raise click.ClickException(str(e))

    click.echo(f"Day sessions written: {summary.day_sessions_written}")
    for s in summary.sessions_skipped:
        click.echo(f"Skipped {s.employee_id} {s.work_date.isoformat()}: {s.reason.value}")


@cli.command("days")
@click.option("--employee-id", "employee_ids", multiple=True, help="Restrict to these employees (repeatable).")
@click.option("--date", "work_date", callback=_parse_date, help="A single work date (YYYY-MM-DD).")
@click.option("--start", callback=_parse_date, help="First work date (YYYY-MM-DD).")
@click.option("--end", callback=_parse_date, help="Last work date (YYYY-MM-DD).")
@click.option("--json", "as_json", is_flag=True, help="Print the days as JSON.")
@click.pass_context
def list_days(ctx, employee_ids, work_date, start, end, as_json):
    """Show processed attendance days with their hours and pay."""
    if work_date and (start or end):
        raise click.UsageError("Use either --date or --start/--end, not both.")
    if work_date:
        start = end = work_date
    elif not (start and end):
        raise click.UsageError("Give --date, or both --start and --end.")

    service = _container(ctx).day_session_service
    try:
        if work_date and len(employee_ids) == 1:
            day = service.get_day(employee_ids[0], work_date)
            days = [day] if day is not None else []
        else:
            days = service.list_days(start=start, end=end, employee_ids=employee_ids or None)
    except DomainError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps([d.as_dict() for d in days], indent=2))
        return

    if not days:
        click.echo(f"No processed attendance in {start.isoformat()}..{end.isoformat()}")
        return

    click.echo(
        f"{'EMPLOYEE':<12} {'DATE':<10} {'STATE':<9} {'IN':>5} {'OUT':>5} "
        f"{'WORK_H':>7} {'REG_H':>7} {'OT_H':>7} {'PAY':>10}"
    )
    for d in days:
        click.echo(_day_row(d))


@cli.command("payroll")
@_period_options
@click.option("--employee-id", "employee_ids", multiple=True, help="Restrict to these employees (repeatable).")
@click.pass_context
def payroll(ctx, period, employee_ids):
    """Print the payroll summary of a month or date window."""
    container = _container(ctx)
    try:
        summaries = container.payroll_service.compute_payroll(period, employee_ids or None)
    except DomainError as e:
        raise click.ClickException(str(e))

    if not summaries:
        click.echo(f"No processed attendance in {period.label}")
        return

    click.echo(_SUMMARY_HEADER)
    for s in summaries:
        click.echo(_summary_row(s))


@cli.command("close-period")
@_period_options
@click.option("--employee-id", "employee_ids", multiple=True, help="Restrict to these employees (repeatable).")
@click.pass_context
def close_period(ctx, period, employee_ids):
    """Persist the period's payroll records (rejected if already closed)."""
    container = _container(ctx)
    try:
        records = container.payroll_service.close_period(period, employee_ids or None)
    except DomainError as e:
        raise click.ClickException(str(e))
    click.echo(f"Closed {period.label}: {len(records)} record(s)")


@cli.command("records")
@_period_options
@click.option("--employee-id", help="Only this employee.")
@click.pass_context
def list_records(ctx, period, employee_id):
    """Show payroll records stored by close-period."""
    container = _container(ctx)
    try:
        records = container.payroll_service.list_closed(period, employee_id=employee_id)
    except DomainError as e:
        raise click.ClickException(str(e))

    if not records:
        click.echo(f"No closed payroll for {period.label}")
        return

    click.echo(f"{'RECORD':>6} {_SUMMARY_HEADER}")
    for r in records:
        click.echo(f"{r.record_id:>6} {_summary_row(r.summary)}")


@cli.command("init-db")
def init_db():
    """Apply the bundled schema.sql to the configured database."""
    from .database.bootstrap import apply_schema, list_tables
    from .main import SCHEMA_PATH, load_settings

    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config, schema_path=SCHEMA_PATH)
    click.echo(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(list_tables(db_config))})"
    )


def main():
    cli(obj=None)


if __name__ == "__main__":
    main()
