from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from datetime import date, tzinfo
from typing import Callable, ContextManager, Iterable, Mapping, Optional, Sequence

from ..core.enums import SkipReason
from ..core.exceptions import ValidationError
from ..employees.directory import EmployeeDirectory
from ..employees.model import EmployeePayProfile
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..punches.dedup import Deduplicator
from ..punches.model import PunchEvent, RawPunch
from ..punches.repository import PunchRepository
from ..sessions.builder import DayKey, SessionBuilder, group_by_day
from ..sessions.model import ProcessedDay
from ..sessions.repository import DaySessionRepository
from .model import BatchSummary, SkippedSession

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Punches -> day sessions -> hours and pay, committed per batch.

    All reads (directory, stored punches) happen before the first write, and the
    writes run inside one transaction, so a failing batch leaves no trace.
    """

    def __init__(
        self,
        punches: PunchRepository,
        sessions: DaySessionRepository,
        directory: EmployeeDirectory,
        *,
        calculator: Optional[PayrollCalculator] = None,
        builder: Optional[SessionBuilder] = None,
        tz: Optional[tzinfo] = None,
        transaction: Optional[Callable[[], ContextManager]] = None,
    ):
        self._punches = punches
        self._sessions = sessions
        self._directory = directory
        self._calculator = calculator or StandardPayrollCalculator()
        self._builder = builder or SessionBuilder()
        self._dedup = Deduplicator(tz=tz)
        self._transaction = transaction or nullcontext

    def process_batch(self, punches: Iterable[RawPunch]) -> BatchSummary:
        batch = list(punches)
        if not batch:
            return BatchSummary()

        keys = [p.dedup_key for p in batch]
        device_user_ids = {k[0] for k in keys}

        employee_ids = self._directory.resolve_employee_ids(device_user_ids)
        existing = self._punches.existing_keys(
            device_user_ids=device_user_ids,
            start_ms=min(k[1] for k in keys),
            end_ms=max(k[1] for k in keys),
        )
        result = self._dedup.filter(batch, existing_keys=existing, employee_ids=employee_ids)

        if result.unmapped_device_users:
            logger.warning(
                "Dropped %d punch(es) from unmapped device users: %s",
                result.unmapped_punches,
                ", ".join(result.unmapped_device_users),
            )

        fresh = group_by_day(result.accepted)
        days, skipped = self._reconcile(sorted(fresh), fresh)

        with self._transaction():
            self._punches.insert_new(result.accepted)
            self._commit_days(days)

        summary = BatchSummary(
            events_received=len(batch),
            events_accepted=len(result.accepted),
            duplicates=result.duplicates,
            unmapped_punches=result.unmapped_punches,
            unmapped_device_users=result.unmapped_device_users,
            day_sessions_written=len(days),
            sessions_skipped=skipped,
        )
        logger.info(
            "Batch: received=%d accepted=%d duplicates=%d unmapped=%d days_written=%d skipped=%d",
            summary.events_received,
            summary.events_accepted,
            summary.duplicates,
            summary.unmapped_punches,
            summary.day_sessions_written,
            len(summary.sessions_skipped),
        )
        return summary

    def process_pending(
        self,
        *,
        employee_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> BatchSummary:
        """Rebuild every day that still has unconsumed stored punches."""
        pending = self._punches.get_unconsumed(employee_id=employee_id, start_date=start, end_date=end)
        day_keys = sorted(group_by_day(pending))
        days, skipped = self._reconcile(day_keys, {})

        with self._transaction():
            self._commit_days(days)

        logger.info(
            "Pending: %d punch(es) over %d day(s), written=%d skipped=%d",
            len(pending),
            len(day_keys),
            len(days),
            len(skipped),
        )
        return BatchSummary(day_sessions_written=len(days), sessions_skipped=skipped)

    def _reconcile(
        self,
        day_keys: Sequence[DayKey],
        fresh: Mapping[DayKey, list[PunchEvent]],
    ) -> tuple[list[ProcessedDay], list[SkippedSession]]:
        profiles: dict[str, Optional[EmployeePayProfile]] = {}
        days: list[ProcessedDay] = []
        skipped: list[SkippedSession] = []

        for employee_id, work_date in day_keys:
            if employee_id not in profiles:
                profiles[employee_id] = self._directory.get_pay_profile(employee_id)
            profile = profiles[employee_id]

            if profile is None:
                logger.warning("No pay profile for employee %s, skipping %s", employee_id, work_date)
                skipped.append(SkippedSession(employee_id, work_date, SkipReason.NO_PAY_PROFILE))
                continue
            try:
                profile = profile.validated()
            except ValidationError as exc:
                logger.warning("Invalid pay profile for employee %s: %s", employee_id, exc)
                skipped.append(SkippedSession(employee_id, work_date, SkipReason.INVALID_PAY_PROFILE, str(exc)))
                continue

            # Stored punches first so arrival order is kept for same-millisecond ties.
            events = [*self._punches.get_for_day(employee_id=employee_id, work_date=work_date)]
            events.extend(fresh.get((employee_id, work_date), []))

            day = self._compute_day(employee_id, work_date, events, profile)
            if day is not None:
                days.append(day)

        return days, skipped

    def _compute_day(
        self,
        employee_id: str,
        work_date: date,
        events: Sequence[PunchEvent],
        profile: EmployeePayProfile,
    ) -> Optional[ProcessedDay]:
        session = self._builder.build(employee_id, work_date, events)
        if session is None:
            return None

        hours = self._calculator.hours(session, profile)
        pay = self._calculator.pay(hours, profile)
        session = replace(
            session,
            total_hours=hours.total_hours,
            break_hours=hours.break_hours,
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            processed=True,
        )
        return ProcessedDay(
            session=session,
            pay=pay,
            hourly_rate=profile.hourly_rate,
            overtime_multiplier=profile.overtime_multiplier,
            scheduled_regular_hours=profile.scheduled_regular_hours,
        )

    def _commit_days(self, days: Sequence[ProcessedDay]) -> None:
        for day in days:
            self._sessions.upsert(day)
            self._punches.mark_consumed(employee_id=day.employee_id, work_date=day.work_date)
