from __future__ import annotations

from typing import Iterable

from ..sessions.model import ProcessedDay
from .model import PayPeriod, PayrollSummary


def aggregate(days: Iterable[ProcessedDay], *, period: PayPeriod) -> list[PayrollSummary]:
    """Sum processed days per employee.

    Days outside ``period`` are ignored; employees without days are omitted.
    Summation runs in (employee_id, work_date) order so totals do not depend on
    the input order.
    """
    in_period = [d for d in days if period.start <= d.work_date <= period.end]
    in_period.sort(key=lambda d: (d.employee_id, d.work_date))

    totals: dict[str, dict] = {}
    for d in in_period:
        s = totals.get(d.employee_id)
        if not s:
            s = {
                "total_days": 0,
                "total_regular_hours": 0.0,
                "total_overtime_hours": 0.0,
                "total_regular_pay": 0.0,
                "total_overtime_pay": 0.0,
                "total_pay": 0.0,
            }
            totals[d.employee_id] = s
        s["total_days"] += 1
        s["total_regular_hours"] += d.session.regular_hours
        s["total_overtime_hours"] += d.session.overtime_hours
        s["total_regular_pay"] += d.pay.regular_pay
        s["total_overtime_pay"] += d.pay.overtime_pay
        s["total_pay"] += d.pay.total_pay

    return [PayrollSummary(employee_id=emp_id, period=period, **s) for emp_id, s in totals.items()]
