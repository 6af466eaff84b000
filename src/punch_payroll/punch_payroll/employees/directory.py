from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .model import EmployeePayProfile


class EmployeeDirectory(Protocol):
    """Source of truth for identity and pay terms.

    Misses return None (non-fatal). An unreachable directory raises
    UpstreamUnavailableError.
    """

    def resolve_employee_ids(self, device_user_ids: Iterable[str]) -> dict[str, Optional[str]]:
        raise NotImplementedError

    def get_pay_profile(self, employee_id: str) -> Optional[EmployeePayProfile]:
        raise NotImplementedError
