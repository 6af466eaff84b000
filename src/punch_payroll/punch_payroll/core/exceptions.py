class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class UpstreamUnavailableError(DomainError):
    """Raised when the punch source or employee directory cannot be reached.

    Fatal to the current batch: nothing from the batch is committed.
    """


class DuplicatePayrollError(DomainError):
    """Raised when a pay record already exists for an employee and period."""

    def __init__(self, employee_id: str, period_label: str):
        super().__init__(f"Payroll already closed for employee {employee_id} in {period_label}")
        self.employee_id = employee_id
        self.period_label = period_label
