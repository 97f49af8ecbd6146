"""Exception hierarchy for payroll generation."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from sweldox_payroll.services.batch import BatchRunSummary


class PayrollError(Exception):
    """Base class for all payroll engine errors."""


class PayrollConflictError(PayrollError):
    """Raised when a payroll already exists for an employee and period."""

    def __init__(self, employee_id: int, period_start: date, period_end: date):
        self.employee_id = employee_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"Payroll already exists for employee {employee_id} "
            f"for period {period_start} to {period_end}."
        )


class PayrollValidationError(PayrollError):
    """Raised when inputs reaching the engine are internally inconsistent.

    Upstream layers validate requests, so this signals corrupt data
    (e.g. overtime exceeding total hours) rather than a user mistake.
    """


class DeductionTypeNotFoundError(PayrollError):
    """Raised when a mandatory deduction code is missing from the catalog."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Deduction type '{code}' not found in catalog")


class CompensationNotFoundError(PayrollError):
    """Raised when an employee has no compensation profile."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"No compensation profile for employee {employee_id}")


class PayrollNotFoundError(PayrollError):
    """Raised when a payroll record cannot be found."""

    def __init__(self, payroll_id: UUID):
        self.payroll_id = payroll_id
        super().__init__(f"Payroll {payroll_id} not found")


class PersistenceError(PayrollError):
    """Raised when the storage layer fails to save a payroll."""


class BatchAbortedError(PayrollError):
    """Raised when a batch run exceeds its skip budget."""

    def __init__(self, summary: BatchRunSummary, skip_limit: int):
        self.summary = summary
        self.skip_limit = skip_limit
        super().__init__(
            f"Batch aborted after {summary.failed_count} failures "
            f"(skip limit {skip_limit}); {summary.created_count} payroll(s) created"
        )
