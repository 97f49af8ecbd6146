"""Payroll services."""

from sweldox_payroll.services.batch import BatchItemResult, BatchItemStatus, BatchRunSummary
from sweldox_payroll.services.payroll_service import PayrollRunner
from sweldox_payroll.services.repositories import PayrollRepository

__all__ = [
    "BatchItemResult",
    "BatchItemStatus",
    "BatchRunSummary",
    "PayrollRunner",
    "PayrollRepository",
]
