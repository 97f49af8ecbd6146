"""ORM models."""

from sweldox_payroll.models.attendance import Attendance
from sweldox_payroll.models.base import Base, TimestampMixin
from sweldox_payroll.models.employee import (
    INACTIVE_STATUSES,
    Benefit,
    BenefitType,
    Compensation,
    Employee,
)
from sweldox_payroll.models.payroll import (
    Deduction,
    DeductionType,
    Payroll,
    PayrollBenefit,
)

__all__ = [
    "Attendance",
    "Base",
    "TimestampMixin",
    "INACTIVE_STATUSES",
    "Benefit",
    "BenefitType",
    "Compensation",
    "Employee",
    "Deduction",
    "DeductionType",
    "Payroll",
    "PayrollBenefit",
]
