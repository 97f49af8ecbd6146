"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID


class DeductionCode(str, Enum):
    """Mandatory deduction codes, in the order lines are emitted."""

    SSS = "SSS"
    PHIC = "PHIC"
    HDMF = "HDMF"
    TAX = "TAX"


MANDATORY_DEDUCTION_CODES: tuple[DeductionCode, ...] = (
    DeductionCode.SSS,
    DeductionCode.PHIC,
    DeductionCode.HDMF,
    DeductionCode.TAX,
)


@dataclass(frozen=True)
class DeductionType:
    """Deduction catalog entry."""

    code: str
    description: str
    deduction_type_id: int | None = None


@dataclass(frozen=True)
class BenefitLine:
    """A recurring benefit on a compensation profile."""

    benefit_type_id: int
    amount: Decimal
    description: str | None = None


@dataclass(frozen=True)
class CompensationProfile:
    """Employee compensation as seen by the engine."""

    employee_id: int
    basic_salary: Decimal  # monthly
    hourly_rate: Decimal
    benefits: tuple[BenefitLine, ...] = ()


@dataclass(frozen=True)
class AttendanceRecord:
    """One day of attendance."""

    date: date
    total_hours: Decimal
    overtime_hours: Decimal = Decimal("0")


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance reduced over a pay period."""

    total_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    regular_hours: Decimal = Decimal("0")
    days_worked: int = 0


@dataclass(frozen=True)
class DeductionLine:
    """A deduction on a payroll record."""

    deduction_code: str
    amount: Decimal
    description: str | None = None


@dataclass(frozen=True)
class PayrollBenefit:
    """Benefit snapshot on a payroll record."""

    benefit_type_id: int
    amount: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    """Intermediate figures behind a payroll record."""

    hours: AttendanceSummary
    regular_pay: Decimal
    overtime_pay: Decimal
    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    statutory_total: Decimal
    taxable_income: Decimal
    withholding_tax: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    """Payroll for one employee and period.

    Built once by the assembler; the store assigns ``payroll_id``.
    """

    employee_id: int
    period_start_date: date | None
    period_end_date: date | None
    pay_date: date
    days_worked: int
    overtime_hours: Decimal
    monthly_rate: Decimal
    daily_rate: Decimal
    gross_pay: Decimal
    benefits: tuple[PayrollBenefit, ...]
    total_benefits: Decimal
    deductions: tuple[DeductionLine, ...]
    total_deductions: Decimal
    net_pay: Decimal
    payroll_id: UUID | None = None
    breakdown: PayrollBreakdown | None = field(default=None, compare=False, repr=False)

    def deduction_amount(self, code: str) -> Decimal:
        """Amount of the deduction line with the given code."""
        for line in self.deductions:
            if line.deduction_code == code:
                return line.amount
        raise KeyError(code)
