"""Payroll assembler - combines hours, deductions and benefits."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from decimal import Decimal

from sweldox_payroll.calculators.attendance import AttendanceAggregator
from sweldox_payroll.calculators.line_builder import LineItemBuilder
from sweldox_payroll.calculators.rate_tables import HOURS_PER_DAY, OVERTIME_MULTIPLIER
from sweldox_payroll.calculators.statutory import StatutoryDeductionCalculator
from sweldox_payroll.calculators.types import (
    AttendanceRecord,
    BenefitLine,
    CompensationProfile,
    DeductionCode,
    DeductionType,
    PayrollBreakdown,
    PayrollRecord,
)


class PayrollAssembler:
    """Builds a payroll record for one employee and period.

    Calculation pipeline (rounded to cents where noted):
    1) Regular and overtime pay; gross is rounded
    2) Benefit total
    3) SSS, PhilHealth, Pag-IBIG; their sum is rounded
    4) Taxable income (rounded) and withholding tax
    5) Total deductions (rounded)
    6) Net pay (rounded)
    7) One deduction line per mandatory code, benefit snapshot
    8) Daily rate (rounded)

    The record's period bounds are the requested period, not the dates of
    the attendance found within it.
    """

    def __init__(self, deduction_types: Mapping[str, DeductionType]):
        self.deduction_types = deduction_types

    def assemble(
        self,
        profile: CompensationProfile,
        attendance: Sequence[AttendanceRecord],
        benefits: Iterable[BenefitLine],
        period_start: date,
        period_end: date,
        pay_date: date,
    ) -> PayrollRecord:
        """Assemble a payroll record.

        Raises:
            PayrollValidationError: overtime exceeds total hours.
            DeductionTypeNotFoundError: a mandatory code is missing.
        """
        benefits = tuple(benefits)
        hourly_rate = profile.hourly_rate
        basic_salary = profile.basic_salary

        # 1) Earnings
        hours = AttendanceAggregator.aggregate(attendance)
        regular_pay = hourly_rate * hours.regular_hours
        overtime_pay = hourly_rate * hours.overtime_hours * OVERTIME_MULTIPLIER
        gross_pay = LineItemBuilder.round_to_cents(regular_pay + overtime_pay)

        # 2) Benefits
        total_benefits = LineItemBuilder.sum_amounts(b.amount for b in benefits)

        # 3) Statutory deductions depend on salary only, not attendance
        sss = StatutoryDeductionCalculator.sss_deduction(basic_salary)
        philhealth = StatutoryDeductionCalculator.philhealth_deduction(basic_salary)
        pagibig = StatutoryDeductionCalculator.pagibig_deduction(basic_salary)
        statutory_total = StatutoryDeductionCalculator.statutory_total(
            sss, philhealth, pagibig
        )

        # 4) Tax
        taxable_income = StatutoryDeductionCalculator.taxable_income(
            gross_pay, statutory_total
        )
        withholding_tax = StatutoryDeductionCalculator.withholding_tax(taxable_income)

        # 5-6) Totals
        total_deductions = LineItemBuilder.round_to_cents(statutory_total + withholding_tax)
        net_pay = LineItemBuilder.round_to_cents(
            gross_pay + total_benefits - statutory_total - withholding_tax
        )

        # 7) Lines
        deductions = LineItemBuilder.build_deduction_lines(
            {
                DeductionCode.SSS.value: sss,
                DeductionCode.PHIC.value: philhealth,
                DeductionCode.HDMF.value: pagibig,
                DeductionCode.TAX.value: withholding_tax,
            },
            self.deduction_types,
        )
        benefit_snapshot = LineItemBuilder.build_benefit_snapshot(benefits)

        # 8) Daily rate
        daily_rate = LineItemBuilder.round_to_cents(hourly_rate * HOURS_PER_DAY)

        return PayrollRecord(
            employee_id=profile.employee_id,
            period_start_date=period_start,
            period_end_date=period_end,
            pay_date=pay_date,
            days_worked=hours.days_worked,
            overtime_hours=hours.overtime_hours,
            monthly_rate=basic_salary,
            daily_rate=daily_rate,
            gross_pay=gross_pay,
            benefits=benefit_snapshot,
            total_benefits=total_benefits,
            deductions=deductions,
            total_deductions=total_deductions,
            net_pay=net_pay,
            breakdown=PayrollBreakdown(
                hours=hours,
                regular_pay=regular_pay,
                overtime_pay=overtime_pay,
                sss=sss,
                philhealth=philhealth,
                pagibig=pagibig,
                statutory_total=statutory_total,
                taxable_income=taxable_income,
                withholding_tax=withholding_tax,
            ),
        )
