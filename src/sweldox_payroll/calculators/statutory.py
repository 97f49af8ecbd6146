"""Statutory deductions and withholding tax."""

from __future__ import annotations

from decimal import Decimal

from sweldox_payroll.calculators.line_builder import LineItemBuilder
from sweldox_payroll.calculators.rate_tables import (
    EMPLOYEE_SHARE_DIVISOR,
    PAGIBIG_HIGH_RATE,
    PAGIBIG_LOW_RATE,
    PAGIBIG_MAX_CONTRIBUTION,
    PAGIBIG_TIER_THRESHOLD,
    PHILHEALTH_MAX_PREMIUM,
    PHILHEALTH_RATE,
    SEMI_MONTHLY_DIVISOR,
    SSS_BASE_SALARY,
    SSS_SCHEDULE,
    find_tax_bracket,
)

ZERO = Decimal("0")


class StatutoryDeductionCalculator:
    """Government contributions and withholding tax for one semi-monthly run.

    Contribution inputs are the monthly basic salary; every result is the
    employee's per-run amount (the monthly figure split across two runs).
    All methods are pure.
    """

    @staticmethod
    def sss_deduction(basic_salary: Decimal) -> Decimal:
        """SSS contribution from the stepped schedule, halved."""
        if basic_salary < SSS_BASE_SALARY:
            contribution = SSS_SCHEDULE.min_contribution
        else:
            contribution = SSS_SCHEDULE.floor_lookup(basic_salary)
            if contribution is None:
                return ZERO
        return LineItemBuilder.round_to_cents(contribution / SEMI_MONTHLY_DIVISOR)

    @staticmethod
    def philhealth_deduction(basic_salary: Decimal) -> Decimal:
        """PhilHealth premium: 3% capped, employee half, then per-run half."""
        monthly_premium = min(basic_salary * PHILHEALTH_RATE, PHILHEALTH_MAX_PREMIUM)
        employee_share = LineItemBuilder.round_to_cents(
            monthly_premium / EMPLOYEE_SHARE_DIVISOR
        )
        return LineItemBuilder.round_to_cents(employee_share / SEMI_MONTHLY_DIVISOR)

    @staticmethod
    def pagibig_deduction(basic_salary: Decimal) -> Decimal:
        """Pag-IBIG contribution: 1% or 2% tier, capped, halved."""
        rate = PAGIBIG_HIGH_RATE if basic_salary > PAGIBIG_TIER_THRESHOLD else PAGIBIG_LOW_RATE
        contribution = min(basic_salary * rate, PAGIBIG_MAX_CONTRIBUTION)
        return LineItemBuilder.round_to_cents(contribution / SEMI_MONTHLY_DIVISOR)

    @staticmethod
    def statutory_total(sss: Decimal, philhealth: Decimal, pagibig: Decimal) -> Decimal:
        return LineItemBuilder.round_to_cents(sss + philhealth + pagibig)

    @staticmethod
    def taxable_income(gross_pay: Decimal, statutory_total: Decimal) -> Decimal:
        return LineItemBuilder.round_to_cents(gross_pay - statutory_total)

    @staticmethod
    def withholding_tax(taxable_income: Decimal) -> Decimal:
        """Progressive withholding tax, halved for the semi-monthly run.

        The bracket table is the monthly schedule but is applied to the
        period's taxable income as-is.
        """
        if taxable_income <= 0:
            return ZERO

        bracket = find_tax_bracket(taxable_income)
        # Incomes between an upper bound and the next floor (e.g. 20832.50)
        # have a negative excess and fall slightly below the bracket base.
        excess = taxable_income - bracket.bracket_floor
        tax = bracket.base_amount + excess * bracket.marginal_rate
        return LineItemBuilder.round_to_cents(tax / SEMI_MONTHLY_DIVISOR)
