"""Line item builder for payroll deductions and benefit snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal

from sweldox_payroll.calculators.types import (
    MANDATORY_DEDUCTION_CODES,
    BenefitLine,
    DeductionLine,
    DeductionType,
    PayrollBenefit,
)
from sweldox_payroll.errors import DeductionTypeNotFoundError


class LineItemBuilder:
    """Builds the itemized lines carried on a payroll record.

    Rounding:
    - PHP to 2 decimals, ROUND_HALF_UP
    - Applied at each step of the pipeline, not only on the totals
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (centavos)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_deduction_line(
        deduction_type: DeductionType,
        amount: Decimal,
    ) -> DeductionLine:
        """Create a deduction line carrying the amount as computed."""
        return DeductionLine(
            deduction_code=deduction_type.code,
            amount=LineItemBuilder.round_to_cents(amount),
            description=deduction_type.description,
        )

    @staticmethod
    def build_deduction_lines(
        amounts: Mapping[str, Decimal],
        catalog: Mapping[str, DeductionType],
    ) -> tuple[DeductionLine, ...]:
        """Build exactly one line per mandatory deduction code.

        Raises DeductionTypeNotFoundError if the catalog lacks any code.
        """
        lines: list[DeductionLine] = []
        for code in MANDATORY_DEDUCTION_CODES:
            deduction_type = catalog.get(code.value)
            if deduction_type is None:
                raise DeductionTypeNotFoundError(code.value)
            lines.append(
                LineItemBuilder.create_deduction_line(deduction_type, amounts[code.value])
            )
        return tuple(lines)

    @staticmethod
    def build_benefit_snapshot(
        benefits: Iterable[BenefitLine],
    ) -> tuple[PayrollBenefit, ...]:
        """Copy compensation benefits onto the payroll."""
        return tuple(
            PayrollBenefit(benefit_type_id=b.benefit_type_id, amount=b.amount)
            for b in benefits
        )

    @staticmethod
    def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
        """Sum amounts and round to cents."""
        return LineItemBuilder.round_to_cents(sum(amounts, Decimal("0")))
