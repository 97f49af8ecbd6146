"""Reduce a period's attendance into hour totals."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from sweldox_payroll.calculators.types import AttendanceRecord, AttendanceSummary
from sweldox_payroll.errors import PayrollValidationError


class AttendanceAggregator:
    """Sums attendance hours for a pay period."""

    @staticmethod
    def aggregate(records: Sequence[AttendanceRecord]) -> AttendanceSummary:
        """Total, overtime and regular hours plus days worked.

        Raises PayrollValidationError when overtime exceeds total hours;
        the value is never clamped.
        """
        total_hours = sum((r.total_hours for r in records), Decimal("0"))
        overtime_hours = sum((r.overtime_hours for r in records), Decimal("0"))
        regular_hours = total_hours - overtime_hours

        if regular_hours < 0:
            raise PayrollValidationError(
                f"Negative regular hours ({regular_hours}): overtime {overtime_hours} "
                f"exceeds total {total_hours}"
            )

        return AttendanceSummary(
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            regular_hours=regular_hours,
            days_worked=len(records),
        )
