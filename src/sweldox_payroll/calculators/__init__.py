"""Payroll calculation engine."""

from sweldox_payroll.calculators.assembler import PayrollAssembler
from sweldox_payroll.calculators.attendance import AttendanceAggregator
from sweldox_payroll.calculators.line_builder import LineItemBuilder
from sweldox_payroll.calculators.statutory import StatutoryDeductionCalculator

__all__ = [
    "PayrollAssembler",
    "AttendanceAggregator",
    "LineItemBuilder",
    "StatutoryDeductionCalculator",
]
