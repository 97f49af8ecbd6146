"""Sweldox payroll generation engine."""

__version__ = "1.0.0"
