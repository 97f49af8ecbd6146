"""HTTP surface for the payroll engine."""
