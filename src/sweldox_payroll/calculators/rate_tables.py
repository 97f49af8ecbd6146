"""Statutory rate constants and lookup tables.

All rates, caps and brackets for the single supported jurisdiction live
here so they can be audited and tested apart from the assembler. Tables
are built once at import and never modified.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

# Work schedule
HOURS_PER_DAY = Decimal("8")
OVERTIME_MULTIPLIER = Decimal("1.25")

# Monthly contributions are split across two semi-monthly runs
SEMI_MONTHLY_DIVISOR = Decimal("2")
# Employer/employee 50-50 split
EMPLOYEE_SHARE_DIVISOR = Decimal("2")

# SSS contribution schedule
SSS_TABLE_SIZE = 44
SSS_BASE_SALARY = Decimal("3250")
SSS_SALARY_STEP = Decimal("500")
SSS_BASE_CONTRIBUTION = Decimal("135")
SSS_CONTRIBUTION_STEP = Decimal("22.5")

# PhilHealth
PHILHEALTH_RATE = Decimal("0.03")
PHILHEALTH_MAX_PREMIUM = Decimal("1800")

# Pag-IBIG
PAGIBIG_TIER_THRESHOLD = Decimal("1500")
PAGIBIG_LOW_RATE = Decimal("0.01")
PAGIBIG_HIGH_RATE = Decimal("0.02")
PAGIBIG_MAX_CONTRIBUTION = Decimal("100")


class ContributionSchedule:
    """Stepped salary-floor → contribution table with floor lookup."""

    def __init__(self, entries: Mapping[Decimal, Decimal]):
        self._keys: tuple[Decimal, ...] = tuple(sorted(entries))
        self._entries: Mapping[Decimal, Decimal] = MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def entries(self) -> Mapping[Decimal, Decimal]:
        return self._entries

    @property
    def min_contribution(self) -> Decimal:
        """Contribution of the lowest salary floor."""
        return self._entries[self._keys[0]]

    def floor_key(self, salary: Decimal) -> Decimal | None:
        """Largest salary floor <= salary, or None below the first floor."""
        idx = bisect_right(self._keys, salary)
        if idx == 0:
            return None
        return self._keys[idx - 1]

    def floor_lookup(self, salary: Decimal) -> Decimal | None:
        """Contribution for the largest salary floor <= salary."""
        key = self.floor_key(salary)
        if key is None:
            return None
        return self._entries[key]


def build_sss_schedule() -> ContributionSchedule:
    """Build the SSS schedule from its closed-form rule."""
    return ContributionSchedule(
        {
            SSS_BASE_SALARY + SSS_SALARY_STEP * i: SSS_BASE_CONTRIBUTION
            + SSS_CONTRIBUTION_STEP * i
            for i in range(SSS_TABLE_SIZE)
        }
    )


SSS_SCHEDULE = build_sss_schedule()


@dataclass(frozen=True)
class TaxBracket:
    """Withholding tax bracket.

    ``upper_bound`` of None marks the unbounded top bracket.
    """

    upper_bound: Decimal | None
    base_amount: Decimal
    marginal_rate: Decimal
    bracket_floor: Decimal

    def contains(self, taxable_income: Decimal) -> bool:
        return self.upper_bound is None or taxable_income <= self.upper_bound


# Published monthly withholding table; ordered by upper bound
TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("20832"), Decimal("0"), Decimal("0"), Decimal("0")),
    TaxBracket(Decimal("33332"), Decimal("0"), Decimal("0.20"), Decimal("20833")),
    TaxBracket(Decimal("66666"), Decimal("2500"), Decimal("0.25"), Decimal("33333")),
    TaxBracket(Decimal("166666"), Decimal("10833"), Decimal("0.30"), Decimal("66667")),
    TaxBracket(Decimal("666666"), Decimal("40833.33"), Decimal("0.32"), Decimal("166667")),
    TaxBracket(None, Decimal("200833.33"), Decimal("0.35"), Decimal("666667")),
)


def find_tax_bracket(taxable_income: Decimal) -> TaxBracket:
    """First bracket whose upper bound is >= taxable_income."""
    for bracket in TAX_BRACKETS:
        if bracket.contains(taxable_income):
            return bracket
    return TAX_BRACKETS[-1]
