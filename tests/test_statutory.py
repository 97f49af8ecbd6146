"""Unit tests for StatutoryDeductionCalculator."""

from decimal import Decimal

import pytest

from sweldox_payroll.calculators.statutory import StatutoryDeductionCalculator


def salaries(start: str, stop: str, step: str):
    value, end, inc = Decimal(start), Decimal(stop), Decimal(step)
    while value < end:
        yield value
        value += inc


class TestSSSDeduction:
    """Test SSS contribution lookup."""

    @pytest.mark.parametrize(
        "salary", [Decimal("0"), Decimal("1000"), Decimal("3000"), Decimal("3249.99")]
    )
    def test_below_first_floor_uses_minimum(self, salary):
        """Salaries under 3250 pay half the minimum contribution."""
        assert StatutoryDeductionCalculator.sss_deduction(salary) == Decimal("67.50")

    @pytest.mark.parametrize(
        "salary,expected",
        [
            (Decimal("3250"), Decimal("67.50")),
            (Decimal("3750"), Decimal("78.75")),
            (Decimal("10000"), Decimal("213.75")),
            (Decimal("30000"), Decimal("551.25")),
            (Decimal("250000"), Decimal("551.25")),
        ],
    )
    def test_floor_lookup_halved(self, salary, expected):
        """Table entry for the salary floor, split across two runs."""
        assert StatutoryDeductionCalculator.sss_deduction(salary) == expected

    def test_monotonic_in_salary(self):
        previous = Decimal("0")
        for salary in salaries("0", "40000", "250"):
            value = StatutoryDeductionCalculator.sss_deduction(salary)
            assert value >= previous
            previous = value


class TestPhilHealthDeduction:
    """Test PhilHealth premium."""

    @pytest.mark.parametrize(
        "salary,expected",
        [
            (Decimal("10000"), Decimal("75.00")),
            (Decimal("12345"), Decimal("92.59")),
            (Decimal("30000"), Decimal("225.00")),
            (Decimal("60000"), Decimal("450.00")),
            (Decimal("90000"), Decimal("450.00")),
        ],
    )
    def test_premium(self, salary, expected):
        """3% capped at 1800, halved twice with rounding at each step."""
        assert StatutoryDeductionCalculator.philhealth_deduction(salary) == expected

    def test_never_exceeds_cap(self):
        for salary in salaries("0", "200000", "1733.33"):
            assert StatutoryDeductionCalculator.philhealth_deduction(salary) <= Decimal("450")


class TestPagIbigDeduction:
    """Test Pag-IBIG contribution tiers."""

    @pytest.mark.parametrize(
        "salary,expected",
        [
            (Decimal("1000"), Decimal("5.00")),
            (Decimal("1500"), Decimal("7.50")),
            (Decimal("1500.01"), Decimal("15.00")),
            (Decimal("4000"), Decimal("40.00")),
            (Decimal("5000"), Decimal("50.00")),
            (Decimal("30000"), Decimal("50.00")),
        ],
    )
    def test_contribution(self, salary, expected):
        """1% up to 1500, 2% above, capped at 100, halved."""
        assert StatutoryDeductionCalculator.pagibig_deduction(salary) == expected

    def test_never_exceeds_cap(self):
        for salary in salaries("0", "100000", "911.11"):
            assert StatutoryDeductionCalculator.pagibig_deduction(salary) <= Decimal("50")


class TestWithholdingTax:
    """Test progressive withholding tax."""

    @pytest.mark.parametrize(
        "income", [Decimal("-826.25"), Decimal("0"), Decimal("13459.35"), Decimal("20832")]
    )
    def test_zero_up_to_first_bound(self, income):
        assert StatutoryDeductionCalculator.withholding_tax(income) == Decimal("0")

    def test_zero_for_all_incomes_in_first_bracket(self):
        for income in salaries("0", "20832", "97.31"):
            assert StatutoryDeductionCalculator.withholding_tax(income) == Decimal("0")

    @pytest.mark.parametrize(
        "income,expected",
        [
            (Decimal("25000"), Decimal("416.70")),
            (Decimal("40691.28"), Decimal("2169.79")),
            (Decimal("100000"), Decimal("10416.45")),
            (Decimal("200000"), Decimal("25749.95")),
            (Decimal("1000000"), Decimal("158749.94")),
        ],
    )
    def test_bracket_computation(self, income, expected):
        """(base + (income - floor) * rate) / 2, rounded half up."""
        assert StatutoryDeductionCalculator.withholding_tax(income) == expected

    @pytest.mark.parametrize(
        "income,expected",
        [
            (Decimal("20832.50"), Decimal("-0.05")),
            (Decimal("33332.50"), Decimal("1249.94")),
            (Decimal("66666.40"), Decimal("5416.41")),
            (Decimal("166666.99"), Decimal("20416.66")),
        ],
    )
    def test_gap_between_brackets_uses_unclamped_excess(self, income, expected):
        """Income below the next floor keeps its negative excess."""
        assert StatutoryDeductionCalculator.withholding_tax(income) == expected


class TestTotals:
    """Test statutory total and taxable income rounding."""

    def test_statutory_total(self):
        total = StatutoryDeductionCalculator.statutory_total(
            Decimal("551.25"), Decimal("225.00"), Decimal("50.00")
        )
        assert total == Decimal("826.25")

    def test_taxable_income_may_be_negative(self):
        """Taxable income is not clamped; tax handles non-positive values."""
        assert StatutoryDeductionCalculator.taxable_income(
            Decimal("0"), Decimal("826.25")
        ) == Decimal("-826.25")
