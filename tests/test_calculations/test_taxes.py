"""Tests for capital gains and income tax."""

import pytest

from wealth_roadmap.calculations.taxes import (
    calculate_after_tax_income,
    calculate_cgt,
    calculate_gross_income_needed,
)


class TestCGT:
    """Tests for capital gains tax on disposal."""

    def test_discount_applies_after_one_year(self):
        """A $400k gain held 5 years is taxed on half at 37%."""
        assert calculate_cgt(1_200_000, 800_000, 5, 0.37) == pytest.approx(74_000)

    def test_no_discount_inside_first_year(self):
        """Assets held under 12 months are taxed on the full gain."""
        assert calculate_cgt(1_200_000, 800_000, 0, 0.37) == pytest.approx(148_000)

    def test_no_tax_on_loss(self):
        """A capital loss produces no tax (and no refund)."""
        assert calculate_cgt(700_000, 800_000, 5, 0.37) == 0

    def test_custom_discount(self):
        """The discount fraction is configurable."""
        assert calculate_cgt(1_100_000, 1_000_000, 2, 0.40, cgt_discount=1.0) == pytest.approx(40_000)


class TestIncomeTax:
    """Tests for after-tax income."""

    def test_after_tax_income(self):
        """Net income after marginal tax."""
        assert calculate_after_tax_income(100_000, 0.37) == pytest.approx(63_000)

    def test_gross_income_needed_inverts_after_tax(self):
        """Grossing up then taxing returns the original amount."""
        gross = calculate_gross_income_needed(63_000, 0.37)
        assert gross == pytest.approx(100_000)
