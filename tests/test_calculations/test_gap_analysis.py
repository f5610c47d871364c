"""Tests for the goal gap analysis."""

import pytest

from wealth_roadmap.calculations.gap_analysis import (
    calculate_gap_analysis,
    calculate_income_per_property,
)
from wealth_roadmap.calculations.projection import generate_projection
from wealth_roadmap.calculations.sale_optimizer import calculate_strategic_sale_scenario
from wealth_roadmap.models import Assumptions, InvalidAssumptionError, Property


def _gap(properties, annual_goal=120_000, assumptions=None, target_years=0):
    assumptions = assumptions or Assumptions()
    projection = generate_projection(properties, 0, assumptions, target_years)
    scenario = calculate_strategic_sale_scenario(projection, annual_goal / 12, assumptions, target_years)
    return calculate_gap_analysis(projection, scenario, assumptions, annual_goal, target_years)


@pytest.fixture
def house():
    """$1M house, no loan: $11,466 after-tax income when kept."""
    return Property.existing("house", "House", 1_000_000, 0)


class TestIncomePerProperty:
    """Tests for the income one debt-free property adds."""

    def test_default_assumptions(self, assumptions):
        """Yield net of vacancy, less holding costs, after tax."""
        # 1M x 4.5% x 96% x 63% - 1M x 2.5% x 63%
        assert calculate_income_per_property(assumptions) == pytest.approx(27_216 - 15_750)

    def test_non_positive_income_rejected(self):
        """Holding costs above net rent make the options meaningless."""
        with pytest.raises(InvalidAssumptionError) as excinfo:
            calculate_income_per_property(Assumptions(holding_costs_rate=0.05))
        assert excinfo.value.field == "income_per_property"


class TestGapOptions:
    """Tests for the four independent ways to close the gap."""

    def test_shortfall(self, house):
        """Shortfall is the goal less achieved after-tax income."""
        gap = _gap([house])

        assert gap.income_shortfall == pytest.approx(120_000 - 11_466)
        assert gap.monthly_shortfall == pytest.approx((120_000 - 11_466) / 12)

    def test_additional_properties(self, house):
        """Shortfall over per-property income, rounded up."""
        gap = _gap([house])

        # 108,534 / 11,466 = 9.47
        assert gap.additional_properties.value == 10
        assert gap.additional_properties.description == "Buy 10 more $1,000,000 properties"

    def test_additional_cash(self, house):
        """One deposit per additional property."""
        gap = _gap([house])

        assert gap.additional_cash.value == pytest.approx(10 * 295_000)

    def test_additional_time(self, house):
        """Deposits funded by a year of growth on the final portfolio."""
        gap = _gap([house])

        # 10 x 295,000 / (1,000,000 x 4%) = 73.75
        assert gap.additional_time.value == 74
        assert gap.new_total_years == 74

    def test_no_growth_means_no_time_option(self, house):
        """With zero appreciation extra time cannot help."""
        gap = _gap([house], assumptions=Assumptions(appreciation_rate=0.0))

        assert gap.additional_time.value is None
        assert gap.additional_time.description is None
        assert gap.new_total_years == 0

    def test_lower_goal_is_achieved_income(self, house):
        """Settling for the achieved income closes the gap."""
        gap = _gap([house])

        assert gap.lower_goal.value == pytest.approx(11_466)

    def test_actual_outcome(self, house):
        """What the current strategy delivers."""
        outcome = _gap([house]).actual_outcome

        assert outcome.properties_kept == 1
        assert outcome.percent_of_goal == 10
        assert outcome.portfolio_value == pytest.approx(1_000_000)


class TestNotComputed:
    """Tests for cases with no gap to analyse."""

    def test_goal_achieved(self, house):
        """No gap when the goal is met."""
        assert _gap([house], annual_goal=10_000) is None

    def test_no_scenario(self, assumptions):
        """No gap without a scenario."""
        projection = generate_projection([], 0, assumptions, 10)
        assert calculate_gap_analysis(projection, None, assumptions, 120_000, 10) is None

    def test_unprofitable_properties_raise(self, house):
        """A gap that more properties can never close is an error."""
        with pytest.raises(InvalidAssumptionError):
            _gap([house], assumptions=Assumptions(holding_costs_rate=0.05))
