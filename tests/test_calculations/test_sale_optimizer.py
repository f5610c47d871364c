"""Tests for the strategic sale scenario."""

import pytest

from wealth_roadmap.calculations.projection import ProjectionResult, generate_projection
from wealth_roadmap.calculations.sale_optimizer import calculate_strategic_sale_scenario
from wealth_roadmap.models import Assumptions, Property


def _scenario(properties, monthly_goal=10_000, assumptions=None, target_years=0, cash=0):
    assumptions = assumptions or Assumptions()
    projection = generate_projection(properties, cash, assumptions, target_years)
    return calculate_strategic_sale_scenario(projection, monthly_goal, assumptions, target_years)


class TestKeepSplit:
    """Tests for choosing which properties to keep."""

    def test_sells_smaller_to_clear_debt(self):
        """Selling the geared unit leaves the owned house debt-free."""
        house = Property.existing("house", "House", 1_000_000, 0)
        unit = Property.existing("unit", "Unit", 500_000, 400_000)
        scenario = _scenario([unit, house])

        assert scenario.debt_free_count == 1
        assert scenario.debt_free_properties[0].state.property.id == "house"
        assert scenario.properties_sold == 1
        assert scenario.properties_to_sell[0].state.property.id == "unit"
        assert scenario.total_properties_at_peak == 2

    def test_sale_proceeds(self):
        """Net proceeds are sale price less loan, CGT and selling costs."""
        house = Property.existing("house", "House", 1_000_000, 0)
        unit = Property.existing("unit", "Unit", 500_000, 400_000)
        scenario = _scenario([unit, house])

        assert scenario.gross_sale_proceeds == pytest.approx(500_000)
        assert scenario.total_cgt == 0  # No gain at year 0
        assert scenario.total_selling_costs == pytest.approx(12_500)
        assert scenario.net_sale_proceeds == pytest.approx(87_500)
        assert scenario.debt_cleared == 0
        assert scenario.surplus_cash == pytest.approx(87_500)

    def test_keeps_all_when_debt_free(self):
        """Unencumbered properties are all kept."""
        props = [Property.existing(f"p{i}", f"P{i}", 600_000, 0) for i in range(3)]
        scenario = _scenario(props)

        assert scenario.debt_free_count == 3
        assert scenario.properties_sold == 0

    def test_equal_values_keep_input_order(self):
        """Ties in value keep portfolio order."""
        first = Property.existing("first", "First", 700_000, 0)
        second = Property.existing("second", "Second", 700_000, 600_000)
        scenario = _scenario([first, second])

        assert [p.state.property.id for p in scenario.debt_free_properties] == ["first"]


class TestIncome:
    """Tests for retained income and the goal."""

    def test_kept_property_income(self):
        """Rent on current value, less vacancy and holding costs, after tax."""
        house = Property.existing("house", "House", 1_000_000, 0)
        scenario = _scenario([house])

        # 45,000 gross, 43,200 after vacancy, less 25,000 holding costs
        assert scenario.total_gross_rent == pytest.approx(45_000)
        assert scenario.total_net_rent == pytest.approx(18_200)
        assert scenario.after_tax_income == pytest.approx(18_200 * 0.63)
        assert scenario.monthly_income == pytest.approx(18_200 * 0.63 / 12)

    def test_goal_achieved(self):
        """Large unencumbered holdings meet a modest goal."""
        estate = Property.existing("estate", "Estate", 10_000_000, 0)
        scenario = _scenario([estate], monthly_goal=100_000 / 12)

        assert scenario.goal_achieved
        assert scenario.shortfall == 0
        assert scenario.surplus == pytest.approx(scenario.monthly_income - 100_000 / 12)

    def test_goal_not_achieved(self):
        """Shortfall is reported monthly."""
        house = Property.existing("house", "House", 1_000_000, 0)
        scenario = _scenario([house], monthly_goal=10_000)

        assert not scenario.goal_achieved
        assert scenario.shortfall == pytest.approx(10_000 - scenario.monthly_income)
        assert scenario.surplus == 0


class TestFallback:
    """Tests for portfolios where no split clears the debt."""

    def test_underwater_portfolio_sells_everything(self):
        """If even selling everything cannot clear debt, all are sold."""
        underwater = Property.existing("u", "Underwater", 500_000, 500_000)
        scenario = _scenario([underwater])

        assert scenario.is_fallback
        assert scenario.debt_free_count == 0
        assert scenario.properties_sold == 1
        assert scenario.debt_cleared == 0
        assert scenario.surplus_cash == 0
        assert scenario.after_tax_income == 0
        assert not scenario.goal_achieved


class TestInvariants:
    """Properties that hold for every scenario."""

    def test_proceeds_cover_debt_cleared(self, investor_inputs):
        """Whenever something is sold, net proceeds cover the debt cleared."""
        for years in (5, 10, 15, 20):
            scenario = _scenario(
                investor_inputs.properties,
                cash=investor_inputs.cash_allocated,
                target_years=years,
            )
            if scenario.properties_sold > 0 and not scenario.is_fallback:
                assert scenario.net_sale_proceeds >= scenario.debt_cleared

    def test_sold_and_kept_partition_portfolio(self, investor_inputs):
        """Every property at the horizon is either kept or sold."""
        scenario = _scenario(
            investor_inputs.properties, cash=investor_inputs.cash_allocated, target_years=15
        )
        assert scenario.debt_free_count + scenario.properties_sold == scenario.total_properties_at_peak

    def test_cgt_uses_holding_period(self):
        """Properties held a year or more get the CGT discount."""
        house = Property.existing("house", "House", 1_000_000, 900_000)
        scenario = _scenario([house], target_years=5)

        sold = scenario.properties_to_sell[0]
        gain = sold.sale_price - 1_000_000
        assert sold.cgt == pytest.approx(gain * 0.5 * 0.37)

    def test_empty_projection_has_no_scenario(self):
        """Nothing projected, nothing to sell."""
        assert calculate_strategic_sale_scenario(ProjectionResult(), 10_000, Assumptions(), 15) is None
