"""Tests for portfolio metrics, goal progress, chart series and comparisons."""

import pytest

from wealth_roadmap.calculations.metrics import (
    calculate_goal_progress,
    calculate_portfolio_totals,
    calculate_properties_needed_for_goal,
    cash_flow_frame,
    compare_roadmaps,
    format_comparison_table,
    timeline_frame,
)
from wealth_roadmap.calculations.projection import generate_projection
from wealth_roadmap.calculations.sale_optimizer import calculate_strategic_sale_scenario
from wealth_roadmap.models import Assumptions, Property
from wealth_roadmap.roadmap import calculate_roadmap


class TestPortfolioTotals:
    """Tests for the starting portfolio."""

    def test_totals(self):
        """Sums value, equity, debt and rent across holdings."""
        holdings = [
            Property.existing("a", "Unit", 800_000, 640_000),
            Property.existing("b", "House", 500_000, 0, annual_rent=30_000),
        ]
        totals = calculate_portfolio_totals(holdings, rental_yield=0.045)

        assert totals.total_value == pytest.approx(1_300_000)
        assert totals.total_debt == pytest.approx(640_000)
        assert totals.total_equity == pytest.approx(660_000)
        assert totals.total_rent == pytest.approx(36_000 + 30_000)
        assert totals.property_count == 2
        assert totals.lvr == pytest.approx(640_000 / 1_300_000)

    def test_empty_portfolio(self):
        """No holdings: zero totals and zero LVR."""
        totals = calculate_portfolio_totals([], rental_yield=0.045)

        assert totals.property_count == 0
        assert totals.lvr == 0


class TestPropertiesNeeded:
    """Tests for the debt-free properties needed for a goal."""

    def test_default_goal(self):
        """$120k after 37% tax is $190,476 gross, about 4.2 properties."""
        assert calculate_properties_needed_for_goal(120_000, 1_000_000, 0.045, 0.37) == 5

    def test_no_income_per_property(self):
        """Zero yield gives zero rather than dividing by zero."""
        assert calculate_properties_needed_for_goal(120_000, 1_000_000, 0.0, 0.37) == 0

    def test_full_tax_rate(self):
        """A 100% bracket can never reach the goal; reported as zero."""
        assert calculate_properties_needed_for_goal(120_000, 1_000_000, 0.045, 1.0) == 0


class TestGoalProgress:
    """Tests for progress towards the income goal."""

    def test_no_scenario(self):
        """No scenario means no projected income."""
        progress = calculate_goal_progress(None, 120_000, properties_needed=5)

        assert progress.projected_annual_income == 0
        assert progress.percent_achieved == 0
        assert not progress.goal_achieved
        assert progress.monthly_shortfall == pytest.approx(10_000)
        assert progress.annual_surplus == 0

    def test_percent_capped_at_100(self):
        """Exceeding the goal still reports 100%."""
        assumptions = Assumptions()
        estate = Property.existing("estate", "Estate", 10_000_000, 0)
        projection = generate_projection([estate], 0, assumptions, 0)
        scenario = calculate_strategic_sale_scenario(projection, 50_000 / 12, assumptions, 0)

        progress = calculate_goal_progress(scenario, 50_000, properties_needed=1)

        assert progress.goal_achieved
        assert progress.percent_achieved == 100
        assert progress.annual_surplus == pytest.approx(scenario.after_tax_income - 50_000)
        assert progress.properties_projected == 1


class TestChartSeries:
    """Tests for the DataFrames behind the charts."""

    def test_timeline_frame(self, worked_example):
        """One row per year with portfolio value, equity and debt."""
        projection = generate_projection(
            worked_example.properties, 0, worked_example.assumptions, worked_example.target_years
        )
        frame = timeline_frame(projection)

        assert len(frame) == 11
        assert list(frame["year"]) == list(range(11))
        assert frame.loc[0, "debt"] == pytest.approx(640_000)
        assert frame.loc[0, "equity"] == pytest.approx(160_000)

    def test_cash_flow_frame(self, worked_example):
        """Rental income, interest and net cash flow by year."""
        projection = generate_projection(
            worked_example.properties, 0, worked_example.assumptions, worked_example.target_years
        )
        frame = cash_flow_frame(projection)

        assert frame.loc[0, "rental_income"] == pytest.approx(34_560)
        assert frame.loc[0, "interest_payments"] == pytest.approx(41_600)
        assert frame.loc[0, "net_cash_flow"] == pytest.approx(-27_040)

    def test_empty_projection_frames(self, assumptions):
        """Empty projections give empty frames with the expected columns."""
        projection = generate_projection([], 0, assumptions, 10)

        assert timeline_frame(projection).empty
        assert "net_cash_flow" in cash_flow_frame(projection).columns


class TestScenarioComparison:
    """Tests for comparing two roadmaps."""

    def test_differences(self, worked_example):
        """Differences are second minus first."""
        base = calculate_roadmap(worked_example, include_levers=False)
        richer = calculate_roadmap(
            worked_example.with_changes(cash_allocated=300_000), include_levers=False
        )
        comparison = compare_roadmaps(base, richer, "Base", "More Cash")

        assert comparison.properties_difference == (
            richer.projection.properties_acquired - base.projection.properties_acquired
        )
        assert comparison.income_difference == pytest.approx(
            richer.sale_scenario.after_tax_income - base.sale_scenario.after_tax_income
        )

    def test_table(self, worked_example):
        """The text table names both scenarios."""
        base = calculate_roadmap(worked_example, include_levers=False)
        table = format_comparison_table(compare_roadmaps(base, base, "Base", "Same"))

        assert "SCENARIO COMPARISON" in table
        assert "Base" in table
        assert "Same" in table
