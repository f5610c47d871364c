"""Tests for the insight rule table and assumption warnings."""

import pytest

from wealth_roadmap.calculations.insights import (
    INSIGHT_RULES,
    format_currency,
    generate_insights,
    validate_assumptions,
)
from wealth_roadmap.calculations.projection import ProjectionResult, generate_projection
from wealth_roadmap.calculations.sale_optimizer import calculate_strategic_sale_scenario
from wealth_roadmap.models import Assumptions, Property


def _insights(properties, cash=0, target_years=10, annual_goal=120_000, assumptions=None):
    assumptions = assumptions or Assumptions()
    projection = generate_projection(properties, cash, assumptions, target_years)
    scenario = calculate_strategic_sale_scenario(projection, annual_goal / 12, assumptions, target_years)
    return generate_insights(projection, scenario, assumptions, cash, annual_goal)


def _titles(insights):
    return [insight.title for insight in insights]


@pytest.fixture
def unit():
    return Property.existing("p1", "Unit", 800_000, 640_000)


class TestFormatCurrency:
    """Tests for whole-dollar formatting."""

    def test_thousands_separators(self):
        assert format_currency(1_250_000) == "$1,250,000"

    def test_negative(self):
        assert format_currency(-3_400) == "-$3,400"

    def test_rounds_to_dollars(self):
        assert format_currency(999.6) == "$1,000"


class TestFundingRules:
    """Tests for the funding group (first match wins)."""

    def test_ready_to_purchase(self):
        """Cash covering a deposit is the top action."""
        insights = _insights([], cash=300_000)

        assert insights[0].title == "Ready to Purchase"
        assert insights[0].type == "action"
        assert "Refinance to Purchase" not in _titles(insights)

    def test_refinance_to_purchase(self):
        """Equity plus cash covering a deposit suggests refinancing."""
        owned = Property.existing("p1", "Owned", 1_000_000, 0)
        insights = _insights([owned])

        assert insights[0].title == "Refinance to Purchase"
        assert "$800,000" in insights[0].description

    def test_no_purchases_projected(self, unit):
        """No purchase over the horizon is a warning."""
        insights = _insights([unit], target_years=1)

        assert insights[0].title == "No Purchases Projected"
        assert insights[0].type == "warning"


class TestRefinanceRule:
    """Tests for the refinance timing group."""

    def test_refinance_window_when_no_purchase(self, unit):
        """The next window is flagged when nothing will be bought."""
        insights = _insights([unit], target_years=2)

        assert "Refinance Opportunity: Year 2" in _titles(insights)

    def test_no_refinance_window_without_later_years(self, unit):
        """A one-year horizon has no refinance window."""
        titles = _titles(_insights([unit], target_years=1))

        assert not any(t.startswith("Refinance Opportunity") for t in titles)


class TestCashFlowRules:
    """Tests for the cash flow group."""

    def test_negative_cash_flow(self, unit):
        """A geared unit costs money to hold."""
        insights = _insights([unit])
        warning = next(i for i in insights if i.title == "Negative Cash Flow")

        # 34,560 rent - 41,600 interest - 20,000 holding = -27,040 a year
        assert "$2,253/month" in warning.description

    def test_positive_cash_flow(self):
        """An unencumbered property with strong rent is cash positive."""
        owned = Property.existing("p1", "Owned", 1_000_000, 0)
        titles = _titles(_insights([owned]))

        assert "Positive Cash Flow" in titles
        assert "Negative Cash Flow" not in titles


class TestGoalRules:
    """Tests for the goal group."""

    def test_goal_achievable(self):
        """Met goals are reported as success."""
        estate = Property.existing("estate", "Estate", 10_000_000, 0)
        insights = _insights([estate], target_years=0, annual_goal=100_000)

        success = [i for i in insights if i.type == "success"]
        assert len(success) == 1
        assert success[0].title == "Goal Achievable"

    def test_percent_of_goal(self):
        """Unmet goals show the share achieved."""
        owned = Property.existing("p1", "Owned", 1_000_000, 0)
        insights = _insights([owned], target_years=0)

        assert "10% of Goal" in _titles(insights)


class TestRuleTable:
    """Tests for the rule table mechanics."""

    def test_at_most_one_insight_per_group(self, investor_inputs):
        """Each group contributes at most one insight."""
        insights = _insights(
            investor_inputs.properties, cash=investor_inputs.cash_allocated, target_years=15
        )
        groups = {rule.group for rule in INSIGHT_RULES}

        assert len(insights) <= len(groups)

    def test_empty_projection(self, assumptions):
        """Nothing projected, nothing to say."""
        assert generate_insights(ProjectionResult(), None, assumptions, 0, 120_000) == []

    def test_custom_rule_table(self):
        """A caller-supplied table replaces the defaults."""
        assumptions = Assumptions()
        projection = generate_projection([], 300_000, assumptions, 0)
        rules = tuple(r for r in INSIGHT_RULES if r.group == "cash_flow")

        insights = generate_insights(projection, None, assumptions, 300_000, 120_000, rules=rules)
        assert all(i.title.endswith("Cash Flow") for i in insights)


class TestAssumptionWarnings:
    """Tests for optimistic-assumption warnings."""

    def test_defaults_are_clean(self, assumptions):
        assert validate_assumptions(assumptions) == []

    def test_high_appreciation(self):
        """Above 6% warns; above 8% is also an error."""
        assert [w.level for w in validate_assumptions(Assumptions(appreciation_rate=0.07))] == ["warning"]
        assert [w.level for w in validate_assumptions(Assumptions(appreciation_rate=0.09))] == [
            "warning",
            "error",
        ]

    def test_high_yield(self):
        warnings = validate_assumptions(Assumptions(rental_yield=0.07))

        assert len(warnings) == 1
        assert "7.0% rental yield" in warnings[0].message

    def test_low_interest_rate(self):
        warnings = validate_assumptions(Assumptions(interest_rate=0.045))

        assert len(warnings) == 1
        assert warnings[0].level == "warning"
