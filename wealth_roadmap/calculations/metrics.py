"""Portfolio metrics, goal progress, chart series and scenario comparison."""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

import pandas as pd

from ..models.property import Property
from .debt import calculate_equity, calculate_lvr
from .projection import ProjectionResult
from .property_state import calculate_annual_rent
from .sale_optimizer import SaleScenario
from .taxes import calculate_gross_income_needed

if TYPE_CHECKING:
    from ..roadmap import RoadmapResult


@dataclass(frozen=True)
class CurrentPortfolio:
    """Totals for the starting holdings, before any projection."""

    total_value: float
    total_equity: float
    total_debt: float
    total_rent: float
    property_count: int

    @property
    def lvr(self) -> float:
        """Overall loan-to-value ratio across all holdings."""
        return calculate_lvr(self.total_debt, self.total_value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalValue": self.total_value,
            "totalEquity": self.total_equity,
            "totalDebt": self.total_debt,
            "totalRent": self.total_rent,
            "propertyCount": self.property_count,
            "lvr": self.lvr,
        }


def calculate_portfolio_totals(properties: Sequence[Property], rental_yield: float) -> CurrentPortfolio:
    """Sum value, equity, debt and rent over the starting holdings.

    Rent is the explicit rent where one was entered, otherwise the yield on
    current value.
    """
    return CurrentPortfolio(
        total_value=sum(p.current_value for p in properties),
        total_equity=sum(calculate_equity(p.current_value, p.loan_amount) for p in properties),
        total_debt=sum(p.loan_amount for p in properties),
        total_rent=sum(
            p.annual_rent or calculate_annual_rent(p.current_value, rental_yield) for p in properties
        ),
        property_count=len(properties),
    )


def calculate_properties_needed_for_goal(
    annual_income_goal: float,
    property_price: float,
    rental_yield: float,
    tax_bracket: float,
) -> int:
    """Debt-free properties needed to earn the goal after tax.

    Uses gross yield only; vacancy and holding costs are ignored, so this is
    a lower bound.

    Args:
        annual_income_goal: After-tax annual income target.
        property_price: Value of each property.
        rental_yield: Gross rental yield.
        tax_bracket: Marginal tax rate.

    Returns:
        Properties needed (0 when the price or yield earns nothing).
    """
    income_per_property = property_price * rental_yield
    if income_per_property <= 0 or tax_bracket >= 1:
        return 0
    gross_needed = calculate_gross_income_needed(annual_income_goal, tax_bracket)
    return math.ceil(gross_needed / income_per_property)


@dataclass(frozen=True)
class GoalProgress:
    """How far the projected income goes towards the goal."""

    target_annual_income: float
    target_monthly_income: float
    projected_annual_income: float
    projected_monthly_income: float
    percent_achieved: float  # Capped at 100
    goal_achieved: bool
    properties_needed: int
    properties_projected: int  # Debt-free at the horizon

    @property
    def monthly_shortfall(self) -> float:
        return max(0.0, self.target_monthly_income - self.projected_monthly_income)

    @property
    def annual_shortfall(self) -> float:
        return max(0.0, self.target_annual_income - self.projected_annual_income)

    @property
    def monthly_surplus(self) -> float:
        return max(0.0, self.projected_monthly_income - self.target_monthly_income)

    @property
    def annual_surplus(self) -> float:
        return max(0.0, self.projected_annual_income - self.target_annual_income)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "targetAnnualIncome": self.target_annual_income,
            "targetMonthlyIncome": self.target_monthly_income,
            "projectedAnnualIncome": self.projected_annual_income,
            "projectedMonthlyIncome": self.projected_monthly_income,
            "percentAchieved": self.percent_achieved,
            "goalAchieved": self.goal_achieved,
            "monthlyShortfall": self.monthly_shortfall,
            "annualShortfall": self.annual_shortfall,
            "monthlySurplus": self.monthly_surplus,
            "annualSurplus": self.annual_surplus,
            "propertiesNeeded": self.properties_needed,
            "propertiesProjected": self.properties_projected,
        }


def calculate_goal_progress(
    sale_scenario: Optional[SaleScenario],
    annual_income_goal: float,
    properties_needed: int,
) -> GoalProgress:
    """Goal progress from the sale scenario (zero income when there is none)."""
    projected_annual = sale_scenario.after_tax_income if sale_scenario else 0.0
    if annual_income_goal > 0:
        percent = min(100.0, max(0.0, projected_annual) / annual_income_goal * 100)
    else:
        percent = 100.0

    return GoalProgress(
        target_annual_income=annual_income_goal,
        target_monthly_income=annual_income_goal / 12,
        projected_annual_income=projected_annual,
        projected_monthly_income=projected_annual / 12,
        percent_achieved=percent,
        goal_achieved=sale_scenario.goal_achieved if sale_scenario else False,
        properties_needed=properties_needed,
        properties_projected=sale_scenario.debt_free_count if sale_scenario else 0,
    )


# === Chart series ===

def timeline_frame(projection: ProjectionResult) -> pd.DataFrame:
    """Portfolio value, equity and debt by year."""
    return pd.DataFrame(
        [
            {
                "year": s.year,
                "portfolio_value": s.totals.total_value,
                "equity": s.totals.total_equity,
                "debt": s.totals.total_debt,
                "property_count": s.totals.property_count,
                "cash_flow": s.totals.net_cash_flow,
            }
            for s in projection
        ],
        columns=["year", "portfolio_value", "equity", "debt", "property_count", "cash_flow"],
    )


def cash_flow_frame(projection: ProjectionResult) -> pd.DataFrame:
    """Rental income, interest and net cash flow by year."""
    return pd.DataFrame(
        [
            {
                "year": s.year,
                "rental_income": s.totals.total_rent,
                "interest_payments": sum(p.annual_interest for p in s.properties),
                "net_cash_flow": s.totals.net_cash_flow,
            }
            for s in projection
        ],
        columns=["year", "rental_income", "interest_payments", "net_cash_flow"],
    )


# === Scenario comparison ===

@dataclass(frozen=True)
class ScenarioSummary:
    """Headline figures of one roadmap for side-by-side comparison."""

    name: str
    annual_income: float
    debt_free_properties: int
    properties_acquired: int
    portfolio_value: float

    @classmethod
    def from_roadmap(cls, name: str, result: "RoadmapResult") -> "ScenarioSummary":
        scenario = result.sale_scenario
        final = result.projection.final
        return cls(
            name=name,
            annual_income=scenario.after_tax_income if scenario else 0.0,
            debt_free_properties=scenario.debt_free_count if scenario else 0,
            properties_acquired=result.projection.properties_acquired,
            portfolio_value=final.totals.total_value if final else 0.0,
        )


@dataclass(frozen=True)
class ScenarioComparison:
    """Comparison of two roadmaps. Differences are ``b - a``."""

    a: ScenarioSummary
    b: ScenarioSummary

    @property
    def income_difference(self) -> float:
        return self.b.annual_income - self.a.annual_income

    @property
    def debt_free_difference(self) -> int:
        return self.b.debt_free_properties - self.a.debt_free_properties

    @property
    def properties_difference(self) -> int:
        return self.b.properties_acquired - self.a.properties_acquired

    @property
    def portfolio_value_difference(self) -> float:
        return self.b.portfolio_value - self.a.portfolio_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "names": [self.a.name, self.b.name],
            "incomeDifference": self.income_difference,
            "debtFreeDifference": self.debt_free_difference,
            "propertiesDifference": self.properties_difference,
            "portfolioValueDifference": self.portfolio_value_difference,
        }


def compare_roadmaps(
    a: "RoadmapResult",
    b: "RoadmapResult",
    name_a: str = "Scenario A",
    name_b: str = "Scenario B",
) -> ScenarioComparison:
    """Compare two computed roadmaps.

    Args:
        a: First roadmap (the reference).
        b: Second roadmap.
        name_a: Label for the first roadmap.
        name_b: Label for the second roadmap.

    Returns:
        ScenarioComparison with b - a differences.
    """
    return ScenarioComparison(
        a=ScenarioSummary.from_roadmap(name_a, a),
        b=ScenarioSummary.from_roadmap(name_b, b),
    )


def format_comparison_table(comparison: ScenarioComparison) -> str:
    """Format comparison as a text table.

    Args:
        comparison: Scenario comparison result.

    Returns:
        Formatted string table.
    """
    a = comparison.a
    b = comparison.b

    lines = [
        "=" * 60,
        "SCENARIO COMPARISON",
        "=" * 60,
        "",
        f"{'Metric':<25} {a.name[:15]:>15} {b.name[:15]:>15}",
        "-" * 60,
        f"{'After-Tax Income':<25} ${a.annual_income:>13,.0f} ${b.annual_income:>13,.0f}",
        f"{'Debt-Free Properties':<25} {a.debt_free_properties:>15d} {b.debt_free_properties:>15d}",
        f"{'Properties Acquired':<25} {a.properties_acquired:>15d} {b.properties_acquired:>15d}",
        f"{'Portfolio Value':<25} ${a.portfolio_value:>13,.0f} ${b.portfolio_value:>13,.0f}",
        "",
        "-" * 60,
        f"{'Income Difference':<25} ${comparison.income_difference:>+14,.0f}",
        f"{'Debt-Free Difference':<25} {comparison.debt_free_difference:>+15d}",
        f"{'Properties Difference':<25} {comparison.properties_difference:>+15d}",
        f"{'Value Difference':<25} ${comparison.portfolio_value_difference:>+14,.0f}",
        "=" * 60,
    ]

    return "\n".join(lines)
