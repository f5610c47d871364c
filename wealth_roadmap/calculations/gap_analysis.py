"""Gap analysis: what it would take to reach an unmet income goal.

Four independent options are reported side by side. None is derived from
another, and none re-runs the projection:

- more properties: debt-free properties needed to cover the shortfall
- more cash: the deposits for those properties
- more time: years of equity growth (at the final portfolio's appreciation)
  needed to fund those deposits
- a lower goal: the income actually achieved
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.assumptions import Assumptions, InvalidAssumptionError
from .debt import calculate_deposit_required
from .projection import ProjectionResult
from .sale_optimizer import SaleScenario


@dataclass(frozen=True)
class GapOption:
    """One way of closing the gap. ``value`` is None when not computable."""

    value: Optional[float]
    description: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "description": self.description}


@dataclass(frozen=True)
class ActualOutcome:
    """What the current strategy achieves."""

    properties_kept: int
    annual_income: float
    monthly_income: float
    percent_of_goal: int
    portfolio_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertiesKept": self.properties_kept,
            "annualIncome": self.annual_income,
            "monthlyIncome": self.monthly_income,
            "percentOfGoal": self.percent_of_goal,
            "portfolioValue": self.portfolio_value,
        }


@dataclass(frozen=True)
class GapAnalysis:
    """Shortfall against the income goal and the options for closing it."""

    income_shortfall: float  # Annual
    monthly_shortfall: float
    income_per_property: float
    deposit_per_property: float

    additional_properties: GapOption
    additional_cash: GapOption
    additional_time: GapOption
    lower_goal: GapOption
    new_total_years: int

    actual_outcome: ActualOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "incomeShortfall": self.income_shortfall,
            "monthlyShortfall": self.monthly_shortfall,
            "options": {
                "additionalProperties": self.additional_properties.to_dict(),
                "additionalCash": self.additional_cash.to_dict(),
                "additionalTime": {
                    **self.additional_time.to_dict(),
                    "newTotal": self.new_total_years,
                },
                "lowerGoal": self.lower_goal.to_dict(),
            },
            "actualOutcome": self.actual_outcome.to_dict(),
        }


def calculate_income_per_property(assumptions: Assumptions) -> float:
    """After-tax income from one debt-free target-price property.

    income = price x yield x (1 - vacancy) x (1 - tax)
             - price x holding_costs_rate x (1 - tax)

    Raises:
        InvalidAssumptionError: If the result is not positive.
    """
    price = assumptions.target_property_price
    after_tax = 1 - assumptions.tax_bracket
    income = (
        price * assumptions.rental_yield * (1 - assumptions.vacancy_rate) * after_tax
        - price * assumptions.holding_costs_rate * after_tax
    )
    if income <= 0:
        raise InvalidAssumptionError("income_per_property", income)
    return income


def _plural(count: int) -> str:
    return "property" if count == 1 else "properties"


def calculate_gap_analysis(
    projection: ProjectionResult,
    sale_scenario: Optional[SaleScenario],
    assumptions: Assumptions,
    annual_income_goal: float,
    target_years: int,
) -> Optional[GapAnalysis]:
    """Quantify the shortfall against the income goal.

    Args:
        projection: Completed projection.
        sale_scenario: Sale scenario for the projection.
        assumptions: Assumptions used for the projection.
        annual_income_goal: After-tax annual income target.
        target_years: Horizon in years.

    Returns:
        GapAnalysis, or None when the goal is already met or there is no scenario.

    Raises:
        InvalidAssumptionError: If a debt-free property would earn nothing.
    """
    if sale_scenario is None or sale_scenario.goal_achieved:
        return None

    assumptions.require_computable()
    price = assumptions.target_property_price

    achieved = sale_scenario.after_tax_income
    income_shortfall = annual_income_goal - achieved

    income_per_property = calculate_income_per_property(assumptions)
    properties_needed = math.ceil(income_shortfall / income_per_property)

    deposit = calculate_deposit_required(
        price,
        assumptions.max_lvr,
        assumptions.stamp_duty_rate,
        assumptions.purchase_costs_rate,
        assumptions.buyers_agent_fee,
    )
    cash_needed = properties_needed * deposit

    # Years of equity growth at today's final portfolio value; an estimate,
    # not a re-run of the projection
    years_needed = None
    final = projection.final
    if final is not None:
        annual_equity_growth = final.totals.total_value * assumptions.appreciation_rate
        if annual_equity_growth > 0:
            years_needed = math.ceil(max(properties_needed, 1) * deposit / annual_equity_growth)

    percent_of_goal = (
        round(max(0.0, achieved) / annual_income_goal * 100) if annual_income_goal > 0 else 0
    )

    return GapAnalysis(
        income_shortfall=income_shortfall,
        monthly_shortfall=income_shortfall / 12,
        income_per_property=income_per_property,
        deposit_per_property=deposit,
        additional_properties=GapOption(
            value=properties_needed,
            description=(
                f"Buy {properties_needed} more ${price:,.0f} {_plural(properties_needed)}"
                if properties_needed > 0 else None
            ),
        ),
        additional_cash=GapOption(
            value=cash_needed,
            description=f"Add ${cash_needed:,.0f} more starting cash" if cash_needed > 0 else None,
        ),
        additional_time=GapOption(
            value=years_needed,
            description=(
                f"Extend timeline by {years_needed} years "
                f"(to {target_years + years_needed} years total)"
                if years_needed else None
            ),
        ),
        lower_goal=GapOption(
            value=achieved,
            description=(
                f"Adjust goal to ${achieved:,.0f}/year (what's achievable)" if achieved > 0 else None
            ),
        ),
        new_total_years=target_years + (years_needed or 0),
        actual_outcome=ActualOutcome(
            properties_kept=sale_scenario.debt_free_count,
            annual_income=achieved,
            monthly_income=sale_scenario.monthly_income,
            percent_of_goal=percent_of_goal,
            portfolio_value=sale_scenario.kept_portfolio_value,
        ),
    )
