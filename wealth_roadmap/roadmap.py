"""Single entry point that computes a complete wealth roadmap.

``calculate_roadmap`` wires the engine together:

    inputs -> projection -> sale scenario -> goal progress, gap analysis,
    insights, lever analysis

Typical usage:
    from wealth_roadmap import RoadmapInputs, calculate_roadmap

    result = calculate_roadmap(RoadmapInputs.from_dict(record))
    print(result.summary())
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .calculations.gap_analysis import GapAnalysis, calculate_gap_analysis, calculate_income_per_property
from .calculations.insights import AssumptionWarning, Insight, generate_insights, validate_assumptions
from .calculations.levers import LeversAnalysis, calculate_levers_analysis
from .calculations.metrics import (
    CurrentPortfolio,
    GoalProgress,
    calculate_goal_progress,
    calculate_portfolio_totals,
    calculate_properties_needed_for_goal,
)
from .calculations.projection import ProjectionResult, generate_projection
from .calculations.sale_optimizer import SaleScenario, calculate_strategic_sale_scenario
from .models.lookups import DrawOrder, MAX_PURCHASES_PER_WINDOW
from .models.property import RoadmapInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoadmapResult:
    """Everything computed for one set of inputs."""

    inputs: RoadmapInputs
    current_portfolio: CurrentPortfolio
    properties_needed: int
    projection: ProjectionResult
    sale_scenario: Optional[SaleScenario]
    goal_progress: GoalProgress
    warnings: List[AssumptionWarning] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    gap_analysis: Optional[GapAnalysis] = None
    levers_analysis: Optional[LeversAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": self.inputs.to_dict(),
            "currentTotals": self.current_portfolio.to_dict(),
            "currentLVR": self.current_portfolio.lvr,
            "propertiesNeeded": self.properties_needed,
            "projection": self.projection.to_dict(),
            "saleScenario": self.sale_scenario.to_dict() if self.sale_scenario else None,
            "goalProgress": self.goal_progress.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "insights": [i.to_dict() for i in self.insights],
            "gapAnalysis": self.gap_analysis.to_dict() if self.gap_analysis else None,
            "leversAnalysis": self.levers_analysis.to_dict() if self.levers_analysis else None,
        }

    def summary(self) -> str:
        """Generate a text summary of the roadmap."""
        progress = self.goal_progress
        lines = [
            "=" * 60,
            "PROPERTY WEALTH ROADMAP",
            "=" * 60,
            "",
            "CURRENT PORTFOLIO:",
            f"  Properties:       {self.current_portfolio.property_count}",
            f"  Value:            ${self.current_portfolio.total_value:,.0f}",
            f"  Debt:             ${self.current_portfolio.total_debt:,.0f}",
            f"  LVR:              {self.current_portfolio.lvr:.1%}",
            f"  Cash allocated:   ${self.inputs.cash_allocated:,.0f}",
            "",
        ]

        final = self.projection.final
        if final is not None:
            lines.extend([
                f"YEAR {final.year} (PEAK):",
                f"  Properties:       {final.totals.property_count}",
                f"  Value:            ${final.totals.total_value:,.0f}",
                f"  Equity:           ${final.totals.total_equity:,.0f}",
                f"  Debt:             ${final.totals.total_debt:,.0f}",
                "",
            ])
            for snapshot in self.projection.purchase_years:
                lines.append(
                    f"  Year {snapshot.year:>2}: buy {snapshot.events.properties_purchased} "
                    f"(cash ${snapshot.events.cash_used:,.0f}, "
                    f"refinance ${snapshot.events.refinance_amount:,.0f})"
                )
            lines.append("")

        scenario = self.sale_scenario
        if scenario is not None:
            lines.extend([
                "SALE STRATEGY:",
                f"  Keep debt-free:   {scenario.debt_free_count} of {scenario.total_properties_at_peak}",
                f"  Sell:             {scenario.properties_sold}",
                f"  CGT:              ${scenario.total_cgt:,.0f}",
                f"  Debt cleared:     ${scenario.debt_cleared:,.0f}",
                f"  Surplus cash:     ${scenario.surplus_cash:,.0f}",
                "",
            ])

        lines.extend([
            "INCOME GOAL:",
            f"  Target:           ${progress.target_annual_income:,.0f}/year",
            f"  Projected:        ${progress.projected_annual_income:,.0f}/year",
            f"  Progress:         {progress.percent_achieved:.0f}%",
            f"  Achieved:         {'YES' if progress.goal_achieved else 'NO'}",
        ])

        if self.gap_analysis is not None:
            gap = self.gap_analysis
            lines.extend(["", "TO CLOSE THE GAP:"])
            for option in (gap.additional_properties, gap.additional_cash, gap.additional_time, gap.lower_goal):
                if option.description:
                    lines.append(f"  - {option.description}")

        if self.warnings:
            lines.extend(["", "WARNINGS:"])
            lines.extend(f"  [{w.level}] {w.message}" for w in self.warnings)

        lines.append("=" * 60)
        return "\n".join(lines)


def calculate_roadmap(
    inputs: RoadmapInputs,
    include_levers: bool = True,
    parallel_levers: bool = False,
    max_purchases: int = MAX_PURCHASES_PER_WINDOW,
    draw_order: DrawOrder = DrawOrder.LIST,
) -> RoadmapResult:
    """Compute the full roadmap for one set of inputs.

    Args:
        inputs: Complete input state.
        include_levers: Run the lever analysis (five extra projections).
        parallel_levers: Evaluate levers on a thread pool.
        max_purchases: Most acquisitions allowed in a single purchase window.
        draw_order: Order in which properties are refinanced to fund purchases.

    Returns:
        RoadmapResult.

    Raises:
        InvalidAssumptionError: If the assumptions make the projection undefined,
            or a debt-free target-price property would not earn positive income.
    """
    assumptions = inputs.assumptions
    assumptions.require_computable()
    # Checked before the projection so the outcome does not depend on the goal
    calculate_income_per_property(assumptions)

    assumption_warnings = validate_assumptions(assumptions)
    for warning in assumption_warnings:
        if warning.level == "error":
            warnings.warn(warning.message, UserWarning, stacklevel=2)

    projection = generate_projection(
        inputs.properties,
        inputs.cash_allocated,
        assumptions,
        inputs.target_years,
        max_purchases=max_purchases,
        draw_order=draw_order,
    )
    sale_scenario = calculate_strategic_sale_scenario(
        projection,
        inputs.monthly_income_goal,
        assumptions,
        inputs.target_years,
    )

    properties_needed = calculate_properties_needed_for_goal(
        inputs.annual_income_goal,
        assumptions.target_property_price,
        assumptions.rental_yield,
        assumptions.tax_bracket,
    )

    levers_analysis = None
    if include_levers:
        levers_analysis = calculate_levers_analysis(inputs, parallel=parallel_levers)

    logger.debug(
        "Roadmap: %d snapshots, goal %s",
        len(projection), "achieved" if sale_scenario and sale_scenario.goal_achieved else "not achieved",
    )

    return RoadmapResult(
        inputs=inputs,
        current_portfolio=calculate_portfolio_totals(inputs.properties, assumptions.rental_yield),
        properties_needed=properties_needed,
        projection=projection,
        sale_scenario=sale_scenario,
        goal_progress=calculate_goal_progress(sale_scenario, inputs.annual_income_goal, properties_needed),
        warnings=assumption_warnings,
        insights=generate_insights(
            projection,
            sale_scenario,
            assumptions,
            inputs.cash_allocated,
            inputs.annual_income_goal,
        ),
        gap_analysis=calculate_gap_analysis(
            projection,
            sale_scenario,
            assumptions,
            inputs.annual_income_goal,
            inputs.target_years,
        ),
        levers_analysis=levers_analysis,
    )
