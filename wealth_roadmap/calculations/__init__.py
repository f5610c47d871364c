"""Calculation modules for the property wealth roadmap."""

from .debt import (
    AnnualLoanPayment,
    calculate_annual_pi_payment,
    calculate_deposit_required,
    calculate_equity,
    calculate_extractable_equity,
    calculate_lvr,
)
from .taxes import calculate_cgt, calculate_after_tax_income
from .property_state import PropertyYearState, project_property_year, calculate_future_value

# Projection engine
from .projection import (
    PortfolioTotals,
    YearEvents,
    YearSnapshot,
    ProjectionResult,
    draw_refinance,
    generate_projection,
)

# Terminal disposal strategy and goal gap
from .sale_optimizer import SaleScenario, SoldProperty, DebtFreeProperty, calculate_strategic_sale_scenario
from .gap_analysis import GapAnalysis, calculate_gap_analysis

# Levers and sensitivity sweeps
from .levers import (
    ScenarioOutcome,
    LeverResult,
    LeversAnalysis,
    SensitivitySweep,
    evaluate_scenario,
    calculate_levers_analysis,
    run_sensitivity_sweep,
)

from .insights import Insight, AssumptionWarning, generate_insights, validate_assumptions
from .metrics import (
    CurrentPortfolio,
    GoalProgress,
    ScenarioComparison,
    calculate_portfolio_totals,
    calculate_properties_needed_for_goal,
    calculate_goal_progress,
    timeline_frame,
    cash_flow_frame,
    compare_roadmaps,
    format_comparison_table,
)

__all__ = [
    "AnnualLoanPayment",
    "calculate_annual_pi_payment",
    "calculate_deposit_required",
    "calculate_equity",
    "calculate_extractable_equity",
    "calculate_lvr",
    "calculate_cgt",
    "calculate_after_tax_income",
    "PropertyYearState",
    "project_property_year",
    "calculate_future_value",
    "PortfolioTotals",
    "YearEvents",
    "YearSnapshot",
    "ProjectionResult",
    "draw_refinance",
    "generate_projection",
    "SaleScenario",
    "SoldProperty",
    "DebtFreeProperty",
    "calculate_strategic_sale_scenario",
    "GapAnalysis",
    "calculate_gap_analysis",
    "ScenarioOutcome",
    "LeverResult",
    "LeversAnalysis",
    "SensitivitySweep",
    "evaluate_scenario",
    "calculate_levers_analysis",
    "run_sensitivity_sweep",
    "Insight",
    "AssumptionWarning",
    "generate_insights",
    "validate_assumptions",
    "CurrentPortfolio",
    "GoalProgress",
    "ScenarioComparison",
    "calculate_portfolio_totals",
    "calculate_properties_needed_for_goal",
    "calculate_goal_progress",
    "timeline_frame",
    "cash_flow_frame",
    "compare_roadmaps",
    "format_comparison_table",
]
