"""Actionable insights and assumption sanity checks.

Insights come from an ordered rule table. Rules are grouped; within a
group the first rule whose predicate holds produces the insight and the
rest of the group is skipped. Groups are evaluated in order:

1. funding       what can be bought now, or when
2. refinance     next refinance window, when no purchase is projected
3. cash flow     year-0 portfolio cash flow
4. goal          whether the income goal is reached
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.assumptions import Assumptions
from .debt import calculate_deposit_required
from .projection import ProjectionResult, YearSnapshot
from .sale_optimizer import SaleScenario

POSITIVE_CASH_FLOW_THRESHOLD = 10_000.0


def format_currency(value: float) -> str:
    """Whole-dollar currency string, e.g. ``$1,250,000`` or ``-$3,400``."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def _years(n: int) -> str:
    return f"{n} year{'s' if n > 1 else ''}"


@dataclass(frozen=True)
class Insight:
    """A single recommendation shown alongside the roadmap."""

    type: str  # action, info, warning, success
    priority: str  # high, medium, low
    icon: str
    title: str
    description: str
    action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "priority": self.priority,
            "icon": self.icon,
            "title": self.title,
            "description": self.description,
            "action": self.action,
        }


@dataclass(frozen=True)
class InsightContext:
    """Figures the insight rules are evaluated against."""

    projection: ProjectionResult
    sale_scenario: Optional[SaleScenario]
    assumptions: Assumptions
    cash_allocated: float
    annual_income_goal: float
    deposit_required: float

    @property
    def current(self) -> YearSnapshot:
        return self.projection[0]

    @property
    def extractable_equity(self) -> float:
        return self.current.totals.extractable_equity

    @property
    def total_available(self) -> float:
        return self.cash_allocated + self.extractable_equity

    @property
    def shortfall(self) -> float:
        return self.deposit_required - self.total_available

    @property
    def first_purchase(self) -> Optional[YearSnapshot]:
        purchases = self.projection.purchase_years
        return purchases[0] if purchases else None

    @property
    def next_refinance(self) -> Optional[YearSnapshot]:
        for snapshot in self.projection.snapshots[1:]:
            if snapshot.events.can_refinance:
                return snapshot
        return None

    @property
    def current_cash_flow(self) -> float:
        return sum(s.cash_flow for s in self.current.properties)


@dataclass(frozen=True)
class InsightRule:
    """A named predicate and the insight it produces."""

    name: str
    group: str
    predicate: Callable[[InsightContext], bool]
    build: Callable[[InsightContext], Insight]
    priority: str


# === Funding ===

def _ready_to_purchase(ctx: InsightContext) -> Insight:
    price = format_currency(ctx.assumptions.target_property_price)
    return Insight(
        type="action",
        priority="high",
        icon="rocket",
        title="Ready to Purchase",
        description=(
            f"You have enough cash ({format_currency(ctx.cash_allocated)}) to cover a "
            f"{price} property deposit. Consider engaging a buyers agent to start your search."
        ),
        action="Start property search",
    )


def _refinance_to_purchase(ctx: InsightContext) -> Insight:
    return Insight(
        type="action",
        priority="high",
        icon="bank",
        title="Refinance to Purchase",
        description=(
            f"Your current equity allows you to extract {format_currency(ctx.extractable_equity)}. "
            f"Combined with your {format_currency(ctx.cash_allocated)} cash, you can fund a new purchase."
        ),
        action="Speak to your broker about refinancing",
    )


def _next_purchase(ctx: InsightContext) -> Insight:
    year = ctx.first_purchase.year
    return Insight(
        type="info",
        priority="medium",
        icon="clock",
        title=f"Next Purchase: Year {year}",
        description=(
            f"You need {format_currency(ctx.shortfall)} more to reach the "
            f"{format_currency(ctx.deposit_required)} deposit. Based on equity growth, "
            f"you'll be ready in {_years(year)}."
        ),
        action="Accelerate by saving more cash",
    )


def _no_purchases(ctx: InsightContext) -> Insight:
    return Insight(
        type="warning",
        priority="high",
        icon="alert",
        title="No Purchases Projected",
        description=(
            f"You need {format_currency(ctx.shortfall)} more to afford a "
            f"{format_currency(ctx.assumptions.target_property_price)} property. "
            "Consider a lower price point or save more cash."
        ),
        action="Adjust target purchase price or save more",
    )


# === Refinance timing ===

def _refinance_window(ctx: InsightContext) -> Insight:
    year = ctx.next_refinance.year
    return Insight(
        type="info",
        priority="medium",
        icon="calendar",
        title=f"Refinance Opportunity: Year {year}",
        description=(
            f"Your next refinance window is in {_years(year)}. "
            "This may unlock equity for your next purchase."
        ),
        action="Mark calendar for broker review",
    )


# === Cash flow ===

def _negative_cash_flow(ctx: InsightContext) -> Insight:
    monthly_cost = abs(ctx.current_cash_flow) / 12
    return Insight(
        type="warning",
        priority="medium",
        icon="wallet",
        title="Negative Cash Flow",
        description=(
            f"Your portfolio currently costs {format_currency(monthly_cost)}/month to hold. "
            "Ensure you have sufficient income or savings to cover this."
        ),
        action="Budget for holding costs",
    )


def _positive_cash_flow(ctx: InsightContext) -> Insight:
    return Insight(
        type="info",
        priority="low",
        icon="trending-up",
        title="Positive Cash Flow",
        description=(
            f"Your portfolio generates {format_currency(ctx.current_cash_flow)}/year positive "
            "cash flow. This accumulates toward your next deposit."
        ),
        action="Consider reinvesting surplus",
    )


# === Goal ===

def _goal_achievable(ctx: InsightContext) -> Insight:
    return Insight(
        type="success",
        priority="high",
        icon="check-circle",
        title="Goal Achievable",
        description=(
            f"Your current strategy projects {format_currency(ctx.sale_scenario.after_tax_income)}/year "
            f"passive income, exceeding your {format_currency(ctx.annual_income_goal)}/year goal."
        ),
        action="Stay the course",
    )


def _percent_of_goal(ctx: InsightContext) -> Insight:
    income = ctx.sale_scenario.after_tax_income
    percent = round(income / ctx.annual_income_goal * 100) if ctx.annual_income_goal > 0 else 0
    return Insight(
        type="info",
        priority="high",
        icon="target",
        title=f"{percent}% of Goal",
        description=(
            f"You're projected to achieve {format_currency(income)}/year, which is "
            f"{format_currency(ctx.annual_income_goal - income)} short of your goal."
        ),
        action="See gap analysis for options",
    )


INSIGHT_RULES: Tuple[InsightRule, ...] = (
    InsightRule(
        "ready_to_purchase", "funding",
        lambda c: c.cash_allocated >= c.deposit_required,
        _ready_to_purchase, "high",
    ),
    InsightRule(
        "refinance_to_purchase", "funding",
        lambda c: c.total_available >= c.deposit_required,
        _refinance_to_purchase, "high",
    ),
    InsightRule(
        "next_purchase", "funding",
        lambda c: c.first_purchase is not None,
        _next_purchase, "medium",
    ),
    InsightRule(
        "no_purchases", "funding",
        lambda c: True,
        _no_purchases, "high",
    ),
    InsightRule(
        "refinance_window", "refinance",
        lambda c: c.next_refinance is not None and c.first_purchase is None,
        _refinance_window, "medium",
    ),
    InsightRule(
        "negative_cash_flow", "cash_flow",
        lambda c: c.current_cash_flow < 0,
        _negative_cash_flow, "medium",
    ),
    InsightRule(
        "positive_cash_flow", "cash_flow",
        lambda c: c.current_cash_flow > POSITIVE_CASH_FLOW_THRESHOLD,
        _positive_cash_flow, "low",
    ),
    InsightRule(
        "goal_achievable", "goal",
        lambda c: c.sale_scenario is not None and c.sale_scenario.goal_achieved,
        _goal_achievable, "high",
    ),
    InsightRule(
        "percent_of_goal", "goal",
        lambda c: c.sale_scenario is not None and c.sale_scenario.after_tax_income > 0,
        _percent_of_goal, "high",
    ),
)


def generate_insights(
    projection: ProjectionResult,
    sale_scenario: Optional[SaleScenario],
    assumptions: Assumptions,
    cash_allocated: float,
    annual_income_goal: float,
    rules: Tuple[InsightRule, ...] = INSIGHT_RULES,
) -> List[Insight]:
    """Evaluate the rule table against a computed roadmap.

    Args:
        projection: Completed projection.
        sale_scenario: Sale scenario for the projection (may be None).
        assumptions: Assumptions used for the projection.
        cash_allocated: Starting cash.
        annual_income_goal: After-tax annual income target.
        rules: Rule table; defaults to ``INSIGHT_RULES``.

    Returns:
        Insights in rule-table order, at most one per group. Empty for an
        empty projection.
    """
    if projection.is_empty:
        return []

    ctx = InsightContext(
        projection=projection,
        sale_scenario=sale_scenario,
        assumptions=assumptions,
        cash_allocated=cash_allocated,
        annual_income_goal=annual_income_goal,
        deposit_required=calculate_deposit_required(
            assumptions.target_property_price,
            assumptions.max_lvr,
            assumptions.stamp_duty_rate,
            assumptions.purchase_costs_rate,
            assumptions.buyers_agent_fee,
        ),
    )

    insights = []
    matched_groups = set()
    for rule in rules:
        if rule.group in matched_groups:
            continue
        if rule.predicate(ctx):
            insights.append(rule.build(ctx))
            matched_groups.add(rule.group)
    return insights


# === Assumption sanity checks ===

@dataclass(frozen=True)
class AssumptionWarning:
    """An assumption that is valid but outside typical market experience."""

    level: str  # warning, error
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "message": self.message}


def validate_assumptions(assumptions: Assumptions) -> List[AssumptionWarning]:
    """Flag optimistic or unusual assumptions.

    Unlike ``Assumptions.validate()``, nothing here is out of range; these
    are values worth a second look before relying on the roadmap.
    """
    warnings = []

    appreciation = assumptions.appreciation_rate
    if appreciation > 0.06:
        warnings.append(AssumptionWarning(
            "warning",
            f"{appreciation:.1%} annual appreciation is above typical Sydney benchmarks (3-5%). "
            "Consider using a more conservative estimate.",
        ))
    if appreciation > 0.08:
        warnings.append(AssumptionWarning(
            "error",
            f"{appreciation:.1%} annual appreciation is very optimistic. "
            "Sustained growth at this rate is historically rare.",
        ))
    if assumptions.rental_yield > 0.06:
        warnings.append(AssumptionWarning(
            "warning",
            f"{assumptions.rental_yield:.1%} rental yield is higher than typical Sydney returns (3-5%).",
        ))
    if assumptions.interest_rate < 0.05:
        warnings.append(AssumptionWarning(
            "warning",
            f"{assumptions.interest_rate:.1%} interest rate is below current market rates. "
            "Consider using a higher rate for planning.",
        ))

    return warnings
