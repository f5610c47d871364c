"""Lever analysis and sensitivity sweeps.

A lever is a single-assumption perturbation of the inputs. Each lever
re-runs the projection and sale optimizer on the perturbed inputs and
reports the change against the baseline in properties acquired, debt-free
properties and after-tax annual income.

Levers:
    cash          +$100k starting cash            (controllable)
    purchasePrice -$100k target purchase price    (controllable)
    timeline      +5 years                        (controllable)
    appreciation  +1% capital growth              (market)
    yield         +0.5% rental yield              (market)

Every re-run works on its own frozen inputs, so levers may be evaluated
on a thread pool; the result is identical to a sequential run.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..models.assumptions import Assumptions, InvalidAssumptionError
from ..models.lookups import (
    LEVER_APPRECIATION_INCREASE,
    LEVER_CASH_INCREASE,
    LEVER_PRICE_DECREASE,
    LEVER_YEARS_INCREASE,
    LEVER_YIELD_INCREASE,
    SENSITIVITY_SWEEPS,
)
from ..models.property import RoadmapInputs
from .projection import generate_projection
from .sale_optimizer import calculate_strategic_sale_scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioOutcome:
    """Headline result of one projection + sale optimizer run."""

    properties_acquired: int
    debt_free_properties: int
    annual_income: float  # After tax
    monthly_income: float
    goal_achieved: bool
    portfolio_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertiesAcquired": self.properties_acquired,
            "debtFreeProperties": self.debt_free_properties,
            "annualIncome": self.annual_income,
            "monthlyIncome": self.monthly_income,
            "goalAchieved": self.goal_achieved,
            "portfolioValue": self.portfolio_value,
        }


_EMPTY_OUTCOME = ScenarioOutcome(0, 0, 0.0, 0.0, False, 0.0)


def evaluate_scenario(inputs: RoadmapInputs) -> ScenarioOutcome:
    """Run the projection and sale optimizer and keep the headline figures."""
    projection = generate_projection(
        inputs.properties,
        inputs.cash_allocated,
        inputs.assumptions,
        inputs.target_years,
    )
    scenario = calculate_strategic_sale_scenario(
        projection,
        inputs.monthly_income_goal,
        inputs.assumptions,
        inputs.target_years,
    )
    if scenario is None:
        return _EMPTY_OUTCOME

    return ScenarioOutcome(
        properties_acquired=projection.properties_acquired,
        debt_free_properties=scenario.debt_free_count,
        annual_income=scenario.after_tax_income,
        monthly_income=scenario.monthly_income,
        goal_achieved=scenario.goal_achieved,
        portfolio_value=projection.final.totals.total_value,
    )


@dataclass(frozen=True)
class LeverImpact:
    """Change against the baseline outcome."""

    properties_acquired: int
    debt_free_properties: int
    annual_income: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertiesAcquired": self.properties_acquired,
            "debtFreeProperties": self.debt_free_properties,
            "annualIncome": self.annual_income,
        }


@dataclass(frozen=True)
class LeverResult:
    """One lever: what was changed and what it did."""

    id: str
    name: str
    change: str
    controllable: bool
    impact: LeverImpact
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "change": self.change,
            "controllable": self.controllable,
            "impact": self.impact.to_dict(),
            "description": self.description,
        }


@dataclass(frozen=True)
class LeversAnalysis:
    """Levers ranked by the size of their effect on annual income."""

    base_result: ScenarioOutcome
    levers: Tuple[LeverResult, ...]

    @property
    def most_impactful(self) -> Optional[LeverResult]:
        return self.levers[0] if self.levers else None

    @property
    def controllable_levers(self) -> List[LeverResult]:
        return [lever for lever in self.levers if lever.controllable]

    @property
    def market_levers(self) -> List[LeverResult]:
        return [lever for lever in self.levers if not lever.controllable]

    @property
    def biggest_lever(self) -> str:
        return self.most_impactful.name if self.most_impactful else "None"

    @property
    def best_controllable(self) -> str:
        controllable = self.controllable_levers
        return controllable[0].name if controllable else "None"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseResult": self.base_result.to_dict(),
            "levers": [lever.to_dict() for lever in self.levers],
            "mostImpactful": self.most_impactful.to_dict() if self.most_impactful else None,
            "controllableLevers": [lever.to_dict() for lever in self.controllable_levers],
            "summary": {
                "biggestLever": self.biggest_lever,
                "bestControllable": self.best_controllable,
            },
        }

    def summary(self) -> str:
        """Text summary of the ranked levers."""
        base = self.base_result
        lines = [
            "=" * 60,
            "LEVER ANALYSIS",
            "=" * 60,
            f"Baseline: {base.properties_acquired} properties, "
            f"{base.debt_free_properties} debt-free, ${base.annual_income:,.0f}/year",
            "",
            f"{'Lever':<24} {'Change':>12} {'Props':>6} {'Free':>5} {'Income':>10}",
            "-" * 60,
        ]
        for lever in self.levers:
            impact = lever.impact
            lines.append(
                f"{lever.name:<24} {lever.change:>12} {impact.properties_acquired:>+6d} "
                f"{impact.debt_free_properties:>+5d} {impact.annual_income:>+10,.0f}"
            )
        lines.extend([
            "-" * 60,
            f"Biggest lever: {self.biggest_lever}",
            f"Best controllable: {self.best_controllable}",
            "=" * 60,
        ])
        return "\n".join(lines)


# === Lever definitions ===

def _describe_cash(impact: LeverImpact) -> str:
    extra = impact.properties_acquired
    if extra > 0:
        debt_free = (
            f"+{impact.debt_free_properties} debt-free"
            if impact.debt_free_properties > 0 else "same debt-free count"
        )
        return f"Enables {extra} more purchase{'s' if extra > 1 else ''}, {debt_free}"
    if impact.debt_free_properties > 0:
        return f"Same purchases but +{impact.debt_free_properties} debt-free properties"
    return "Minimal impact at this level"


def _describe_price(impact: LeverImpact) -> str:
    if impact.properties_acquired > 0:
        return f"Cheaper properties = {impact.properties_acquired} more purchases possible"
    return "Similar acquisition pace"


def _describe_timeline(impact: LeverImpact) -> str:
    return (
        f"More time for compounding: +{impact.properties_acquired} properties, "
        f"+${impact.annual_income:,.0f}/year income"
    )


def _describe_appreciation(impact: LeverImpact) -> str:
    return (
        f"Higher growth locations: +{impact.properties_acquired} properties, "
        f"+${impact.annual_income:,.0f}/year"
    )


def _describe_yield(impact: LeverImpact) -> str:
    return f"Higher yield properties: +${impact.annual_income:,.0f}/year passive income"


@dataclass(frozen=True)
class LeverDefinition:
    """A named perturbation of the inputs and how to describe its effect."""

    id: str
    name: str
    change: str
    controllable: bool
    apply: Callable[[RoadmapInputs], RoadmapInputs]
    describe: Callable[[LeverImpact], str]


def _adjust_assumptions(inputs: RoadmapInputs, **changes: Any) -> RoadmapInputs:
    return inputs.with_changes(assumptions=inputs.assumptions.with_changes(**changes))


LEVERS: Tuple[LeverDefinition, ...] = (
    LeverDefinition(
        id="cash",
        name="Starting Cash",
        change=f"+${LEVER_CASH_INCREASE:,.0f}",
        controllable=True,
        apply=lambda i: i.with_changes(cash_allocated=i.cash_allocated + LEVER_CASH_INCREASE),
        describe=_describe_cash,
    ),
    LeverDefinition(
        id="purchasePrice",
        name="Target Purchase Price",
        change=f"-${LEVER_PRICE_DECREASE:,.0f}",
        controllable=True,
        apply=lambda i: _adjust_assumptions(
            i, target_property_price=i.assumptions.target_property_price - LEVER_PRICE_DECREASE
        ),
        describe=_describe_price,
    ),
    LeverDefinition(
        id="timeline",
        name="Investment Timeline",
        change=f"+{LEVER_YEARS_INCREASE} years",
        controllable=True,
        apply=lambda i: i.with_changes(target_years=i.target_years + LEVER_YEARS_INCREASE),
        describe=_describe_timeline,
    ),
    LeverDefinition(
        id="appreciation",
        name="Capital Growth Rate",
        change=f"+{LEVER_APPRECIATION_INCREASE:.0%}",
        controllable=False,
        apply=lambda i: _adjust_assumptions(
            i, appreciation_rate=i.assumptions.appreciation_rate + LEVER_APPRECIATION_INCREASE
        ),
        describe=_describe_appreciation,
    ),
    LeverDefinition(
        id="yield",
        name="Rental Yield",
        change=f"+{LEVER_YIELD_INCREASE:.1%}",
        controllable=False,
        apply=lambda i: _adjust_assumptions(
            i, rental_yield=i.assumptions.rental_yield + LEVER_YIELD_INCREASE
        ),
        describe=_describe_yield,
    ),
)


def _run_lever(
    definition: LeverDefinition, inputs: RoadmapInputs, base: ScenarioOutcome
) -> Optional[LeverResult]:
    """Re-run one lever, or None when its perturbed assumptions are not computable."""
    try:
        outcome = evaluate_scenario(definition.apply(inputs))
    except InvalidAssumptionError as e:
        logger.debug("Lever %s skipped: %s", definition.id, e)
        return None
    impact = LeverImpact(
        properties_acquired=outcome.properties_acquired - base.properties_acquired,
        debt_free_properties=outcome.debt_free_properties - base.debt_free_properties,
        annual_income=outcome.annual_income - base.annual_income,
    )
    logger.debug(
        "Lever %s: %+d properties, %+d debt-free, %+.0f income",
        definition.id, impact.properties_acquired, impact.debt_free_properties, impact.annual_income,
    )
    return LeverResult(
        id=definition.id,
        name=definition.name,
        change=definition.change,
        controllable=definition.controllable,
        impact=impact,
        description=definition.describe(impact),
    )


def calculate_levers_analysis(
    inputs: RoadmapInputs,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> Optional[LeversAnalysis]:
    """Rank the levers by their effect on after-tax annual income.

    Args:
        inputs: Baseline inputs.
        parallel: Evaluate the levers on a thread pool.
        max_workers: Max parallel workers (None = one per lever).

    Returns:
        LeversAnalysis, or None when there are no properties and no cash.
        A lever whose perturbed assumptions are not computable (for example
        a price cut to zero) is left out of the ranking.

    Raises:
        InvalidAssumptionError: If the baseline assumptions are not computable.
    """
    if inputs.is_empty:
        return None

    base = evaluate_scenario(inputs)

    if parallel:
        workers = max_workers or len(LEVERS)
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_run_lever, d, inputs, base) for d in LEVERS]
            # Collected in submission order, not completion order
            results = [future.result() for future in futures]
    else:
        results = [_run_lever(d, inputs, base) for d in LEVERS]

    results = [r for r in results if r is not None]

    # sorted() is stable, so equal impacts keep definition order
    ranked = sorted(results, key=lambda r: abs(r.impact.annual_income), reverse=True)
    return LeversAnalysis(base_result=base, levers=tuple(ranked))


# === Sensitivity sweeps ===

@dataclass(frozen=True)
class SweepPoint:
    """Outcome at one value of the swept assumption."""

    value: float
    monthly_income: float
    goal_achieved: bool
    properties_kept: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "monthlyIncome": self.monthly_income,
            "goalAchieved": self.goal_achieved,
            "propertiesKept": self.properties_kept,
        }


@dataclass(frozen=True)
class SensitivitySweep:
    """Outcomes across a grid of values for one assumption."""

    variable: str
    points: Tuple[SweepPoint, ...]

    def to_frame(self) -> pd.DataFrame:
        """Sweep as a DataFrame with one row per grid value."""
        return pd.DataFrame(
            {
                self.variable: [p.value for p in self.points],
                "monthly_income": [p.monthly_income for p in self.points],
                "goal_achieved": [p.goal_achieved for p in self.points],
                "properties_kept": [p.properties_kept for p in self.points],
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"variable": self.variable, "points": [p.to_dict() for p in self.points]}


def sweep_grid(min_value: float, max_value: float, step: float) -> np.ndarray:
    """Evenly spaced values from min to max inclusive.

    Raises:
        InvalidAssumptionError: If step is not positive.
    """
    if step <= 0:
        raise InvalidAssumptionError("step", step)
    # Half a step of headroom so max_value survives float error
    grid = np.arange(min_value, max_value + step / 2, step)
    return np.round(grid, 10)


def run_sensitivity_sweep(
    inputs: RoadmapInputs,
    variable: str,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    step: Optional[float] = None,
) -> SensitivitySweep:
    """Re-run the roadmap across a grid of values for one assumption.

    Bounds default to the grid in ``SENSITIVITY_SWEEPS`` for the variable.

    Args:
        inputs: Baseline inputs.
        variable: Assumption field name (e.g., "appreciation_rate").
        min_value: First grid value.
        max_value: Last grid value (inclusive).
        step: Grid spacing.

    Returns:
        SensitivitySweep with one point per grid value.

    Raises:
        ValueError: If the variable is not an assumption, or has no default
            grid and bounds were not given.
        InvalidAssumptionError: If step is not positive.
    """
    field_types = {f.name: f.type for f in fields(Assumptions)}
    if variable not in field_types:
        raise ValueError(f"Unknown sensitivity variable: {variable}")

    default = SENSITIVITY_SWEEPS.get(variable)
    if default is None and None in (min_value, max_value, step):
        raise ValueError(f"No default sweep range for {variable}; give min, max and step")

    lo = default.min_value if min_value is None else min_value
    hi = default.max_value if max_value is None else max_value
    spacing = default.step if step is None else step

    cast = int if field_types[variable] in (int, "int") else float
    points = []
    for value in sweep_grid(lo, hi, spacing):
        value = cast(value)
        outcome = evaluate_scenario(
            inputs.with_changes(assumptions=inputs.assumptions.with_changes(**{variable: value}))
        )
        points.append(SweepPoint(
            value=value,
            monthly_income=outcome.monthly_income,
            goal_achieved=outcome.goal_achieved,
            properties_kept=outcome.debt_free_properties,
        ))

    return SensitivitySweep(variable=variable, points=tuple(points))
