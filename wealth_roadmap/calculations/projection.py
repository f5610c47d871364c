"""Year-by-year portfolio projection with refinance-funded acquisitions.

The projection is a single forward pass over years ``0..target_years``.
Each year:

1. Every held property is revalued and its loan serviced
   (see ``property_state.project_property_year``).
2. Extractable equity across the portfolio is summed.
3. The deposit for one target-price property is worked out.
4. Purchases are allowed in year 0 when cash alone covers a deposit, and
   in later years only on refinance years (``year % refinance_interval == 0``).
5. Purchases are funded cash-first; any shortfall is drawn from the
   extractable equity of existing properties, raising their loans.
6. New properties join the year's snapshot immediately, interest-only.
7. Net cash flow is added to accumulated cash, which is floored at zero
   (shortfalls are assumed to be covered by the investor's other income).
8. Principal paid during the year reduces each loan before the next year.

Every year builds a new tuple of frozen records; no snapshot is shared with
or mutated by a later year.

Typical usage:
    from wealth_roadmap.calculations.projection import generate_projection

    projection = generate_projection(properties, 150_000, Assumptions(), 15)
    final = projection.final
    print(f"{final.totals.property_count} properties, ${final.totals.total_equity:,.0f} equity")
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..models.assumptions import Assumptions, InvalidAssumptionError
from ..models.lookups import DrawOrder, MAX_PURCHASES_PER_WINDOW, STANDARD_LOAN_TERM_YEARS
from ..models.property import Property
from .debt import calculate_deposit_required, calculate_extractable_equity
from .property_state import PropertyYearState, project_property_year

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioTotals:
    """Aggregate position of the portfolio in one year."""

    total_value: float
    total_equity: float
    total_debt: float
    total_rent: float
    property_count: int
    extractable_equity: float
    available_funds: float  # Extractable equity + accumulated cash, before purchases
    accumulated_cash: float  # After this year's purchases and cash flow
    net_cash_flow: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalValue": self.total_value,
            "totalEquity": self.total_equity,
            "totalDebt": self.total_debt,
            "totalRent": self.total_rent,
            "propertyCount": self.property_count,
            "extractableEquity": self.extractable_equity,
            "availableFunds": self.available_funds,
            "accumulatedCash": self.accumulated_cash,
            "netCashFlow": self.net_cash_flow,
        }


@dataclass(frozen=True)
class YearEvents:
    """Acquisition and refinance activity during one year."""

    can_refinance: bool
    properties_purchased: int
    refinance_amount: float
    cash_used: float
    new_properties_possible: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canRefinance": self.can_refinance,
            "propertiesPurchased": self.properties_purchased,
            "refinanceAmount": self.refinance_amount,
            "cashUsed": self.cash_used,
            "newPropertiesPossible": self.new_properties_possible,
        }


@dataclass(frozen=True)
class YearSnapshot:
    """One projection tick: property states, totals and events."""

    year: int
    properties: Tuple[PropertyYearState, ...]
    totals: PortfolioTotals
    events: YearEvents

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "properties": [p.to_dict() for p in self.properties],
            "totals": self.totals.to_dict(),
            "events": self.events.to_dict(),
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Ordered year snapshots, ``target_years + 1`` long (empty if nothing to project)."""

    snapshots: Tuple[YearSnapshot, ...] = ()

    def __len__(self) -> int:
        return len(self.snapshots)

    def __iter__(self) -> Iterator[YearSnapshot]:
        return iter(self.snapshots)

    def __getitem__(self, index: int) -> YearSnapshot:
        return self.snapshots[index]

    @property
    def is_empty(self) -> bool:
        return len(self.snapshots) == 0

    @property
    def final(self) -> Optional[YearSnapshot]:
        """Snapshot at the horizon, or None for an empty projection."""
        return self.snapshots[-1] if self.snapshots else None

    @property
    def properties_acquired(self) -> int:
        """Property count at the horizon (held plus acquired)."""
        return len(self.snapshots[-1].properties) if self.snapshots else 0

    @property
    def purchase_years(self) -> List[YearSnapshot]:
        return [s for s in self.snapshots if s.events.properties_purchased > 0]

    def to_dict(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self.snapshots]


def _seed_holdings(properties: Sequence[Property]) -> List[Property]:
    """Fill missing cost base and value baselines on starting holdings."""
    seeded = []
    for prop in properties:
        seeded.append(Property(
            id=prop.id,
            name=prop.name,
            purchase_price=prop.purchase_price or prop.current_value,
            current_value=prop.current_value,
            loan_amount=prop.loan_amount,
            annual_rent=prop.annual_rent,
            year_purchased=prop.year_purchased,
            base_value_at_purchase=prop.base_value_at_purchase or prop.current_value,
            base_rent_at_purchase=prop.base_rent_at_purchase or prop.annual_rent,
        ))
    return seeded


def _draw_sequence(states: Sequence[PropertyYearState], draw_order: DrawOrder, max_lvr: float) -> List[int]:
    """Indices of properties in the order refinance draws are taken."""
    indices = list(range(len(states)))
    if draw_order == DrawOrder.EXTRACTABLE_DESC:
        # sorted() is stable, so ties keep portfolio order
        indices = sorted(
            indices,
            key=lambda i: -calculate_extractable_equity(states[i].current_value, states[i].loan_amount, max_lvr),
        )
    return indices


def draw_refinance(
    states: Sequence[PropertyYearState],
    amount: float,
    max_lvr: float,
    draw_order: DrawOrder = DrawOrder.LIST,
) -> Tuple[List[PropertyYearState], float]:
    """Raise loans on existing properties to release ``amount`` of equity.

    Each property is drawn up to its extractable equity, in the given order,
    until the amount is met. Payments already computed for the year are
    unchanged; the higher balance is serviced from next year.

    Args:
        states: Property states for the year.
        amount: Equity to release.
        max_lvr: Maximum loan-to-value ratio.
        draw_order: Order in which properties are drawn on.

    Returns:
        Tuple of (new list of states, amount that could not be drawn).
    """
    redrawn = list(states)
    remaining = amount
    for i in _draw_sequence(states, draw_order, max_lvr):
        if remaining <= 0:
            break
        state = redrawn[i]
        extractable = calculate_extractable_equity(state.current_value, state.loan_amount, max_lvr)
        to_extract = min(extractable, remaining)
        if to_extract > 0:
            redrawn[i] = state.with_loan(state.loan_amount + to_extract)
            remaining -= to_extract
            logger.debug("Drew %.0f from %s", to_extract, state.property.id)
    return redrawn, max(0.0, remaining)


def _sum_totals(
    states: Sequence[PropertyYearState],
    extractable_equity: float,
    available_funds: float,
    accumulated_cash: float,
    net_cash_flow: float,
) -> PortfolioTotals:
    return PortfolioTotals(
        total_value=sum(s.current_value for s in states),
        total_equity=sum(s.equity for s in states),
        total_debt=sum(s.loan_amount for s in states),
        total_rent=sum(s.annual_rent for s in states),
        property_count=len(states),
        extractable_equity=extractable_equity,
        available_funds=available_funds,
        accumulated_cash=accumulated_cash,
        net_cash_flow=net_cash_flow,
    )


def generate_projection(
    properties: Sequence[Property],
    cash_available: float,
    assumptions: Assumptions,
    target_years: int,
    max_purchases: int = MAX_PURCHASES_PER_WINDOW,
    draw_order: DrawOrder = DrawOrder.LIST,
    standard_term_years: int = STANDARD_LOAN_TERM_YEARS,
) -> ProjectionResult:
    """Project the portfolio forward one year at a time.

    Args:
        properties: Starting holdings. Not modified.
        cash_available: Cash allocated to the strategy at year 0.
        assumptions: Market, loan, cost and tax assumptions.
        target_years: Horizon in years (the result has target_years + 1 snapshots).
        max_purchases: Most acquisitions allowed in a single purchase window.
        draw_order: Order in which properties are refinanced to fund purchases.
        standard_term_years: Full loan term for P&I amortization.

    Returns:
        ProjectionResult. Empty when there are no properties and no cash.

    Raises:
        InvalidAssumptionError: If the target price, refinance interval or
            deposit is not positive, or target_years is negative.
    """
    assumptions.require_computable()
    if target_years < 0:
        raise InvalidAssumptionError("target_years", target_years, "must be non-negative")

    if len(properties) == 0 and cash_available == 0:
        return ProjectionResult()

    price = assumptions.target_property_price
    max_lvr = assumptions.max_lvr
    deposit_required = calculate_deposit_required(
        price,
        max_lvr,
        assumptions.stamp_duty_rate,
        assumptions.purchase_costs_rate,
        assumptions.buyers_agent_fee,
    )
    if deposit_required <= 0:
        raise InvalidAssumptionError("deposit_required", deposit_required)

    holdings = _seed_holdings(properties)
    accumulated_cash = cash_available
    snapshots: List[YearSnapshot] = []

    for year in range(target_years + 1):
        states = [project_property_year(p, year, assumptions, standard_term_years) for p in holdings]

        extractable_equity = sum(
            calculate_extractable_equity(s.current_value, s.loan_amount, max_lvr) for s in states
        )
        available_funds = extractable_equity + accumulated_cash
        new_properties_possible = math.floor(available_funds / deposit_required)

        is_refinance_year = year > 0 and year % assumptions.refinance_interval == 0
        can_purchase_year_0 = year == 0 and accumulated_cash >= deposit_required
        can_purchase = can_purchase_year_0 or is_refinance_year

        properties_purchased = 0
        refinance_amount = 0.0
        cash_used = 0.0

        if can_purchase and new_properties_possible > 0:
            properties_purchased = min(new_properties_possible, max_purchases)
            total_cost = properties_purchased * deposit_required

            if accumulated_cash >= total_cost:
                cash_used = total_cost
                accumulated_cash -= total_cost
            else:
                cash_used = accumulated_cash
                refinance_amount = total_cost - accumulated_cash
                accumulated_cash = 0.0
                states, _ = draw_refinance(states, refinance_amount, max_lvr, draw_order)

            for i in range(properties_purchased):
                new_property = Property.acquisition(
                    year=year,
                    index=i,
                    price=price,
                    max_lvr=max_lvr,
                    name=f"Property {len(holdings) + i + 1} (Year {year})",
                )
                states.append(project_property_year(
                    new_property, year, assumptions, standard_term_years, force_interest_only=True,
                ))

            logger.debug(
                "Year %d: bought %d (cash %.0f, refinance %.0f)",
                year, properties_purchased, cash_used, refinance_amount,
            )

        net_cash_flow = sum(s.cash_flow for s in states)
        accumulated_cash += net_cash_flow
        if accumulated_cash < 0:
            accumulated_cash = 0.0

        snapshots.append(YearSnapshot(
            year=year,
            properties=tuple(states),
            totals=_sum_totals(states, extractable_equity, available_funds, accumulated_cash, net_cash_flow),
            events=YearEvents(
                can_refinance=is_refinance_year,
                properties_purchased=properties_purchased,
                refinance_amount=refinance_amount,
                cash_used=cash_used,
                new_properties_possible=new_properties_possible,
            ),
        ))

        holdings = [s.carry_forward() for s in states]

    return ProjectionResult(snapshots=tuple(snapshots))
