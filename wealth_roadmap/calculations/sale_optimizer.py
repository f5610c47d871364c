"""Strategic sale scenario: sell part of the portfolio to own the rest debt-free.

The search is a descending-cardinality greedy over at most N + 1 candidates.
Properties are ranked by current value; for ``keep_count`` from N down to 0
the top ``keep_count`` are kept and the rest sold. The first split whose net
sale proceeds cover all debt on the kept properties wins.

This favors keeping higher-value properties. It is not guaranteed to find,
for a given count, the subset with the least retained debt or the highest
income; it is a documented heuristic, not an exact subset optimizer.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from ..models.assumptions import Assumptions
from .projection import ProjectionResult
from .property_state import PropertyYearState, calculate_annual_rent, calculate_holding_costs
from .taxes import calculate_after_tax_income, calculate_cgt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SoldProperty:
    """A property sold at the horizon, with its tax and transaction costs."""

    state: PropertyYearState
    cgt: float
    selling_costs: float

    @property
    def sale_price(self) -> float:
        return self.state.current_value

    @property
    def loan_repaid(self) -> float:
        return self.state.loan_amount

    @property
    def net_proceeds(self) -> float:
        """Sale price less loan, CGT and selling costs."""
        return self.sale_price - self.loan_repaid - self.cgt - self.selling_costs

    def to_dict(self) -> Dict[str, Any]:
        record = self.state.to_dict()
        record.update({
            "cgt": self.cgt,
            "sellingCosts": self.selling_costs,
            "netProceeds": self.net_proceeds,
        })
        return record


@dataclass(frozen=True)
class DebtFreeProperty:
    """A property kept at the horizon with its loan fully repaid."""

    state: PropertyYearState  # State before the loan was cleared
    gross_rent: float
    holding_costs: float
    annual_rent: float  # Net of vacancy and holding costs

    @property
    def current_value(self) -> float:
        return self.state.current_value

    @property
    def debt_cleared(self) -> float:
        return self.state.loan_amount

    @property
    def loan_amount(self) -> float:
        return 0.0

    @property
    def cash_flow(self) -> float:
        return self.annual_rent

    def to_dict(self) -> Dict[str, Any]:
        record = self.state.to_dict()
        record.update({
            "loanAmount": 0.0,
            "equity": self.current_value,
            "lvr": 0.0,
            "grossRent": self.gross_rent,
            "holdingCosts": self.holding_costs,
            "annualRent": self.annual_rent,
            "cashFlow": self.annual_rent,
            "isDebtFree": True,
        })
        return record


@dataclass(frozen=True)
class SaleScenario:
    """Terminal disposal strategy and the income it leaves.

    Computed once from the final projection year and never changed.
    """

    debt_free_properties: Tuple[DebtFreeProperty, ...]
    properties_to_sell: Tuple[SoldProperty, ...]
    total_properties_at_peak: int

    gross_sale_proceeds: float
    total_cgt: float
    total_selling_costs: float
    net_sale_proceeds: float
    debt_cleared: float
    surplus_cash: float

    total_gross_rent: float
    total_net_rent: float
    after_tax_income: float  # Annual
    monthly_income: float

    monthly_income_goal: float
    goal_achieved: bool
    shortfall: float  # Monthly
    surplus: float  # Monthly

    is_fallback: bool = False  # No split cleared the debt; everything is sold

    @property
    def debt_free_count(self) -> int:
        return len(self.debt_free_properties)

    @property
    def properties_sold(self) -> int:
        return len(self.properties_to_sell)

    @property
    def kept_portfolio_value(self) -> float:
        return sum(p.current_value for p in self.debt_free_properties)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "debtFreeProperties": [p.to_dict() for p in self.debt_free_properties],
            "propertiesToSell": [p.to_dict() for p in self.properties_to_sell],
            "trulyDebtFreeCount": self.debt_free_count,
            "totalPropertiesAtPeak": self.total_properties_at_peak,
            "totalGrossRent": self.total_gross_rent,
            "totalNetRent": self.total_net_rent,
            "afterTaxIncome": self.after_tax_income,
            "monthlyIncome": self.monthly_income,
            "goalAchieved": self.goal_achieved,
            "shortfall": self.shortfall,
            "surplus": self.surplus,
            "summary": {
                "propertiesKept": self.debt_free_count,
                "propertiesSold": self.properties_sold,
                "totalPropertiesAtPeak": self.total_properties_at_peak,
                "grossSaleProceeds": self.gross_sale_proceeds,
                "totalCGT": self.total_cgt,
                "totalSellingCosts": self.total_selling_costs,
                "netSaleProceeds": self.net_sale_proceeds,
                "debtCleared": self.debt_cleared,
                "surplusCash": self.surplus_cash,
            },
        }


def _sell(state: PropertyYearState, assumptions: Assumptions, horizon_years: int) -> SoldProperty:
    cost_base = state.property.purchase_price or state.current_value
    years_held = horizon_years - state.property.year_purchased
    return SoldProperty(
        state=state,
        cgt=calculate_cgt(
            state.current_value,
            cost_base,
            years_held,
            assumptions.tax_bracket,
            assumptions.cgt_discount,
        ),
        selling_costs=state.current_value * assumptions.selling_costs_rate,
    )


def _keep_debt_free(state: PropertyYearState, assumptions: Assumptions) -> DebtFreeProperty:
    gross_rent = calculate_annual_rent(state.current_value, assumptions.rental_yield)
    effective_rent = gross_rent * (1 - assumptions.vacancy_rate)
    holding_costs = calculate_holding_costs(state.current_value, assumptions.holding_costs_rate)
    return DebtFreeProperty(
        state=state,
        gross_rent=gross_rent,
        holding_costs=holding_costs,
        annual_rent=effective_rent - holding_costs,
    )


def find_keep_count(
    properties_by_value: Sequence[PropertyYearState],
    sold: Sequence[SoldProperty],
) -> Optional[int]:
    """Largest number of top-valued properties whose debt the rest can clear.

    Args:
        properties_by_value: Property states sorted by value, descending.
        sold: The same properties priced as sales, in the same order.

    Returns:
        The accepted keep count, or None if no split is feasible.
    """
    n = len(properties_by_value)
    for keep_count in range(n, -1, -1):
        debt_to_clear = sum(s.loan_amount for s in properties_by_value[:keep_count])
        net_proceeds = sum(s.net_proceeds for s in sold[keep_count:])
        if net_proceeds >= debt_to_clear:
            return keep_count
    return None


def calculate_strategic_sale_scenario(
    projection: ProjectionResult,
    monthly_income_goal: float,
    assumptions: Assumptions,
    horizon_years: int,
) -> Optional[SaleScenario]:
    """Find the split that keeps the most properties fully debt-free.

    Args:
        projection: Completed projection; only the final year is used.
        monthly_income_goal: After-tax monthly income target.
        assumptions: Rent, cost and tax assumptions.
        horizon_years: Projection horizon, used for CGT holding periods.

    Returns:
        SaleScenario, or None for an empty projection.
    """
    final = projection.final
    if final is None:
        return None

    # Stable sort: equal values keep portfolio order
    by_value = sorted(final.properties, key=lambda s: s.current_value, reverse=True)
    sold_all = [_sell(s, assumptions, horizon_years) for s in by_value]

    keep_count = find_keep_count(by_value, sold_all)
    is_fallback = keep_count is None
    if is_fallback:
        logger.debug("No sale split clears the debt; selling all %d properties", len(by_value))
        keep_count = 0

    to_keep = by_value[:keep_count]
    to_sell = sold_all[keep_count:]

    gross_proceeds = sum(p.sale_price for p in to_sell)
    total_cgt = sum(p.cgt for p in to_sell)
    total_selling_costs = sum(p.selling_costs for p in to_sell)
    net_proceeds = sum(p.net_proceeds for p in to_sell)
    debt_cleared = 0.0 if is_fallback else sum(s.loan_amount for s in to_keep)
    surplus_cash = 0.0 if is_fallback else net_proceeds - debt_cleared

    debt_free = [_keep_debt_free(s, assumptions) for s in to_keep]
    total_gross_rent = sum(p.gross_rent for p in debt_free)
    total_net_rent = sum(p.annual_rent for p in debt_free)

    # No interest remains, so net rent is the whole cash flow
    after_tax_income = calculate_after_tax_income(total_net_rent, assumptions.tax_bracket)
    monthly_income = after_tax_income / 12
    goal_achieved = monthly_income >= monthly_income_goal

    logger.debug(
        "Keeping %d of %d debt-free, clearing %.0f; after-tax income %.0f",
        keep_count, len(by_value), debt_cleared, after_tax_income,
    )

    return SaleScenario(
        debt_free_properties=tuple(debt_free),
        properties_to_sell=tuple(to_sell),
        total_properties_at_peak=len(by_value),
        gross_sale_proceeds=gross_proceeds,
        total_cgt=total_cgt,
        total_selling_costs=total_selling_costs,
        net_sale_proceeds=net_proceeds,
        debt_cleared=debt_cleared,
        surplus_cash=surplus_cash,
        total_gross_rent=total_gross_rent,
        total_net_rent=total_net_rent,
        after_tax_income=after_tax_income,
        monthly_income=monthly_income,
        monthly_income_goal=monthly_income_goal,
        goal_achieved=goal_achieved,
        shortfall=0.0 if goal_achieved else monthly_income_goal - monthly_income,
        surplus=monthly_income - monthly_income_goal if goal_achieved else 0.0,
        is_fallback=is_fallback,
    )
