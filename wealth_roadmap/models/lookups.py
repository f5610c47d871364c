"""Lookup tables for assumption defaults, input ranges, and engine policy."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class DrawOrder(Enum):
    """Order in which properties are drawn on when refinancing for a purchase."""

    LIST = "list"  # Portfolio order as given
    EXTRACTABLE_DESC = "extractable_desc"  # Most extractable equity first


@dataclass(frozen=True)
class AssumptionRange:
    """Valid input range for a single assumption (used by input forms)."""

    min_value: float
    max_value: float
    step: float


# Standard mortgage term used to amortize once the interest-only period ends
STANDARD_LOAN_TERM_YEARS = 30

# Realism policy: no more than this many acquisitions per purchase window
MAX_PURCHASES_PER_WINDOW = 3

DEFAULT_TARGET_YEARS = 15
DEFAULT_ANNUAL_INCOME_GOAL = 120_000.0


# Assumption defaults (Sydney investor baseline)
DEFAULT_ASSUMPTIONS: Dict[str, float] = {
    "appreciation_rate": 0.04,  # Annual property value growth
    "rent_growth_rate": 0.025,  # Typically slower than value growth
    "rental_yield": 0.045,  # Initial gross yield
    "interest_rate": 0.065,
    "max_lvr": 0.80,  # Investment lending limit
    "stamp_duty_rate": 0.055,  # Flat NSW approximation
    "purchase_costs_rate": 0.02,  # Legals, inspections
    "tax_bracket": 0.37,  # Marginal rate
    "refinance_interval": 2,  # Years between refinance windows
    "target_property_price": 1_000_000.0,
    "holding_costs_rate": 0.025,  # Management, maintenance, insurance, rates
    "vacancy_rate": 0.04,  # ~2 weeks a year
    "buyers_agent_fee": 20_000.0,  # Flat, per purchase
    "selling_costs_rate": 0.025,  # Commission, conveyancing, marketing
    "interest_only_years": 5,
    "cgt_discount": 0.50,  # Applies when held 12 months or more
}


# Input ranges from the assumption forms
ASSUMPTION_RANGES: Dict[str, AssumptionRange] = {
    "appreciation_rate": AssumptionRange(0.0, 0.10, 0.005),
    "rent_growth_rate": AssumptionRange(0.0, 0.05, 0.005),
    "rental_yield": AssumptionRange(0.02, 0.08, 0.005),
    "interest_rate": AssumptionRange(0.04, 0.10, 0.005),
    "max_lvr": AssumptionRange(0.60, 0.85, 0.05),
    "stamp_duty_rate": AssumptionRange(0.04, 0.07, 0.005),
    "tax_bracket": AssumptionRange(0.19, 0.47, 0.01),
    "holding_costs_rate": AssumptionRange(0.01, 0.05, 0.005),
    "vacancy_rate": AssumptionRange(0.0, 0.10, 0.01),
    "buyers_agent_fee": AssumptionRange(0.0, 40_000.0, 5_000.0),
    "selling_costs_rate": AssumptionRange(0.01, 0.04, 0.005),
    "interest_only_years": AssumptionRange(0, 10, 1),
}

TIMELINE_RANGE = AssumptionRange(5, 40, 1)
ANNUAL_INCOME_RANGE = AssumptionRange(24_000.0, 600_000.0, 6_000.0)


# Lever step sizes
LEVER_CASH_INCREASE = 100_000.0
LEVER_PRICE_DECREASE = 100_000.0
LEVER_YEARS_INCREASE = 5
LEVER_APPRECIATION_INCREASE = 0.01
LEVER_YIELD_INCREASE = 0.005


# Sensitivity sweep grids (min, max, step) per assumption
SENSITIVITY_SWEEPS: Dict[str, AssumptionRange] = {
    "appreciation_rate": AssumptionRange(0.02, 0.08, 0.005),
    "rental_yield": AssumptionRange(0.03, 0.06, 0.005),
    "interest_rate": AssumptionRange(0.05, 0.09, 0.005),
}


def get_assumption_range(field_name: str) -> AssumptionRange:
    """Get the input range for an assumption.

    Args:
        field_name: Assumption field name (e.g., "rental_yield").

    Returns:
        AssumptionRange for the field.

    Raises:
        KeyError: If the field has no documented range.
    """
    return ASSUMPTION_RANGES[field_name]
