"""Data models for the property wealth roadmap engine."""

from .lookups import (
    DrawOrder,
    AssumptionRange,
    STANDARD_LOAN_TERM_YEARS,
    MAX_PURCHASES_PER_WINDOW,
    DEFAULT_TARGET_YEARS,
    DEFAULT_ANNUAL_INCOME_GOAL,
    DEFAULT_ASSUMPTIONS,
    ASSUMPTION_RANGES,
    SENSITIVITY_SWEEPS,
)
from .assumptions import (
    Assumptions,
    InvalidAssumptionError,
)
from .property import (
    Property,
    RoadmapInputs,
)

__all__ = [
    "DrawOrder",
    "AssumptionRange",
    "STANDARD_LOAN_TERM_YEARS",
    "MAX_PURCHASES_PER_WINDOW",
    "DEFAULT_TARGET_YEARS",
    "DEFAULT_ANNUAL_INCOME_GOAL",
    "DEFAULT_ASSUMPTIONS",
    "ASSUMPTION_RANGES",
    "SENSITIVITY_SWEEPS",
    "Assumptions",
    "InvalidAssumptionError",
    "Property",
    "RoadmapInputs",
]
