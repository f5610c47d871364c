"""Reference inputs used across the test suite."""

from wealth_roadmap.models import Assumptions, Property, RoadmapInputs


def get_worked_example_inputs() -> RoadmapInputs:
    """One $800k property with a $640k loan, no cash, defaults, 10 years.

    Year 0 of the projection should show:
    - Equity: $160,000
    - Debt: $640,000
    - 11 snapshots (years 0-10)

    Returns:
        RoadmapInputs for the worked example.
    """
    return RoadmapInputs(
        properties=(Property.existing("p1", "Parramatta Unit", 800_000, 640_000),),
        cash_allocated=0.0,
        assumptions=Assumptions(),
        target_years=10,
        annual_income_goal=120_000,
    )


def get_cash_only_inputs(cash: float = 300_000, target_years: int = 15) -> RoadmapInputs:
    """No properties, just cash: enough for one deposit at default assumptions."""
    return RoadmapInputs(
        properties=(),
        cash_allocated=cash,
        assumptions=Assumptions(),
        target_years=target_years,
    )


def get_established_investor_inputs() -> RoadmapInputs:
    """Two holdings (one with explicit rent) plus cash, 15 years."""
    return RoadmapInputs(
        properties=(
            Property.existing("home", "Inner West House", 1_500_000, 600_000),
            Property.existing("unit", "Chatswood Unit", 750_000, 500_000, annual_rent=36_400),
        ),
        cash_allocated=150_000,
        assumptions=Assumptions(),
        target_years=15,
        annual_income_goal=120_000,
    )


def get_empty_inputs() -> RoadmapInputs:
    """Nothing to project."""
    return RoadmapInputs(properties=(), cash_allocated=0.0)


def get_saved_record() -> dict:
    """A saved-state record as produced by the input forms."""
    return {
        "properties": [
            {
                "id": "1",
                "name": "Parramatta Unit",
                "purchasePrice": 800000,
                "currentValue": 800000,
                "loanAmount": 640000,
                "annualRent": 0,
            },
        ],
        "cashAllocated": 100000,
        "assumptions": {
            "appreciationRate": 0.05,
            "rentalYield": 0.04,
            "maxLVR": 0.8,
            "averagePropertyPrice": 900000,
            "refinanceInterval": 3,
        },
        "targetYears": 12,
        "annualIncomeGoal": 96000,
    }
