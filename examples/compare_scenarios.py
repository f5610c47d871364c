#!/usr/bin/env python3
"""Compare two roadmaps side by side.

Shows what an extra $100k of starting cash and a cheaper target price do
to the same investor's outcome.

Usage:
    python examples/compare_scenarios.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wealth_roadmap.calculations.metrics import compare_roadmaps, format_comparison_table
from wealth_roadmap.models import Assumptions, Property, RoadmapInputs
from wealth_roadmap.roadmap import calculate_roadmap


def main():
    base_inputs = RoadmapInputs(
        properties=(
            Property.existing("home", "Inner West House", 1_500_000, 600_000),
            Property.existing("unit", "Parramatta Unit", 800_000, 640_000),
        ),
        cash_allocated=100_000,
        assumptions=Assumptions(),
        target_years=15,
    )
    cheaper_inputs = base_inputs.with_changes(
        cash_allocated=200_000,
        assumptions=base_inputs.assumptions.with_changes(target_property_price=750_000),
    )

    base = calculate_roadmap(base_inputs, include_levers=False)
    cheaper = calculate_roadmap(cheaper_inputs, include_levers=False)

    print(format_comparison_table(compare_roadmaps(base, cheaper, "$1M targets", "$750k + cash")))


if __name__ == "__main__":
    main()
