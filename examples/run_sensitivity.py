#!/usr/bin/env python3
"""Sensitivity sweeps over the market assumptions.

Re-runs the roadmap across each default sweep grid and prints how monthly
income and the number of debt-free properties respond.

Usage:
    python examples/run_sensitivity.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wealth_roadmap.calculations.levers import run_sensitivity_sweep
from wealth_roadmap.models import Property, RoadmapInputs, SENSITIVITY_SWEEPS


def main():
    """Sweep each market assumption for a single geared unit plus cash."""
    inputs = RoadmapInputs(
        properties=(Property.existing("unit", "Parramatta Unit", 800_000, 640_000),),
        cash_allocated=200_000,
        target_years=15,
    )

    print("=" * 60)
    print("SENSITIVITY ANALYSIS")
    print(f"Goal: ${inputs.monthly_income_goal:,.0f}/month after tax")
    print("=" * 60)

    for variable in SENSITIVITY_SWEEPS:
        frame = run_sensitivity_sweep(inputs, variable).to_frame()
        print(f"\n{variable}:")
        print(frame.to_string(
            index=False,
            formatters={
                variable: "{:.1%}".format,
                "monthly_income": "${:,.0f}".format,
            },
        ))


if __name__ == "__main__":
    main()
