#!/usr/bin/env python3
"""Example script to run the wealth roadmap with a sample investor."""

import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from wealth_roadmap.models import Assumptions, Property, RoadmapInputs
from wealth_roadmap.roadmap import calculate_roadmap


def get_sample_inputs() -> RoadmapInputs:
    """Sample investor: one geared unit, one house and some cash."""
    return RoadmapInputs(
        properties=(
            Property.existing("home", "Inner West House", 1_500_000, 600_000),
            Property.existing("unit", "Parramatta Unit", 800_000, 640_000, annual_rent=36_400),
        ),
        cash_allocated=150_000,
        assumptions=Assumptions(),
        target_years=15,
        annual_income_goal=120_000,
    )


def load_inputs(path: str) -> RoadmapInputs:
    """Read a saved-state JSON record."""
    with open(path) as f:
        return RoadmapInputs.from_dict(json.load(f))


def print_levers(result) -> None:
    """Print the lever ranking."""
    if result.levers_analysis is None:
        return
    print("\n" + result.levers_analysis.summary())
    for lever in result.levers_analysis.levers:
        print(f"  {lever.name}: {lever.description}")


def print_insights(result) -> None:
    """Print insights in rule order."""
    if not result.insights:
        return
    print("\nINSIGHTS:")
    for insight in result.insights:
        print(f"  [{insight.priority}] {insight.title}")
        print(f"      {insight.description}")
        print(f"      -> {insight.action}")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Property Wealth Roadmap")
    parser.add_argument("inputs", nargs="?", help="Saved-state JSON file (default: sample investor)")
    parser.add_argument("--years", type=int, help="Override the target horizon in years")
    parser.add_argument("--cash", type=float, help="Override the cash allocated")
    parser.add_argument("--no-levers", action="store_true", help="Skip the lever analysis")
    parser.add_argument("--parallel", action="store_true", help="Run levers on a thread pool")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    inputs = load_inputs(args.inputs) if args.inputs else get_sample_inputs()
    if args.years is not None:
        inputs = inputs.with_changes(target_years=args.years)
    if args.cash is not None:
        inputs = inputs.with_changes(cash_allocated=args.cash)

    result = calculate_roadmap(
        inputs,
        include_levers=not args.no_levers,
        parallel_levers=args.parallel,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print(result.summary())
    print_insights(result)
    print_levers(result)

    print("\nDone.")


if __name__ == "__main__":
    main()
