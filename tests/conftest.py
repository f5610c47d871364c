"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.test_inputs import (
    get_worked_example_inputs,
    get_cash_only_inputs,
    get_established_investor_inputs,
    get_empty_inputs,
)
from wealth_roadmap.models import Assumptions


@pytest.fixture
def assumptions():
    """Default assumptions."""
    return Assumptions()


@pytest.fixture
def worked_example():
    """Single leveraged property, no cash, 10 years."""
    return get_worked_example_inputs()


@pytest.fixture
def cash_only_inputs():
    """No properties, $300k cash."""
    return get_cash_only_inputs()


@pytest.fixture
def investor_inputs():
    """Two holdings plus cash."""
    return get_established_investor_inputs()


@pytest.fixture
def empty_inputs():
    """No properties and no cash."""
    return get_empty_inputs()
