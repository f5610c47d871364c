"""Property wealth roadmap: portfolio projection and debt-free income planning."""

from .models import Assumptions, DrawOrder, InvalidAssumptionError, Property, RoadmapInputs
from .roadmap import RoadmapResult, calculate_roadmap

__version__ = "0.1.0"

__all__ = [
    "Assumptions",
    "DrawOrder",
    "InvalidAssumptionError",
    "Property",
    "RoadmapInputs",
    "RoadmapResult",
    "calculate_roadmap",
]
