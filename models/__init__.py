"""
Data models package for the Relief Resource Allocator.

This package exports the core pillars of the data architecture:
1. Network (Location, Route)
2. Supply (Resource)
3. Demand (Request, RequestStatus, RequestType)
4. Output (events, AllocationOutcome, CycleSummary)
5. Configuration (SimulationConfig)
"""

from .location import (
    Location,
    Route
)

from .resource import Resource

from .request import (
    Request,
    RequestStatus,
    RequestType
)

from .events import (
    AllocationEvent,
    NetworkChangeEvent,
    LocationStatusEvent,
    StockCriticalEvent,
    ShortageEvent,
    StatusEvent,
    Event,
    AllocationOutcome,
    CycleSummary
)

from .config import SimulationConfig

__all__ = [
    # --- Network Models ---
    "Location",
    "Route",

    # --- Supply Models ---
    "Resource",

    # --- Demand Models ---
    "Request",
    "RequestStatus",
    "RequestType",

    # --- Output Models ---
    "AllocationEvent",
    "NetworkChangeEvent",
    "LocationStatusEvent",
    "StockCriticalEvent",
    "ShortageEvent",
    "StatusEvent",
    "Event",
    "AllocationOutcome",
    "CycleSummary",

    # --- Configuration ---
    "SimulationConfig",
]
