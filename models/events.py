"""
Event and summary models for the Relief Resource Allocator.

This module defines the 'Output' of the allocation engine. The core emits
these as structured records; sinks (logging, reports) decide how to render them.
"""

from typing import List, Literal, Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field

from .request import RequestStatus


class AllocationEvent(BaseModel):
    """Stock moved from source to target."""
    kind: Literal["allocation"] = "allocation"
    source_id: int
    target_id: int
    resource_type: str
    quantity: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=datetime.now)
    request_id: Optional[int] = None


class NetworkChangeEvent(BaseModel):
    """A route was closed or reopened."""
    kind: Literal["network_change"] = "network_change"
    source_id: int
    target_id: int
    is_operational: bool
    timestamp: datetime = Field(default_factory=datetime.now)


class LocationStatusEvent(BaseModel):
    kind: Literal["location_status"] = "location_status"
    location_id: int
    name: str
    is_operational: bool
    timestamp: datetime = Field(default_factory=datetime.now)


class StockCriticalEvent(BaseModel):
    kind: Literal["stock_critical"] = "stock_critical"
    resource_type: str
    available: int
    critical_level: int
    timestamp: datetime = Field(default_factory=datetime.now)


class ShortageEvent(BaseModel):
    kind: Literal["shortage"] = "shortage"
    resource_type: str
    quantity_lost: int
    percent: int
    timestamp: datetime = Field(default_factory=datetime.now)


class StatusEvent(BaseModel):
    """Free-text status line, optionally tied to a request."""
    kind: Literal["status"] = "status"
    message: str
    request_id: Optional[int] = None
    timestamp: datetime = Field(default_factory=datetime.now)


Event = Union[
    AllocationEvent,
    NetworkChangeEvent,
    LocationStatusEvent,
    StockCriticalEvent,
    ShortageEvent,
    StatusEvent,
]


class AllocationOutcome(BaseModel):
    """What happened to one request popped during a cycle."""
    day: int
    request_id: int
    resource_type: str
    priority: int
    status: RequestStatus
    fulfilled_quantity: int = 0
    required_quantity: int
    path: List[int] = Field(default_factory=list, description="Location ids travelled, empty if none")
    note: str = ""


class CycleSummary(BaseModel):
    """End-of-cycle digest read back by the driver."""
    day: int
    operational_locations: int
    total_locations: int
    critical_resources: List[str] = Field(default_factory=list)
    outcomes: List[AllocationOutcome] = Field(default_factory=list)
    allocations: List[AllocationEvent] = Field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.outcomes)

    @property
    def fulfilled_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == RequestStatus.FULFILLED)
