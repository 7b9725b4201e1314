"""
Request data model for the Relief Resource Allocator.

This module defines the 'Demand' side of the allocator: a request to move
a quantity of one resource type between two locations, ranked by priority.
"""

from enum import Enum
from datetime import datetime
from pydantic import BaseModel, Field, model_validator, ConfigDict


class RequestStatus(str, Enum):
    """Lifecycle of a request. Everything except PENDING is terminal."""
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"
    PARTIALLY_FULFILLED = "PARTIALLY_FULFILLED"
    INVALID = "INVALID"
    CANCELLED = "CANCELLED"


class RequestType(str, Enum):
    SUPPLY = "SUPPLY"
    DEMAND = "DEMAND"
    TRANSFER = "TRANSFER"     # Location-to-location, bypasses central stock


class Request(BaseModel):
    """
    A resource request competing for central stock and route capacity.
    Higher priority means more urgent.
    """

    # --- Core Identity ---
    request_id: int = Field(ge=0, description="Unique, monotonically assigned")
    source_location_id: int
    target_location_id: int

    # --- Demand ---
    resource_type: str = Field(min_length=1)
    required_quantity: int = Field(gt=0)
    fulfilled_quantity: int = Field(default=0, ge=0)
    priority: int = Field(description="Higher = more urgent")

    # --- Lifecycle ---
    status: RequestStatus = Field(default=RequestStatus.PENDING)
    type: RequestType = Field(default=RequestType.DEMAND)
    timestamp: datetime = Field(default_factory=datetime.now)
    notes: str = Field(default="", description="Human-readable trail, entries joined by '; '")

    @model_validator(mode='after')
    def validate_fulfilment(self):
        if self.fulfilled_quantity > self.required_quantity:
            raise ValueError("Fulfilled quantity cannot exceed required quantity")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status != RequestStatus.PENDING

    def update_status(self, new_status: RequestStatus) -> None:
        self.status = new_status

    def fulfill_partial(self, quantity: int) -> None:
        """
        Credit delivered units, clamped to the required quantity.
        Sets FULFILLED once complete, PARTIALLY_FULFILLED while something is outstanding.
        """
        self.fulfilled_quantity = min(self.required_quantity, self.fulfilled_quantity + max(0, quantity))
        if self.fulfilled_quantity >= self.required_quantity:
            self.status = RequestStatus.FULFILLED
        elif self.fulfilled_quantity > 0:
            self.status = RequestStatus.PARTIALLY_FULFILLED

    def add_note(self, note: str) -> None:
        self.notes = f"{self.notes}; {note}" if self.notes else note

    def invalidate(self, note: str) -> None:
        self.status = RequestStatus.INVALID
        self.add_note(note)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "request_id": 1,
            "source_location_id": 1,
            "target_location_id": 2,
            "resource_type": "Medical Kits",
            "required_quantity": 200,
            "priority": 10,
            "type": "DEMAND"
        }
    })
