"""
Location and Route data models for the Relief Resource Allocator.

This module defines the 'Network' side of the allocator:
1. Locations (warehouses, hospitals, shelters) with a local inventory
2. Routes (directed, capacity-bearing links between locations)
"""

from typing import Dict
from pydantic import BaseModel, Field, model_validator, ConfigDict


class Location(BaseModel):
    """
    A physical place in the relief network.
    Holds people/supplies up to max capacity and tracks a local stock map.
    """
    id: int = Field(description="Unique, immutable identifier")
    name: str = Field(min_length=1, description="Display name")
    latitude: float = Field(default=0.0, description="Informational only")
    longitude: float = Field(default=0.0, description="Informational only")

    is_operational: bool = Field(default=True, description="False once the site is disrupted")

    max_capacity: int = Field(default=1000, ge=0)
    current_occupancy: int = Field(default=0, ge=0)

    resource_inventory: Dict[str, int] = Field(
        default_factory=dict,
        description="Resource type -> quantity held at this location"
    )

    @model_validator(mode='after')
    def validate_occupancy(self):
        if self.current_occupancy > self.max_capacity:
            raise ValueError("Occupancy cannot exceed max capacity")
        for resource_type, qty in self.resource_inventory.items():
            if qty < 0:
                raise ValueError(f"Negative inventory for {resource_type}")
        return self

    def update_status(self, operational: bool) -> None:
        self.is_operational = operational

    def allocate_space(self, quantity: int) -> bool:
        """Reserve occupancy if it fits within max capacity."""
        if quantity <= 0:
            return False
        if self.current_occupancy + quantity <= self.max_capacity:
            self.current_occupancy += quantity
            return True
        return False

    def release_space(self, quantity: int) -> None:
        if quantity <= 0:
            return
        self.current_occupancy = max(0, self.current_occupancy - quantity)

    def add_resource(self, resource_type: str, quantity: int) -> None:
        if quantity <= 0:
            return
        self.resource_inventory[resource_type] = self.resource_inventory.get(resource_type, 0) + quantity

    def use_resource(self, resource_type: str, quantity: int) -> bool:
        """Take stock out of the local inventory. Only succeeds if enough is held."""
        if quantity <= 0:
            return False
        held = self.resource_inventory.get(resource_type, 0)
        if held < quantity:
            return False
        self.resource_inventory[resource_type] = held - quantity
        return True

    def get_available_quantity(self, resource_type: str) -> int:
        return self.resource_inventory.get(resource_type, 0)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "id": 2,
            "name": "Downtown Hospital",
            "latitude": 34.0495,
            "longitude": -118.2512,
            "is_operational": True,
            "max_capacity": 5000,
            "resource_inventory": {"Medical Kits": 200, "Water": 500}
        }
    })


class Route(BaseModel):
    """
    One direction of a link between two locations.

    A bidirectional link is stored as two Route records. Directions are
    independently stateful: each one is loaded and toggled on its own.
    """
    source: int = Field(description="Origin location id")
    target: int = Field(description="Destination location id")

    capacity: int = Field(ge=0, description="Max simultaneous load")
    current_load: int = Field(default=0, ge=0, description="Load already on the route")
    cost: int = Field(ge=0, description="Routing weight (fuel, effort, risk)")

    is_operational: bool = Field(default=True, description="False = blocked")
    distance: float = Field(default=1.0, ge=0, description="Informational")
    route_type: str = Field(default="road", description="e.g. road, air, rail")

    @model_validator(mode='after')
    def validate_load(self):
        if self.current_load > self.capacity:
            raise ValueError("Route load cannot exceed capacity")
        return self

    @property
    def spare_capacity(self) -> int:
        return self.capacity - self.current_load

    def can_add_load(self, amount: int) -> bool:
        """Open AND the new total stays within capacity."""
        return self.is_operational and self.current_load + amount <= self.capacity

    def add_load(self, amount: int) -> None:
        """Adds load only if the route can carry it; silent otherwise."""
        if self.can_add_load(amount):
            self.current_load += amount

