"""
Resource data model for the Relief Resource Allocator.

This module defines the 'Supply' side of the allocator: central stock per
resource type, split into allocated and available quantities.
"""

from pydantic import BaseModel, Field, model_validator, ConfigDict


class Resource(BaseModel):
    """
    Central stock of one resource type.
    Available = total - allocated.
    """
    type: str = Field(min_length=1, description="Resource type name (ledger key)")
    total_quantity: int = Field(ge=0)
    allocated_quantity: int = Field(default=0, ge=0)

    expiry_days: int = Field(default=0, ge=0, description="Shelf life in days, 0 = does not expire")
    unit_cost: float = Field(default=0.0, ge=0)
    weight: float = Field(default=1.0, ge=0, description="Per-unit weight, drives route load")

    # Below this many available units the type is flagged, but never blocked
    critical_level: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def validate_allocation(self):
        if self.allocated_quantity > self.total_quantity:
            raise ValueError("Allocated quantity cannot exceed total quantity")
        return self

    @property
    def available_quantity(self) -> int:
        return self.total_quantity - self.allocated_quantity

    def allocate(self, quantity: int) -> bool:
        if quantity < 0 or self.available_quantity < quantity:
            return False
        self.allocated_quantity += quantity
        return True

    def release(self, quantity: int) -> None:
        self.allocated_quantity = max(0, self.allocated_quantity - quantity)

    def consume(self, quantity: int) -> None:
        """Shrinkage: removes units from both the allocated and the total count."""
        self.allocated_quantity = max(0, self.allocated_quantity - quantity)
        self.total_quantity = max(0, self.total_quantity - quantity)

    def add_stock(self, quantity: int) -> None:
        self.total_quantity += quantity

    def is_below_critical(self) -> bool:
        return self.available_quantity < self.critical_level

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "type": "Water",
            "total_quantity": 5000,
            "allocated_quantity": 0,
            "expiry_days": 90,
            "unit_cost": 2.0,
            "weight": 1.0,
            "critical_level": 1000
        }
    })
