"""
Central Resource Ledger.

Tracks total vs allocated stock per resource type. The ledger knows nothing
about locations: crediting a destination is the caller's job.
"""

import logging
import math
from typing import Dict, List, Optional

from models import Resource
from .errors import NotFoundError, InvariantViolation

logger = logging.getLogger(__name__)


class ResourceLedger:
    """Per-type stock with an allocated/available split."""

    def __init__(self, resources: Optional[List[Resource]] = None):
        self.resources: Dict[str, Resource] = {}
        for resource in resources or []:
            self.add_resource(resource)

    def add_resource(self, resource: Resource) -> None:
        if resource.type in self.resources:
            raise ValueError(f"Resource type {resource.type!r} already registered")
        self.resources[resource.type] = resource

    def get(self, resource_type: str) -> Optional[Resource]:
        return self.resources.get(resource_type)

    def types(self) -> List[str]:
        return list(self.resources)

    def _require(self, resource_type: str) -> Resource:
        resource = self.resources.get(resource_type)
        if resource is None:
            raise NotFoundError("Resource type", resource_type)
        return resource

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity < 0:
            raise ValueError("Quantity must be non-negative")

    def _verify(self, resource: Resource) -> None:
        if not 0 <= resource.allocated_quantity <= resource.total_quantity:
            raise InvariantViolation(
                f"{resource.type}: allocated {resource.allocated_quantity} "
                f"outside [0, {resource.total_quantity}]"
            )

    # --- Mutators ---

    def allocate(self, resource_type: str, quantity: int) -> bool:
        """Reserve stock. Fails (False) unless available >= quantity."""
        self._check_quantity(quantity)
        resource = self._require(resource_type)
        ok = resource.allocate(quantity)
        self._verify(resource)
        return ok

    def release(self, resource_type: str, quantity: int) -> None:
        self._check_quantity(quantity)
        resource = self._require(resource_type)
        resource.release(quantity)
        self._verify(resource)

    def consume(self, resource_type: str, quantity: int) -> None:
        """Shrinkage: lowers both allocated and total, each floored at zero."""
        self._check_quantity(quantity)
        resource = self._require(resource_type)
        resource.consume(quantity)
        self._verify(resource)

    def add_stock(self, resource_type: str, quantity: int) -> None:
        self._check_quantity(quantity)
        resource = self._require(resource_type)
        resource.add_stock(quantity)

    def reduce_by_percent(self, resource_type: str, percent: int) -> int:
        """
        Consume `percent` of the currently available stock (disaster shortage).
        Total quantity drops by that amount; `consume` takes it out of the
        allocated share first, so available stock only falls once that runs out.
        Returns the number of units lost.
        """
        if not 0 <= percent <= 100:
            raise ValueError("Percent must be within [0, 100]")
        resource = self._require(resource_type)
        amount = int(resource.available_quantity * percent / 100)
        if amount > 0:
            self.consume(resource_type, amount)
        return amount

    # --- Queries ---

    def available(self, resource_type: str) -> Optional[int]:
        resource = self.resources.get(resource_type)
        return resource.available_quantity if resource else None

    def has_available(self, resource_type: str, quantity: int) -> bool:
        resource = self.resources.get(resource_type)
        return resource is not None and resource.available_quantity >= quantity

    def is_below_critical(self, resource_type: str) -> bool:
        return self._require(resource_type).is_below_critical()

    def critical_resources(self) -> List[str]:
        return [t for t, r in self.resources.items() if r.is_below_critical()]

    def load_for(self, resource_type: str, quantity: int) -> int:
        """Route load of a shipment: quantity x unit weight, rounded up."""
        resource = self.resources.get(resource_type)
        if resource is None:
            return quantity
        return math.ceil(round(quantity * resource.weight, 9))
