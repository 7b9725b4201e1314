"""
Hard Constraint Validation Logic.

This module answers the binary question: "Can Request X be served right now?"
Checks run in a fixed order and stop at the first failure, so every rejected
request carries exactly one reason: the first precondition it broke.
"""

import time
from dataclasses import dataclass
from typing import List, Optional

from models import Request, RequestType
from .ledger import ResourceLedger
from .network import RoutingGraph

# Violation types, in check order
LOCATION = "Location"
DEADLINE = "Deadline"
ROUTE = "Route"
ROUTE_CONSTRAINTS = "RouteConstraints"
STOCK = "Stock"


@dataclass
class AllocationViolation:
    """Detailed reason for rejection."""
    constraint_type: str  # e.g. "Location", "Route", "Stock"
    reason: str
    request_id: int


@dataclass
class FeasiblePlan:
    """Everything the engine needs to commit a request that passed all checks."""
    request_id: int
    path: List[int]
    load: int
    quantity: int


class FeasibilityChecker:
    """
    Validates hard constraints for a single request against the network and the ledger.
    """

    def __init__(self, network: RoutingGraph, ledger: ResourceLedger, allow_partial: bool = False):
        self.network = network
        self.ledger = ledger
        self.allow_partial = allow_partial

    def check_request(self, request: Request, deadline: Optional[float] = None):
        """
        Master validation function.
        Returns a FeasiblePlan if the request can be committed, a violation otherwise.
        """
        # 1. Both endpoints exist and are open
        violation = self._check_locations(request)
        if violation: return violation

        # Routing is the costliest step, so the cycle deadline is checked right before it
        if deadline is not None and time.monotonic() > deadline:
            return AllocationViolation(DEADLINE, "cycle deadline exceeded", request.request_id)

        # 2. A capacity-compliant path exists
        load = self.ledger.load_for(request.resource_type, request.required_quantity)
        path = self.network.find_feasible_path(
            request.source_location_id, request.target_location_id, load
        )
        if not path:
            return AllocationViolation(
                ROUTE,
                f"no route from {request.source_location_id} to {request.target_location_id} "
                f"able to carry load {load}",
                request.request_id
            )

        # 3. Re-verify every hop against current route state
        violation = self._check_path(request, path, load)
        if violation: return violation

        # 4. Stock
        quantity = request.required_quantity
        if request.type == RequestType.TRANSFER:
            violation = self._check_location_stock(request)
        else:
            violation, quantity = self._check_central_stock(request)
        if violation: return violation

        return FeasiblePlan(request.request_id, path, load, quantity)

    def _check_locations(self, request: Request) -> Optional[AllocationViolation]:
        down = [
            loc_id for loc_id in (request.source_location_id, request.target_location_id)
            if not self.network.is_location_operational(loc_id)
        ]
        if down:
            return AllocationViolation(
                LOCATION,
                "location not operational: " + ", ".join(str(d) for d in down),
                request.request_id
            )
        return None

    def _check_path(self, request: Request, path: List[int], load: int) -> Optional[AllocationViolation]:
        for a, b in zip(path, path[1:]):
            if not self.network.can_carry(a, b, load):
                return AllocationViolation(
                    ROUTE_CONSTRAINTS,
                    f"route constraints: {a}->{b} cannot take load {load}",
                    request.request_id
                )
        return None

    def _check_central_stock(self, request: Request):
        resource = self.ledger.get(request.resource_type)
        if resource is None:
            return AllocationViolation(
                STOCK,
                f"insufficient resources: resource type {request.resource_type!r} not found",
                request.request_id
            ), 0

        available = resource.available_quantity
        if available >= request.required_quantity:
            return None, request.required_quantity
        if self.allow_partial and available > 0:
            return None, available

        return AllocationViolation(
            STOCK,
            f"insufficient resources: {available} {request.resource_type} available, "
            f"{request.required_quantity} required",
            request.request_id
        ), 0

    def _check_location_stock(self, request: Request) -> Optional[AllocationViolation]:
        source = self.network.get_location(request.source_location_id)
        held = source.get_available_quantity(request.resource_type) if source else 0
        if held < request.required_quantity:
            return AllocationViolation(
                STOCK,
                f"insufficient stock at source location {request.source_location_id}: "
                f"{held} {request.resource_type} held, {request.required_quantity} required",
                request.request_id
            )
        return None
