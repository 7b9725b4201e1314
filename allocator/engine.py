"""
The Relief Allocation Engine.

This module implements the per-day "Solver" loop. It ties together:
1. The Routing Graph (is there a capacity-compliant path?).
2. The Resource Ledger (is there enough central stock?).
3. The Request Queue (who is most urgent?).

Requests are drained strictly in priority order. Each popped request ends
the cycle in a terminal status with a note naming the first failed check.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from models import (
    Request, RequestStatus, RequestType,
    AllocationEvent, NetworkChangeEvent, LocationStatusEvent,
    StockCriticalEvent, ShortageEvent, StatusEvent, Event,
    AllocationOutcome, CycleSummary
)
from .constraints import FeasibilityChecker, AllocationViolation, FeasiblePlan, STOCK
from .ledger import ResourceLedger
from .network import RoutingGraph
from .request_queue import RequestQueue
from .state import AllocationState

logger = logging.getLogger(__name__)

Listener = Callable[[Event], None]


class AllocationEngine:
    """
    Main allocation engine.
    Ingests Demand (Requests) and Supply (Ledger + Network), outputs outcomes and events.
    """

    def __init__(
        self,
        network: Optional[RoutingGraph] = None,
        ledger: Optional[ResourceLedger] = None,
        queue: Optional[RequestQueue] = None,
        allow_partial: bool = False
    ):
        self.network = network if network is not None else RoutingGraph()
        self.ledger = ledger if ledger is not None else ResourceLedger()
        self.queue = queue if queue is not None else RequestQueue()

        # Initialize Helpers
        self.checker = FeasibilityChecker(self.network, self.ledger, allow_partial=allow_partial)
        self.state = AllocationState()

        # Every request ever submitted, including ones already popped
        self.requests: Dict[int, Request] = {}
        self.next_request_id = 1
        self.current_day = 0

        # Event fan-out: buffered while a cycle drains, flushed once it completes
        self.listeners: List[Listener] = []
        self._buffered: List[Event] = []
        self._draining = False

    # --- Events ---

    def subscribe(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def _emit(self, event: Event) -> None:
        if self._draining:
            self._buffered.append(event)
        else:
            self._deliver([event])

    def _deliver(self, events: List[Event]) -> None:
        for event in events:
            for listener in self.listeners:
                listener(event)

    def _flush(self) -> None:
        events, self._buffered = self._buffered, []
        self._deliver(events)

    # --- Request Intake ---

    def create_request(
        self,
        source_id: int,
        target_id: int,
        resource_type: str,
        quantity: int,
        priority: int,
        request_type: RequestType = RequestType.DEMAND,
        timestamp: Optional[datetime] = None
    ) -> Request:
        """Build a request with the next id and queue it."""
        request = Request(
            request_id=self.next_request_id,
            source_location_id=source_id,
            target_location_id=target_id,
            resource_type=resource_type,
            required_quantity=quantity,
            priority=priority,
            type=request_type,
            timestamp=timestamp or datetime.now()
        )
        self.submit(request)
        return request

    def submit(self, request: Request) -> None:
        """Queue an externally built request. Ids must be unique across the run."""
        if request.request_id in self.requests:
            raise ValueError(f"Request id {request.request_id} already used")
        self.queue.insert(request)
        self.requests[request.request_id] = request
        self.next_request_id = max(self.next_request_id, request.request_id + 1)
        logger.debug(f"Queued request #{request.request_id} (priority {request.priority})")

    def get_request(self, request_id: int) -> Optional[Request]:
        return self.requests.get(request_id)

    def update_priority(self, request_id: int, new_priority: int) -> bool:
        return self.queue.update_priority(request_id, new_priority)

    def cancel_request(self, request_id: int) -> bool:
        return self.queue.cancel(request_id)

    # --- Main Loop ---

    def run_cycle(self, day: int, deadline: Optional[float] = None) -> CycleSummary:
        """
        Drain the queue once, in priority order.
        `deadline` is a time.monotonic() value; requests reached after it are invalidated.
        """
        self.current_day = day
        logger.info(f"Day {day}: processing {len(self.queue)} queued requests")

        outcomes: List[AllocationOutcome] = []
        self._draining = True
        try:
            while not self.queue.is_empty():
                request = self.queue.pop_top()
                outcomes.append(self._process(request, day, deadline))
        finally:
            self._draining = False

        for resource_type in self.ledger.critical_resources():
            resource = self.ledger.get(resource_type)
            logger.warning(
                f"{resource_type} is below critical level "
                f"({resource.available_quantity} < {resource.critical_level})"
            )
            self._buffered.append(StockCriticalEvent(
                resource_type=resource_type,
                available=resource.available_quantity,
                critical_level=resource.critical_level
            ))

        summary = self.summary(day, outcomes)
        logger.info(f"Day {day}: processed {summary.processed_count}, fulfilled {summary.fulfilled_count}")
        self._flush()
        return summary

    def _process(self, request: Request, day: int, deadline: Optional[float] = None) -> AllocationOutcome:
        """Evaluate one popped request. Never re-queues it."""
        path: List[int] = []

        if request.status == RequestStatus.CANCELLED:
            logger.info(f"Skipping cancelled request #{request.request_id}")
            self._emit(StatusEvent(message="request cancelled", request_id=request.request_id))
        else:
            result = self.checker.check_request(request, deadline)
            if isinstance(result, AllocationViolation):
                self._reject(request, result, day)
            else:
                path = result.path
                self._commit(request, result, day)

        outcome = AllocationOutcome(
            day=day,
            request_id=request.request_id,
            resource_type=request.resource_type,
            priority=request.priority,
            status=request.status,
            fulfilled_quantity=request.fulfilled_quantity,
            required_quantity=request.required_quantity,
            path=path if request.status != RequestStatus.INVALID else [],
            note=request.notes
        )
        self.state.add_outcome(outcome)
        return outcome

    def _reject(self, request: Request, violation: AllocationViolation, day: int) -> None:
        request.invalidate(violation.reason)
        self.state.record_failure(request, violation, day)
        logger.warning(f"Request #{request.request_id} invalid: {violation.reason}")
        self._emit(StatusEvent(message=violation.reason, request_id=request.request_id))

    def _commit(self, request: Request, plan: FeasiblePlan, day: int) -> None:
        """
        Reserve stock, load every hop, credit the destination.
        All checks already passed, so nothing here is expected to fail.
        """
        quantity = plan.quantity
        load = plan.load
        target = self.network.get_location(request.target_location_id)

        if request.type == RequestType.TRANSFER:
            source = self.network.get_location(request.source_location_id)
            if not source.use_resource(request.resource_type, quantity):
                self._reject(request, AllocationViolation(
                    STOCK, "insufficient stock at source location", request.request_id), day)
                return
        else:
            if not self.ledger.allocate(request.resource_type, quantity):
                self._reject(request, AllocationViolation(
                    STOCK, "insufficient resources", request.request_id), day)
                return
            if quantity < request.required_quantity:
                load = self.ledger.load_for(request.resource_type, quantity)

        for a, b in zip(plan.path, plan.path[1:]):
            self.network.add_load(a, b, load)

        target.add_resource(request.resource_type, quantity)
        request.fulfill_partial(quantity)
        if request.status == RequestStatus.PARTIALLY_FULFILLED:
            request.add_note(f"partially fulfilled: {quantity}/{request.required_quantity}")

        event = AllocationEvent(
            source_id=request.source_location_id,
            target_id=request.target_location_id,
            resource_type=request.resource_type,
            quantity=quantity,
            request_id=request.request_id
        )
        self.state.add_allocation(event)
        logger.info(
            f"Allocated {request.resource_type} x{quantity} for request #{request.request_id} "
            f"via {' -> '.join(str(n) for n in plan.path)}"
        )
        self._emit(event)

    # --- Direct Transfers ---

    def transfer_resources(self, source_id: int, target_id: int, resource_type: str, quantity: int) -> bool:
        """
        Move stock straight from one location's inventory to another's.
        Same routing/capacity checks as queued requests; processed immediately.
        """
        request = Request(
            request_id=self.next_request_id,
            source_location_id=source_id,
            target_location_id=target_id,
            resource_type=resource_type,
            required_quantity=quantity,
            priority=0,
            type=RequestType.TRANSFER
        )
        self.next_request_id += 1
        self.requests[request.request_id] = request
        self._process(request, self.current_day)
        return request.status == RequestStatus.FULFILLED

    # --- Disruption Entry Points ---

    def set_route_operational(self, source: int, target: int, operational: bool) -> bool:
        if not self.network.set_route_operational(source, target, operational):
            logger.warning(f"No route between {source} and {target}")
            return False
        logger.info(f"Route {source}<->{target} is now {'OPEN' if operational else 'CLOSED'}")
        self._emit(NetworkChangeEvent(source_id=source, target_id=target, is_operational=operational))
        return True

    def close_route(self, source: int, target: int) -> bool:
        return self.set_route_operational(source, target, False)

    def open_route(self, source: int, target: int) -> bool:
        return self.set_route_operational(source, target, True)

    def set_location_operational(self, location_id: int, operational: bool) -> bool:
        location = self.network.get_location(location_id)
        if location is None or location.is_operational == operational:
            return False
        self.network.set_location_operational(location_id, operational)
        logger.info(f"Location {location_id} ({location.name}) is now {'ONLINE' if operational else 'OFFLINE'}")
        self._emit(LocationStatusEvent(
            location_id=location_id, name=location.name, is_operational=operational
        ))
        return True

    def disrupt_location(self, location_id: int) -> bool:
        return self.set_location_operational(location_id, False)

    def restore_location(self, location_id: int) -> bool:
        return self.set_location_operational(location_id, True)

    def apply_shortage(self, resource_type: str, percent: int) -> int:
        """Lose `percent` of available stock. Returns units lost (0 for unknown types)."""
        if self.ledger.get(resource_type) is None:
            logger.warning(f"Shortage ignored: resource type {resource_type!r} not found")
            return 0
        lost = self.ledger.reduce_by_percent(resource_type, percent)
        if lost > 0:
            logger.info(f"{resource_type} shortage: lost {lost} units ({percent}%)")
            self._emit(ShortageEvent(resource_type=resource_type, quantity_lost=lost, percent=percent))
        return lost

    # --- Reporting ---

    def summary(self, day: int, outcomes: Optional[List[AllocationOutcome]] = None) -> CycleSummary:
        if outcomes is None:
            outcomes = self.state.outcomes_for_day(day)
        locations = self.network.locations.values()
        request_ids = {o.request_id for o in outcomes}
        return CycleSummary(
            day=day,
            operational_locations=sum(1 for loc in locations if loc.is_operational),
            total_locations=len(self.network.locations),
            critical_resources=self.ledger.critical_resources(),
            outcomes=outcomes,
            allocations=[a for a in self.state.allocations if a.request_id in request_ids]
        )
