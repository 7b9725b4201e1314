"""
Scenario data generator for the Relief Resource Allocator.

Two jobs:
1. Seed the demo network, stock and opening requests (or reload a saved scenario).
2. Produce each day's new requests from a seeded RNG.
"""

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from models import Location, Route, Resource, Request, RequestStatus
from allocator.engine import AllocationEngine
from allocator.ledger import ResourceLedger
from allocator.network import RoutingGraph

logger = logging.getLogger(__name__)

# --- Demo Scenario ---
DEMO_LOCATIONS = [
    # id, name, lat, lon, operational, capacity
    (1, "Central Warehouse", 34.0522, -118.2437, True, 10000),
    (2, "Downtown Hospital", 34.0495, -118.2512, True, 5000),
    (3, "North Shelter", 34.0639, -118.2381, True, 3000),
    (4, "East Medical Center", 34.0500, -118.2000, True, 4000),
    (5, "South Distribution Hub", 34.0300, -118.2400, True, 8000),
]

DEMO_ROUTES = [
    # from, to, capacity, cost, operational, distance, type
    (1, 2, 1000, 5, True, 5.2, "road"),     # Warehouse to Hospital
    (1, 3, 800, 8, True, 7.8, "road"),      # Warehouse to Shelter
    (1, 4, 1200, 6, True, 6.5, "road"),     # Warehouse to East Medical
    (1, 5, 1500, 4, True, 4.2, "road"),     # Warehouse to South Hub
    (2, 3, 300, 15, False, 3.1, "road"),    # Hospital to Shelter (damaged)
    (2, 4, 400, 12, True, 3.7, "road"),     # Hospital to East Medical
    (3, 5, 600, 10, True, 9.3, "road"),     # Shelter to South Hub
    (4, 5, 700, 9, True, 5.8, "road"),      # East Medical to South Hub
]

DEMO_RESOURCES = [
    # type, total, expiry days, unit cost, weight, critical level
    ("Medical Kits", 1000, 365, 50.0, 2.5, 200),
    ("Water", 5000, 90, 2.0, 1.0, 1000),
    ("Emergency Food", 3000, 180, 8.0, 0.75, 500),
    ("Blankets", 800, 0, 15.0, 1.5, 100),
    ("Medicines", 500, 240, 100.0, 0.5, 100),
]

DEMO_INVENTORY = {
    2: {"Medical Kits": 200, "Water": 500, "Medicines": 100},
    3: {"Water": 300, "Emergency Food": 400, "Blankets": 200},
}

DEMO_REQUESTS = [
    # source, target, type, qty, priority
    (1, 2, "Medical Kits", 200, 10),
    (1, 3, "Emergency Food", 500, 8),
    (1, 2, "Water", 1000, 9),
]


class DataGenerator:
    """
    Seeded scenario builder. The RNG here only drives daily requests,
    never routing or disasters.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        hub_location_id: int = 1,
        request_count_range: Tuple[int, int] = (1, 3),
        quantity_range: Tuple[int, int] = (50, 500),
        priority_range: Tuple[int, int] = (3, 10)
    ):
        self.rng = random.Random(seed)
        self.hub_location_id = hub_location_id
        self.request_count_range = request_count_range
        self.quantity_range = quantity_range
        self.priority_range = priority_range

    def build_demo_scenario(self, engine: AllocationEngine) -> AllocationEngine:
        """Populate an empty engine with the five-site demo network."""
        for loc_id, name, lat, lon, operational, capacity in DEMO_LOCATIONS:
            engine.network.add_location(Location(
                id=loc_id, name=name, latitude=lat, longitude=lon,
                is_operational=operational, max_capacity=capacity
            ))

        for source, target, capacity, cost, operational, distance, route_type in DEMO_ROUTES:
            engine.network.add_route(source, target, capacity, cost, operational, distance, route_type)

        for r_type, total, expiry, unit_cost, weight, critical in DEMO_RESOURCES:
            engine.ledger.add_resource(Resource(
                type=r_type, total_quantity=total, expiry_days=expiry,
                unit_cost=unit_cost, weight=weight, critical_level=critical
            ))

        for loc_id, stock in DEMO_INVENTORY.items():
            location = engine.network.get_location(loc_id)
            for r_type, qty in stock.items():
                location.add_resource(r_type, qty)

        for source, target, r_type, qty, priority in DEMO_REQUESTS:
            engine.create_request(source, target, r_type, qty, priority)

        logger.info(
            f"System initialized with {len(DEMO_LOCATIONS)} locations, {len(DEMO_ROUTES)} routes, "
            f"{len(DEMO_RESOURCES)} resource types, and {len(DEMO_REQUESTS)} initial requests"
        )
        return engine

    def generate_daily_requests(
        self,
        engine: AllocationEngine,
        resource_types: Optional[Sequence[str]] = None,
        target_ids: Optional[Sequence[int]] = None
    ) -> List[Request]:
        """Queue 1-3 (by default) new requests from the hub to random sites."""
        types = list(resource_types) if resource_types else engine.ledger.types()
        targets = list(target_ids) if target_ids else [
            loc_id for loc_id in engine.network.location_ids() if loc_id != self.hub_location_id
        ]
        if not types or not targets:
            logger.warning("No resource types or target locations to generate requests for")
            return []

        count = self.rng.randint(*self.request_count_range)
        created = []
        for _ in range(count):
            r_type = self.rng.choice(types)
            target = self.rng.choice(targets)
            qty = self.rng.randint(*self.quantity_range)
            priority = self.rng.randint(*self.priority_range)

            request = engine.create_request(self.hub_location_id, target, r_type, qty, priority)
            logger.info(
                f"New request generated: #{request.request_id} for {r_type} x{qty} "
                f"to location {target} (Priority: {priority})"
            )
            created.append(request)
        return created


# --- Scenario Persistence ---

def save_scenario(engine: AllocationEngine, filename: Union[str, Path]) -> None:
    """Dump network, stock and still-pending requests so a run can be replayed."""
    data = {
        "locations": [engine.network.get_location(i).model_dump(mode='json')
                      for i in engine.network.location_ids()],
        "routes": [r.model_dump(mode='json') for r in engine.network.routes()],
        "resources": [engine.ledger.get(t).model_dump(mode='json') for t in engine.ledger.types()],
        "requests": [r.model_dump(mode='json') for r in engine.queue
                     if r.status == RequestStatus.PENDING],
    }
    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved scenario to {filename}")


def load_scenario(filename: Union[str, Path], allow_partial: bool = False) -> Optional[AllocationEngine]:
    """
    Rebuild an engine from a saved scenario.
    Returns None if the file is missing or unreadable.
    """
    try:
        with open(filename, 'r') as f:
            data: Dict[str, Any] = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning(f"Scenario file {filename} not found or invalid.")
        return None

    try:
        network = RoutingGraph()
        for item in data.get('locations', []):
            network.add_location(Location(**item))
        # Each direction was saved separately and keeps its own state
        for item in data.get('routes', []):
            network.insert_route(Route(**item))

        ledger = ResourceLedger([Resource(**item) for item in data.get('resources', [])])
        engine = AllocationEngine(network, ledger, allow_partial=allow_partial)

        for item in data.get('requests', []):
            engine.submit(Request(**item))
    except (ValidationError, ValueError) as e:
        logger.error(f"Scenario {filename} failed validation: {e}")
        return None

    logger.info(
        f"Scenario loaded: {len(network.locations)} locations, "
        f"{len(ledger.types())} resource types, {len(engine.queue)} pending requests"
    )
    return engine
