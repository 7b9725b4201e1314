"""
Disaster Injection.

Randomly breaks things around the central hub: closes a route, shrinks a
resource's stock, or takes a location offline. Every change goes through the
engine's public entry points so the usual invariants and events apply.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .engine import AllocationEngine

logger = logging.getLogger(__name__)


@dataclass
class DisruptionRecord:
    """What a disaster event actually did."""
    kind: str  # "network", "shortage" or "location"
    description: str
    target: Tuple


class DisasterSimulator:
    """
    Seeded source of disruptions. Owns its own RNG so disaster rolls never
    disturb request generation or route seeding.
    """

    EVENT_KINDS = ("network", "shortage", "location")

    def __init__(
        self,
        engine: AllocationEngine,
        seed: Optional[int] = None,
        hub_location_id: int = 1,
        shortage_percent_range: Tuple[int, int] = (10, 30)
    ):
        self.engine = engine
        self.rng = random.Random(seed)
        self.hub_location_id = hub_location_id
        self.shortage_percent_range = shortage_percent_range

    def maybe_run(self, probability: float) -> Optional[DisruptionRecord]:
        """Roll once; run a random event with the given probability."""
        if self.rng.random() < probability:
            return self.run_random_event()
        return None

    def run_random_event(self) -> Optional[DisruptionRecord]:
        kind = self.rng.choice(self.EVENT_KINDS)
        if kind == "network":
            return self.simulate_network_disruption()
        if kind == "shortage":
            return self.simulate_resource_shortage()
        return self.simulate_location_disruption()

    def simulate_network_disruption(self) -> Optional[DisruptionRecord]:
        """Close one random route leaving the hub (both directions)."""
        routes = self.engine.network.get_routes(self.hub_location_id)
        if not routes:
            return None

        route = self.rng.choice(routes)
        self.engine.close_route(route.source, route.target)
        logger.warning(f"[DISASTER] Route between {route.source} and {route.target} has been disrupted")
        return DisruptionRecord(
            "network",
            f"Route between locations {route.source} and {route.target} disrupted",
            (route.source, route.target)
        )

    def simulate_resource_shortage(self, resource_types: Optional[Sequence[str]] = None) -> Optional[DisruptionRecord]:
        """Destroy 10-30% (by default) of one random resource type's available stock."""
        candidates: List[str] = list(resource_types) if resource_types else self.engine.ledger.types()
        if not candidates:
            return None

        resource_type = self.rng.choice(candidates)
        low, high = self.shortage_percent_range
        percent = self.rng.randint(low, high)

        lost = self.engine.apply_shortage(resource_type, percent)
        if lost <= 0:
            return None

        logger.warning(f"[DISASTER] {resource_type} shortage! Lost {lost} units ({percent}%)")
        return DisruptionRecord(
            "shortage",
            f"{resource_type} reduced by {lost} units ({percent}%)",
            (resource_type, lost, percent)
        )

    def simulate_location_disruption(self) -> Optional[DisruptionRecord]:
        """Take one random neighbour of the hub offline. The hub itself is spared."""
        neighbours = [
            route.target for route in self.engine.network.get_routes(self.hub_location_id)
            if route.target != self.hub_location_id
        ]
        if not neighbours:
            return None

        location_id = self.rng.choice(neighbours)
        location = self.engine.network.get_location(location_id)
        if location is None or not location.is_operational:
            return None

        self.engine.disrupt_location(location_id)
        logger.warning(f"[DISASTER] Location {location_id} ({location.name}) is now OFFLINE")
        return DisruptionRecord(
            "location",
            f"Location {location_id} ({location.name}) is now OFFLINE",
            (location_id,)
        )
