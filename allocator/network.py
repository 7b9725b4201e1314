"""
Transportation Network (Routing Graph).

Nodes are Locations (hospitals, shelters, warehouses); edges are Routes.
Answers the question: "What is the cheapest way to move this load from A to B
using only routes that are open and have spare capacity for it?"
"""

import heapq
import itertools
import logging
import random
from typing import Dict, Iterator, List, Optional, Tuple

from models import Location, Route
from .errors import InvariantViolation

logger = logging.getLogger(__name__)


class RoutingGraph:
    """
    Adjacency-list graph of capacity-limited routes.

    Location existence/operability is kept apart from the adjacency lists:
    a location may exist with no routes, and a route endpoint may have no
    Location record.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        seed_initial_load: bool = False,
        initial_load_range: Tuple[int, int] = (20, 69)
    ):
        self.adjacency: Dict[int, List[Route]] = {}
        self.locations: Dict[int, Location] = {}

        # Background traffic generator, owned by the graph only
        self.rng = random.Random(seed)
        self.seed_initial_load = seed_initial_load
        self.initial_load_range = initial_load_range

    # --- Locations ---

    def add_location(self, location: Location) -> None:
        if location.id in self.locations:
            raise ValueError(f"Location {location.id} already exists")
        self.locations[location.id] = location

    def get_location(self, location_id: int) -> Optional[Location]:
        return self.locations.get(location_id)

    def is_location_operational(self, location_id: int) -> bool:
        location = self.locations.get(location_id)
        return location is not None and location.is_operational

    def set_location_operational(self, location_id: int, operational: bool) -> bool:
        location = self.locations.get(location_id)
        if location is None:
            logger.warning(f"Cannot change status of unknown location {location_id}")
            return False
        location.update_status(operational)
        return True

    def location_ids(self) -> List[int]:
        return sorted(self.locations)

    # --- Routes ---

    def add_route(
        self,
        source: int,
        target: int,
        capacity: int,
        cost: int,
        operational: bool = True,
        distance: float = 1.0,
        route_type: str = "road",
        initial_load_fraction: Optional[float] = None
    ) -> Tuple[Route, Route]:
        """
        Link two locations with a pair of independent Route records
        (source->target and target->source).
        """
        forward = Route(source=source, target=target, capacity=capacity, cost=cost,
                        is_operational=operational, distance=distance, route_type=route_type)
        backward = Route(source=target, target=source, capacity=capacity, cost=cost,
                         is_operational=operational, distance=distance, route_type=route_type)

        for route in (forward, backward):
            route.current_load = self._initial_load(capacity, initial_load_fraction)
            self.adjacency.setdefault(route.source, []).append(route)

        return forward, backward

    def insert_route(self, route: Route) -> None:
        """Add a single directed record as-is (used when restoring a saved network)."""
        self.adjacency.setdefault(route.source, []).append(route)

    def _initial_load(self, capacity: int, fraction: Optional[float]) -> int:
        if fraction is not None:
            if not 0.0 <= fraction <= 1.0:
                raise ValueError("initial_load_fraction must be within [0, 1]")
            return int(capacity * fraction)
        if not self.seed_initial_load:
            return 0
        low, high = self.initial_load_range
        return int(capacity * self.rng.randint(low, high) / 100)

    def get_routes(self, node: int) -> List[Route]:
        return self.adjacency.get(node, [])

    def get_route(self, source: int, target: int) -> Optional[Route]:
        """First matching route. Parallel routes between the same pair are not supported."""
        for route in self.adjacency.get(source, []):
            if route.target == target:
                return route
        return None

    def routes(self) -> Iterator[Route]:
        for node in sorted(self.adjacency):
            yield from self.adjacency[node]

    def set_route_operational(self, source: int, target: int, operational: bool) -> bool:
        """
        Open or close BOTH directions between two locations.
        Returns False (and changes nothing) if no route links them.
        """
        changed = False
        for a, b in ((source, target), (target, source)):
            route = self.get_route(a, b)
            if route is not None:
                route.is_operational = operational
                changed = True
        if not changed:
            logger.debug(f"No route between {source} and {target}, status unchanged")
        return changed

    def can_carry(self, source: int, target: int, amount: int) -> bool:
        route = self.get_route(source, target)
        return route is not None and route.can_add_load(amount)

    def add_load(self, source: int, target: int, amount: int) -> None:
        """
        Put load on the source->target direction only.
        Silent no-op when the route is missing, closed or too full: check can_carry first.
        """
        if amount < 0:
            raise ValueError("Load amount must be non-negative")
        route = self.get_route(source, target)
        if route is None:
            return
        route.add_load(amount)
        if route.current_load > route.capacity:
            raise InvariantViolation(f"Route {source}->{target} loaded above capacity")

    # --- Path Finding ---

    def has_node(self, node: int) -> bool:
        return node in self.adjacency or node in self.locations

    def find_feasible_path(self, source: int, destination: int, required_load: int = 1) -> List[int]:
        """
        Minimum-cost path using only routes that can take `required_load` more.

        Dijkstra over non-negative integer costs. Routes failing the
        capacity/operational test are skipped entirely. On equal cost the
        first route examined keeps the predecessor slot, and equal-cost
        frontier entries pop in discovery order.

        Returns [] when an endpoint is unknown or no compliant path exists.
        """
        if not self.has_node(source) or not self.has_node(destination):
            return []
        if source == destination:
            return [source]

        dist: Dict[int, int] = {source: 0}
        prev: Dict[int, int] = {}
        counter = itertools.count()
        frontier: List[Tuple[int, int, int]] = [(0, next(counter), source)]

        while frontier:
            current_dist, _, node = heapq.heappop(frontier)
            if node == destination:
                break
            if current_dist > dist.get(node, current_dist):
                continue  # Stale entry

            for route in self.adjacency.get(node, []):
                if not route.can_add_load(required_load):
                    continue
                candidate = current_dist + route.cost
                if candidate < dist.get(route.target, candidate + 1):
                    dist[route.target] = candidate
                    prev[route.target] = node
                    heapq.heappush(frontier, (candidate, next(counter), route.target))

        if destination not in prev:
            logger.debug(f"No feasible path {source}->{destination} for load {required_load}")
            return []

        path = [destination]
        while path[-1] != source:
            path.append(prev[path[-1]])
        path.reverse()
        return path

    def path_cost(self, path: List[int]) -> int:
        total = 0
        for a, b in zip(path, path[1:]):
            route = self.get_route(a, b)
            if route is None:
                raise ValueError(f"Path uses missing route {a}->{b}")
            total += route.cost
        return total
