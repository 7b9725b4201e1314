"""Tests for the capacity-constrained routing graph."""

import pytest

from models import Location
from allocator.network import RoutingGraph


def test_add_route_creates_independent_directions(graph):
    forward = graph.get_route(1, 2)
    backward = graph.get_route(2, 1)
    assert forward is not None and backward is not None
    assert forward is not backward

    graph.add_load(1, 2, 30)
    assert forward.current_load == 30
    assert backward.current_load == 0


def test_heavy_load_avoids_narrow_direct_route(graph):
    assert graph.find_feasible_path(1, 3, 60) == [1, 2, 3]


def test_light_load_takes_cheapest_path(graph):
    # Direct route costs 20, the detour 10: the detour still wins on cost
    assert graph.find_feasible_path(1, 3, 10) == [1, 2, 3]
    graph.set_route_operational(1, 2, False)
    assert graph.find_feasible_path(1, 3, 10) == [1, 3]


def test_no_path_when_every_route_is_too_small(graph):
    assert graph.find_feasible_path(1, 3, 101) == []


def test_unknown_endpoints_return_empty(graph):
    assert graph.find_feasible_path(1, 99, 1) == []
    assert graph.find_feasible_path(99, 1, 1) == []


def test_source_equals_destination(graph):
    assert graph.find_feasible_path(2, 2, 10) == [2]


def test_closed_routes_are_excluded(graph):
    graph.set_route_operational(2, 3, False)
    assert graph.find_feasible_path(1, 3, 60) == []
    path = graph.find_feasible_path(1, 3, 40)
    assert path == [1, 3]


def test_set_route_operational_toggles_both_directions(graph):
    assert graph.set_route_operational(1, 2, False) is True
    assert not graph.get_route(1, 2).is_operational
    assert not graph.get_route(2, 1).is_operational
    assert graph.set_route_operational(2, 1, True) is True
    assert graph.get_route(1, 2).is_operational


def test_set_route_operational_missing_route_is_noop(graph):
    assert graph.set_route_operational(1, 99, False) is False


def test_add_load_respects_capacity_and_status(graph):
    graph.add_load(1, 2, 90)
    graph.add_load(1, 2, 20)  # would exceed capacity
    assert graph.get_route(1, 2).current_load == 90

    graph.set_route_operational(2, 3, False)
    graph.add_load(2, 3, 10)
    assert graph.get_route(2, 3).current_load == 0


def test_closed_route_keeps_its_load(graph):
    graph.add_load(1, 2, 40)
    graph.set_route_operational(1, 2, False)
    graph.add_load(1, 2, 10)
    assert graph.get_route(1, 2).current_load == 40
    assert graph.get_route(2, 1).current_load == 0


def test_add_load_zero_changes_nothing(graph):
    before = [r.model_dump() for r in graph.routes()]
    graph.add_load(1, 2, 0)
    assert [r.model_dump() for r in graph.routes()] == before


def test_can_carry(graph):
    assert graph.can_carry(1, 3, 50)
    assert not graph.can_carry(1, 3, 51)
    assert not graph.can_carry(3, 99, 1)


def test_paths_never_use_infeasible_edges(graph):
    graph.add_load(2, 3, 80)
    graph.set_route_operational(1, 3, False)
    for load in (1, 10, 20, 21, 50):
        path = graph.find_feasible_path(1, 3, load)
        for a, b in zip(path, path[1:]):
            route = graph.get_route(a, b)
            assert route.is_operational
            assert route.current_load + load <= route.capacity
    assert graph.find_feasible_path(1, 3, 21) == []


def test_ties_go_to_first_discovered_route():
    g = RoutingGraph()
    for loc_id in (1, 2, 3, 4):
        g.add_location(Location(id=loc_id, name=f"L{loc_id}"))
    g.add_route(1, 2, 100, 5)
    g.add_route(1, 3, 100, 5)
    g.add_route(2, 4, 100, 5)
    g.add_route(3, 4, 100, 5)
    assert g.find_feasible_path(1, 4, 10) == [1, 2, 4]


def test_path_cost(graph):
    assert graph.path_cost([1, 2, 3]) == 10
    assert graph.path_cost([1]) == 0
    with pytest.raises(ValueError):
        graph.path_cost([3, 99])


def test_seeded_initial_load_is_reproducible():
    def build(seed):
        g = RoutingGraph(seed=seed, seed_initial_load=True)
        g.add_route(1, 2, 1000, 5)
        g.add_route(2, 3, 1000, 5)
        return [r.current_load for r in g.routes()]

    loads = build(42)
    assert loads == build(42)
    assert all(200 <= load <= 690 for load in loads)


def test_explicit_initial_load_fraction():
    g = RoutingGraph()
    forward, backward = g.add_route(1, 2, 200, 1, initial_load_fraction=0.5)
    assert forward.current_load == 100
    assert backward.current_load == 100
    with pytest.raises(ValueError):
        g.add_route(2, 3, 200, 1, initial_load_fraction=1.5)


def test_location_operability(graph):
    assert graph.is_location_operational(1)
    assert not graph.is_location_operational(42)
    assert graph.set_location_operational(1, False)
    assert not graph.is_location_operational(1)
    assert graph.set_location_operational(42, False) is False


def test_duplicate_location_rejected(graph):
    with pytest.raises(ValueError):
        graph.add_location(Location(id=1, name="Again"))
