"""Tests for the seeded disaster simulator."""

from models import RequestStatus
from allocator.disruption import DisasterSimulator
from allocator.engine import AllocationEngine
from allocator.network import RoutingGraph
from generators.data_factory import DataGenerator


def test_network_disruption_closes_a_hub_route(demo_engine):
    sim = DisasterSimulator(demo_engine, seed=3)
    record = sim.simulate_network_disruption()

    assert record.kind == "network"
    source, target = record.target
    assert source == 1
    assert not demo_engine.network.get_route(source, target).is_operational
    assert not demo_engine.network.get_route(target, source).is_operational


def test_shortage_reduces_stock_within_range(demo_engine):
    sim = DisasterSimulator(demo_engine, seed=5)
    before = {t: demo_engine.ledger.get(t).total_quantity for t in demo_engine.ledger.types()}
    record = sim.simulate_resource_shortage()

    resource_type, lost, percent = record.target
    assert 10 <= percent <= 30
    assert demo_engine.ledger.get(resource_type).total_quantity == before[resource_type] - lost


def test_location_disruption_spares_hub(demo_engine):
    sim = DisasterSimulator(demo_engine, seed=11)
    record = sim.simulate_location_disruption()

    (location_id,) = record.target
    assert location_id != 1
    assert not demo_engine.network.is_location_operational(location_id)
    assert demo_engine.network.is_location_operational(1)


def test_location_disruption_invalidates_pending_requests(demo_engine):
    sim = DisasterSimulator(demo_engine, seed=11)
    (offline,) = sim.simulate_location_disruption().target
    summary = demo_engine.run_cycle(1)

    for outcome in summary.outcomes:
        request = demo_engine.get_request(outcome.request_id)
        if offline in (request.source_location_id, request.target_location_id):
            assert outcome.status == RequestStatus.INVALID
            assert "not operational" in outcome.note


def test_same_seed_same_events(demo_engine):
    other = AllocationEngine(RoutingGraph(seed=7))
    DataGenerator(seed=7).build_demo_scenario(other)

    def describe(engine):
        sim = DisasterSimulator(engine, seed=99)
        records = [sim.run_random_event() for _ in range(5)]
        return [(r.kind, r.target) if r else None for r in records]

    assert describe(demo_engine) == describe(other)


def test_probability_zero_never_fires(demo_engine):
    sim = DisasterSimulator(demo_engine, seed=1)
    assert all(sim.maybe_run(0.0) is None for _ in range(20))


def test_no_hub_routes_means_no_event(engine):
    sim = DisasterSimulator(engine, seed=1, hub_location_id=42)
    assert sim.simulate_network_disruption() is None
    assert sim.simulate_location_disruption() is None
