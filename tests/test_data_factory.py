"""Tests for scenario building, daily requests and scenario persistence."""

from models import RequestStatus
from allocator.engine import AllocationEngine
from allocator.network import RoutingGraph
from generators.data_factory import DataGenerator, load_scenario, save_scenario


def test_demo_scenario_shape(demo_engine):
    network = demo_engine.network
    assert network.location_ids() == [1, 2, 3, 4, 5]
    assert len(list(network.routes())) == 16
    assert not network.get_route(2, 3).is_operational
    assert len(demo_engine.ledger.types()) == 5
    assert network.get_location(3).get_available_quantity("Blankets") == 200
    assert len(demo_engine.queue) == 3
    assert demo_engine.queue.peek_top().request_id == 1


def test_daily_requests_are_seeded(demo_engine):
    other = AllocationEngine(RoutingGraph())
    DataGenerator(seed=7).build_demo_scenario(other)

    first = DataGenerator(seed=21).generate_daily_requests(demo_engine)
    second = DataGenerator(seed=21).generate_daily_requests(other)

    def key(requests):
        return [(r.target_location_id, r.resource_type, r.required_quantity, r.priority) for r in requests]

    assert key(first) == key(second)
    assert 1 <= len(first) <= 3
    for request in first:
        assert request.source_location_id == 1
        assert request.target_location_id in (2, 3, 4, 5)
        assert 50 <= request.required_quantity <= 500
        assert 3 <= request.priority <= 10
        assert request.request_id in demo_engine.queue


def test_daily_request_ids_continue(demo_engine):
    created = DataGenerator(seed=1, request_count_range=(2, 2)).generate_daily_requests(demo_engine)
    assert [r.request_id for r in created] == [4, 5]


def test_scenario_round_trip(tmp_path, demo_engine):
    demo_engine.network.add_load(1, 2, 100)
    demo_engine.cancel_request(2)
    path = tmp_path / "scenario.json"
    save_scenario(demo_engine, path)

    restored = load_scenario(path)
    assert restored is not None
    assert restored.network.get_route(1, 2).current_load == 100
    assert restored.network.get_route(2, 1).current_load == 0
    assert not restored.network.get_route(3, 2).is_operational
    assert restored.ledger.get("Water").total_quantity == 5000
    assert sorted(r.request_id for r in restored.queue) == [1, 3]
    assert all(r.status == RequestStatus.PENDING for r in restored.queue)
    assert restored.next_request_id == 4


def test_load_missing_or_broken_scenario(tmp_path):
    assert load_scenario(tmp_path / "missing.json") is None
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert load_scenario(broken) is None
    invalid = tmp_path / "invalid.json"
    invalid.write_text('{"locations": [{"id": 1, "name": ""}]}')
    assert load_scenario(invalid) is None


def test_load_scenario_with_duplicate_ids(tmp_path):
    locations = tmp_path / "locations.json"
    locations.write_text('{"locations": [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}]}')
    assert load_scenario(locations) is None

    requests = tmp_path / "requests.json"
    request = (
        '{"request_id": 1, "source_location_id": 1, "target_location_id": 2, '
        '"resource_type": "Water", "required_quantity": 5, "priority": 5}'
    )
    requests.write_text(f'{{"requests": [{request}, {request}]}}')
    assert load_scenario(requests) is None
