from pathlib import Path
import sys

import pytest

# Put the project root on the import path regardless of where pytest is run from
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import Location, Resource
from allocator.engine import AllocationEngine
from allocator.ledger import ResourceLedger
from allocator.network import RoutingGraph
from generators.data_factory import DataGenerator


@pytest.fixture
def graph():
    """A->B->C chain plus an expensive, narrow direct A->C route (ids 1, 2, 3)."""
    g = RoutingGraph()
    for loc_id, name in ((1, "A"), (2, "B"), (3, "C")):
        g.add_location(Location(id=loc_id, name=name))
    g.add_route(1, 2, capacity=100, cost=5)
    g.add_route(2, 3, capacity=100, cost=5)
    g.add_route(1, 3, capacity=50, cost=20)
    return g


@pytest.fixture
def ledger():
    return ResourceLedger([
        Resource(type="Water", total_quantity=100, weight=1.0, critical_level=10),
        Resource(type="Medical Kits", total_quantity=50, weight=2.0, critical_level=5),
    ])


@pytest.fixture
def engine(graph, ledger):
    return AllocationEngine(graph, ledger)


@pytest.fixture
def demo_engine():
    """The five-site demo scenario with no background route traffic."""
    engine = AllocationEngine(RoutingGraph(seed=7))
    DataGenerator(seed=7).build_demo_scenario(engine)
    return engine
