"""Tests for report generation."""

import json

from allocator.report import ReportGenerator


def test_daily_status_lists_outcomes(demo_engine):
    demo_engine.run_cycle(1)
    text = ReportGenerator(demo_engine).daily_status(1)

    assert "DAY 1 STATUS REPORT" in text
    assert "Operational Locations: 5/5" in text
    assert "1 -> 2" in text
    assert "INVALID" in text
    assert "All resources are above critical levels." in text


def test_network_status_shows_closed_route(demo_engine):
    text = ReportGenerator(demo_engine).network_status()
    assert "2 -> 3 [road, Closed" in text
    assert "Central Warehouse" in text


def test_inventory_and_allocations(demo_engine):
    demo_engine.run_cycle(1)
    reports = ReportGenerator(demo_engine)

    inventory = reports.inventory()
    assert "Medical Kits" in inventory
    assert "N/A" in inventory  # Blankets do not expire

    allocations = reports.allocations()
    assert allocations.count("\n") == 1 + 1 + len(demo_engine.state.allocations)


def test_critical_warning(engine):
    engine.ledger.allocate("Water", 95)
    assert "WARNING: Water is below critical level" in ReportGenerator(engine).critical_levels()


def test_utilization_reports_missing_locations(demo_engine):
    text = ReportGenerator(demo_engine).resource_utilization([2, 9])
    assert "Downtown Hospital" in text
    assert "Location ID: 9 - No data available." in text


def test_save_writes_full_report(tmp_path, demo_engine):
    demo_engine.run_cycle(1)
    reports = ReportGenerator(demo_engine)
    path = reports.save(tmp_path / "out" / "report.txt", day=1)

    content = path.read_text()
    assert "DAY 1 STATUS REPORT" in content
    assert "FAILURE ANALYSIS" in content


def test_json_export(tmp_path, demo_engine):
    demo_engine.run_cycle(1)
    path = ReportGenerator(demo_engine).save_json(tmp_path / "dashboard.json")
    data = json.loads(path.read_text())

    assert set(data["locations"]) == {"1", "2", "3", "4", "5"}
    assert len(data["routes"]) == 16
    assert len(data["outcomes"]) == 3
    assert data["statistics"]["processed"] == 3
    assert data["failures"][0]["request_id"] == 3
