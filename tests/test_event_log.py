"""Tests for the event logging sink."""

import logging

from models import AllocationEvent, NetworkChangeEvent, StockCriticalEvent, StatusEvent
from allocator.event_log import EventLogger, EVENT_LOGGER_NAME


def test_format_allocation_and_network_events():
    allocation = AllocationEvent(source_id=1, target_id=2, resource_type="Water", quantity=10)
    line = EventLogger.format_event(allocation)
    assert line.startswith("Allocated Water x10 from Loc1 to Loc2 at ")

    closed = NetworkChangeEvent(source_id=1, target_id=3, is_operational=False)
    assert EventLogger.format_event(closed) == "Route from Loc1 to Loc3 is now CLOSED"

    critical = StockCriticalEvent(resource_type="Water", available=5, critical_level=10)
    assert "below critical level" in EventLogger.format_event(critical)

    status = StatusEvent(message="no route", request_id=4)
    assert EventLogger.format_event(status) == "Request #4: no route"


def test_subscribed_logger_records_engine_events(engine, caplog):
    sink = EventLogger()
    engine.subscribe(sink)
    engine.create_request(1, 2, "Water", 10, priority=5)

    with caplog.at_level(logging.INFO, logger=EVENT_LOGGER_NAME):
        engine.run_cycle(1)
        engine.close_route(1, 2)

    messages = [r.getMessage() for r in caplog.records if r.name == EVENT_LOGGER_NAME]
    assert any(m.startswith("Allocated Water x10") for m in messages)
    assert "Route from Loc1 to Loc2 is now CLOSED" in messages


def test_file_handler_appends(tmp_path, engine):
    log_file = tmp_path / "events.log"
    sink = EventLogger(str(log_file))
    try:
        sink.log("Beginning of Day 1")
        request = engine.create_request(1, 2, "Water", 10, priority=5)
        sink.log_request(request)
    finally:
        sink.close()

    content = log_file.read_text()
    assert "Beginning of Day 1" in content
    assert "Request #1 (Water x10) from Loc1 to Loc2 - Status: PENDING" in content
