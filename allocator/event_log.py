"""
Event Logger sink.

Subscribes to the engine and renders its structured events as log lines on
a dedicated logger, optionally mirrored to an append-mode log file.
"""

import logging
from typing import Optional

from models import (
    Request, Event,
    AllocationEvent, NetworkChangeEvent, LocationStatusEvent,
    StockCriticalEvent, ShortageEvent, StatusEvent
)

EVENT_LOGGER_NAME = "relief.events"


class EventLogger:
    """Turns engine events into timestamped log lines."""

    def __init__(self, filename: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(EVENT_LOGGER_NAME)
        self.handler: Optional[logging.Handler] = None

        if filename:
            self.handler = logging.FileHandler(filename, mode='a')
            self.handler.setFormatter(logging.Formatter('[%(asctime)s] %(message)s'))
            self.logger.addHandler(self.handler)
            self.logger.setLevel(logging.INFO)

    def __call__(self, event: Event) -> None:
        self.log(self.format_event(event))

    def close(self) -> None:
        if self.handler is not None:
            self.logger.removeHandler(self.handler)
            self.handler.close()
            self.handler = None

    def log(self, message: str) -> None:
        self.logger.info(message)

    def log_request(self, request: Request) -> None:
        self.log(
            f"Request #{request.request_id} ({request.resource_type} x{request.required_quantity}) "
            f"from Loc{request.source_location_id} to Loc{request.target_location_id} "
            f"- Status: {request.status.value}"
        )

    @staticmethod
    def format_event(event: Event) -> str:
        if isinstance(event, AllocationEvent):
            return (
                f"Allocated {event.resource_type} x{event.quantity} from Loc{event.source_id} "
                f"to Loc{event.target_id} at {event.timestamp.isoformat(timespec='milliseconds')}"
            )
        if isinstance(event, NetworkChangeEvent):
            state = "OPERATIONAL" if event.is_operational else "CLOSED"
            return f"Route from Loc{event.source_id} to Loc{event.target_id} is now {state}"
        if isinstance(event, LocationStatusEvent):
            state = "ONLINE" if event.is_operational else "OFFLINE"
            return f"Location {event.location_id} ({event.name}) is now {state}"
        if isinstance(event, StockCriticalEvent):
            return (
                f"WARNING: {event.resource_type} is below critical level! "
                f"Available: {event.available} (Critical threshold: {event.critical_level})"
            )
        if isinstance(event, ShortageEvent):
            return f"Resource shortage: {event.resource_type} reduced by {event.quantity_lost} units ({event.percent}%)"
        if isinstance(event, StatusEvent):
            prefix = f"Request #{event.request_id}: " if event.request_id is not None else ""
            return prefix + event.message
        return str(event)
