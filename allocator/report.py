"""
Report Generation.

Builds plain-text and JSON-ready reports from engine state. Nothing here
prints: callers decide whether to show a report, log it or write it to disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .engine import AllocationEngine

logger = logging.getLogger(__name__)

RULE = "=" * 10


def _table(headers: List[str], rows: List[List[Any]], widths: List[int]) -> List[str]:
    lines = ["".join(str(h).ljust(w) for h, w in zip(headers, widths))]
    lines.append("-" * sum(widths))
    for row in rows:
        lines.append("".join(str(c).ljust(w) for c, w in zip(row, widths)))
    return lines


class ReportGenerator:
    """Read-only view over an AllocationEngine."""

    def __init__(self, engine: AllocationEngine):
        self.engine = engine

    def daily_status(self, day: int) -> str:
        summary = self.engine.summary(day)
        lines = [f"{RULE} DAY {day} STATUS REPORT {RULE}", "", "Network Summary:"]
        lines.append(f"  Operational Locations: {summary.operational_locations}/{summary.total_locations}")
        lines.append(f"  Requests processed: {summary.processed_count} (fulfilled: {summary.fulfilled_count})")

        for outcome in summary.outcomes:
            route = " -> ".join(str(n) for n in outcome.path) if outcome.path else "-"
            lines.append(
                f"  #{outcome.request_id} {outcome.resource_type} "
                f"{outcome.fulfilled_quantity}/{outcome.required_quantity} "
                f"{outcome.status.value} via {route}"
                + (f" ({outcome.note})" if outcome.note else "")
            )

        lines.append("")
        lines.append(self.critical_levels())
        return "\n".join(lines)

    def critical_levels(self) -> str:
        lines = [f"{RULE} Critical Resources Alert {RULE}"]
        critical = self.engine.ledger.critical_resources()
        for resource_type in critical:
            resource = self.engine.ledger.get(resource_type)
            lines.append(
                f"WARNING: {resource_type} is below critical level! "
                f"Available: {resource.available_quantity} (Critical threshold: {resource.critical_level})"
            )
        if not critical:
            lines.append("All resources are above critical levels.")
        return "\n".join(lines)

    def network_status(self) -> str:
        network = self.engine.network
        lines = [f"{RULE} Network Status {RULE}", "Locations:"]
        for loc_id in network.location_ids():
            loc = network.get_location(loc_id)
            status = "Operational" if loc.is_operational else "Offline"
            lines.append(f"  ID: {loc.id}, Name: {loc.name}, Status: {status}")

        lines.append("")
        lines.append("Routes:")
        for route in network.routes():
            status = "Open" if route.is_operational else "Closed"
            lines.append(
                f"  {route.source} -> {route.target} [{route.route_type}, {status}, "
                f"{route.current_load}/{route.capacity} capacity, {route.cost} cost, "
                f"{route.distance} distance]"
            )
        return "\n".join(lines)

    def inventory(self) -> str:
        rows = []
        for resource_type in self.engine.ledger.types():
            r = self.engine.ledger.get(resource_type)
            rows.append([
                resource_type,
                r.total_quantity,
                r.available_quantity,
                f"{r.expiry_days}d" if r.expiry_days > 0 else "N/A",
                r.unit_cost,
                r.weight,
                "YES" if r.is_below_critical() else "No",
            ])
        lines = [f"{RULE} Central Resource Inventory {RULE}"]
        lines += _table(
            ["Type", "Total Qty", "Available", "Expiry", "Cost", "Weight", "Critical"],
            rows, [16, 11, 11, 8, 8, 8, 9]
        )
        return "\n".join(lines)

    def allocations(self) -> str:
        rows = [
            [a.source_id, a.target_id, a.resource_type, a.quantity,
             a.timestamp.isoformat(timespec='milliseconds')]
            for a in self.engine.state.allocations
        ]
        lines = [f"{RULE} Resource Allocations {RULE}"]
        lines += _table(["Source", "Target", "Resource", "Quantity", "Timestamp"], rows, [8, 8, 16, 10, 24])
        return "\n".join(lines)

    def resource_utilization(self, location_ids: Optional[List[int]] = None) -> str:
        network = self.engine.network
        lines = [f"{RULE} RESOURCE UTILIZATION REPORT {RULE}"]
        for loc_id in location_ids if location_ids is not None else network.location_ids():
            loc = network.get_location(loc_id)
            if loc is None:
                lines.append(f"Location ID: {loc_id} - No data available.")
                continue
            lines.append(f"Location ID: {loc_id} ({loc.name})")
            if not loc.resource_inventory:
                lines.append("  (empty)")
            for resource_type, qty in sorted(loc.resource_inventory.items()):
                lines.append(f"  {resource_type:<20} {qty:>8}")
        return "\n".join(lines)

    def failures(self) -> str:
        report = self.engine.state.get_failure_report()
        lines = [f"{RULE} FAILURE ANALYSIS {RULE}"]
        for fail in report:
            lines.append(f"[P{fail['priority']}] #{fail['request_id']} {fail['resource_type']} x{fail['quantity']}")
            lines.append(f"   Reason: {fail['reason']}")
        if not report:
            lines.append("No failed requests.")
        return "\n".join(lines)

    def full_report(self, day: Optional[int] = None) -> str:
        day = self.engine.current_day if day is None else day
        sections = [
            self.daily_status(day),
            self.network_status(),
            self.resource_utilization(),
            self.inventory(),
            self.allocations(),
            self.failures(),
        ]
        return "\n\n".join(sections) + "\n"

    def as_dict(self) -> Dict[str, Any]:
        """JSON-ready snapshot of the whole run."""
        engine = self.engine
        return {
            "day": engine.current_day,
            "locations": {
                str(loc_id): engine.network.get_location(loc_id).model_dump(mode='json')
                for loc_id in engine.network.location_ids()
            },
            "routes": [r.model_dump(mode='json') for r in engine.network.routes()],
            "resources": {t: engine.ledger.get(t).model_dump(mode='json') for t in engine.ledger.types()},
            "outcomes": [o.model_dump(mode='json') for o in engine.state.outcomes],
            "allocations": [a.model_dump(mode='json') for a in engine.state.allocations],
            "statistics": engine.state.get_statistics(),
            "failures": engine.state.get_failure_report(),
        }

    def save(self, path: Union[str, Path], day: Optional[int] = None) -> Path:
        """Write the full text report to `path` (parent directories created)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.full_report(day))
        logger.info(f"Report successfully saved to '{path}'")
        return path

    def save_json(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.as_dict(), f, indent=2)
        logger.info(f"Dashboard data exported to '{path}'")
        return path
