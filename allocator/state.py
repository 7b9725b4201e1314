"""
Allocation State Management.

This module acts as the 'Memory' of the allocator. It tracks:
1. Committed allocations (who got what, from where).
2. Per-request outcomes for every processed request.
3. Detailed failure reporting (first failing precondition per request).
"""

from typing import List, Dict, Any
from collections import defaultdict
from dataclasses import dataclass, field

from models import AllocationEvent, AllocationOutcome, Request, RequestStatus
from .constraints import AllocationViolation


@dataclass
class FailureRecord:
    """Why a request could not be served."""
    request: Request
    day: int
    violations: List[AllocationViolation] = field(default_factory=list)


class AllocationState:
    """
    Maintains the mutable record of everything the engine has done.
    """

    def __init__(self):
        """Initialize empty allocation state."""
        # The Master Ledger of movements
        self.allocations: List[AllocationEvent] = []

        # One entry per processed request, in processing order
        self.outcomes: List[AllocationOutcome] = []

        # Failure Tracking
        self.failures: Dict[int, FailureRecord] = {}

        # Delivered units per resource type
        self.delivered: Dict[str, int] = defaultdict(int)

    def add_allocation(self, event: AllocationEvent) -> None:
        self.allocations.append(event)
        self.delivered[event.resource_type] += event.quantity

    def add_outcome(self, outcome: AllocationOutcome) -> None:
        self.outcomes.append(outcome)

    def record_failure(self, request: Request, violation: AllocationViolation, day: int) -> None:
        if request.request_id not in self.failures:
            self.failures[request.request_id] = FailureRecord(request=request, day=day)
        self.failures[request.request_id].violations.append(violation)

    # --- Query Methods ---

    def outcomes_for_day(self, day: int) -> List[AllocationOutcome]:
        return [o for o in self.outcomes if o.day == day]

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """Aggregate counts for the final report."""
        status_counts = defaultdict(int)
        for outcome in self.outcomes:
            status_counts[outcome.status.value] += 1

        total = len(self.outcomes)
        served = sum(status_counts.get(s.value, 0) for s in (RequestStatus.FULFILLED, RequestStatus.PARTIALLY_FULFILLED))
        fulfilment_rate = (served / total * 100) if total else 0.0

        # --- Priority Breakdown Analysis ---
        priority_stats = defaultdict(lambda: {"served": 0, "total": 0})
        for outcome in self.outcomes:
            if outcome.status == RequestStatus.CANCELLED:
                continue
            s = priority_stats[outcome.priority]
            s["total"] += 1
            if outcome.status in (RequestStatus.FULFILLED, RequestStatus.PARTIALLY_FULFILLED):
                s["served"] += 1

        breakdown = {}
        for p in sorted(priority_stats, reverse=True):
            s = priority_stats[p]
            rate = s["served"] / s["total"] * 100
            breakdown[f"P{p}"] = f"{rate:.1f}% ({s['served']}/{s['total']})"

        failure_causes = defaultdict(int)
        for record in self.failures.values():
            failure_causes[record.violations[0].constraint_type] += 1

        return {
            "processed": total,
            "status_counts": dict(status_counts),
            "fulfilment_rate": f"{fulfilment_rate:.1f}%",
            "priority_breakdown": breakdown,
            "allocation_count": len(self.allocations),
            "delivered": dict(self.delivered),
            "failure_causes": dict(failure_causes),
        }

    def get_failure_report(self) -> List[Dict]:
        """
        Human-readable list of what failed and why.
        Most urgent requests first.
        """
        report = []
        for request_id, record in self.failures.items():
            first = record.violations[0]
            report.append({
                "request_id": request_id,
                "day": record.day,
                "resource_type": record.request.resource_type,
                "quantity": record.request.required_quantity,
                "priority": record.request.priority,
                "source": record.request.source_location_id,
                "target": record.request.target_location_id,
                "cause": first.constraint_type,
                "reason": first.reason,
            })

        report.sort(key=lambda x: (-x["priority"], x["request_id"]))
        return report

    def clear(self) -> None:
        """Reset state (useful for testing or re-running)."""
        self.allocations.clear()
        self.outcomes.clear()
        self.failures.clear()
        self.delivered.clear()
