"""
Error taxonomy for the allocation core.

Infeasible outcomes (no route, not enough stock) are NOT errors: they end up
as an INVALID request status with a note. Only caller bugs and broken
invariants raise.
"""


class AllocatorError(Exception):
    """Base class for every error raised by the allocator."""


class NotFoundError(AllocatorError, KeyError):
    """Unknown location id, resource type or request id passed to a strict mutator."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key!r}")

    def __str__(self) -> str:
        return self.args[0]


class EmptyQueueError(AllocatorError, IndexError):
    """peek/pop on an empty request queue. Callers must check is_empty() first."""


class InvariantViolation(AllocatorError, AssertionError):
    """Internal consistency broke (negative load, stale heap index...). Fatal."""
