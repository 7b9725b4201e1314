"""
Indexed Priority Queue for pending requests.

A binary max-heap on Request.priority plus a request_id -> heap slot map,
so a request can be found in O(1) and re-prioritised in O(log n).
"""

import logging
from typing import Dict, Iterator, List, Optional

from models import Request, RequestStatus
from .errors import EmptyQueueError, InvariantViolation

logger = logging.getLogger(__name__)


class RequestQueue:
    """
    Max-heap of pending requests.
    Every swap rewrites the index entry of BOTH slots involved.
    """

    def __init__(self):
        self.heap: List[Request] = []
        self.index_map: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.heap)

    def __contains__(self, request_id: int) -> bool:
        return request_id in self.index_map

    def __iter__(self) -> Iterator[Request]:
        """Snapshot in heap order (not priority order)."""
        return iter(list(self.heap))

    def is_empty(self) -> bool:
        return not self.heap

    # --- Heap Mechanics ---

    def _swap(self, i: int, j: int) -> None:
        self.heap[i], self.heap[j] = self.heap[j], self.heap[i]
        self.index_map[self.heap[i].request_id] = i
        self.index_map[self.heap[j].request_id] = j

    def _sift_up(self, index: int) -> None:
        while index > 0:
            parent = (index - 1) // 2
            if self.heap[parent].priority >= self.heap[index].priority:
                break
            self._swap(index, parent)
            index = parent

    def _sift_down(self, index: int) -> None:
        size = len(self.heap)
        while True:
            largest = index
            left = 2 * index + 1
            right = 2 * index + 2

            if left < size and self.heap[left].priority > self.heap[largest].priority:
                largest = left
            if right < size and self.heap[right].priority > self.heap[largest].priority:
                largest = right

            if largest == index:
                break
            self._swap(index, largest)
            index = largest

    # --- Public API ---

    def insert(self, request: Request) -> None:
        if request.request_id in self.index_map:
            raise ValueError(f"Request {request.request_id} is already queued")
        self.heap.append(request)
        index = len(self.heap) - 1
        self.index_map[request.request_id] = index
        self._sift_up(index)

    def peek_top(self) -> Request:
        if not self.heap:
            raise EmptyQueueError("Queue is empty")
        return self.heap[0]

    def pop_top(self) -> Request:
        """Remove and return the highest-priority request."""
        if not self.heap:
            raise EmptyQueueError("Queue is empty")

        top = self.heap[0]
        del self.index_map[top.request_id]

        last = self.heap.pop()
        if self.heap:
            # Move the last leaf into the root slot and restore order
            self.heap[0] = last
            self.index_map[last.request_id] = 0
            self._sift_down(0)
        return top

    def update_priority(self, request_id: int, new_priority: int) -> bool:
        """Re-rank a queued request. Returns False if the id is not queued."""
        index = self.index_map.get(request_id)
        if index is None:
            logger.debug(f"update_priority: request {request_id} not queued")
            return False

        request = self.heap[index]
        old_priority = request.priority
        request.priority = new_priority

        if new_priority > old_priority:
            self._sift_up(index)
        elif new_priority < old_priority:
            self._sift_down(index)
        return True

    def find_by_id(self, request_id: int) -> Optional[Request]:
        index = self.index_map.get(request_id)
        return self.heap[index] if index is not None else None

    def update_status(self, request_id: int, new_status: RequestStatus) -> bool:
        request = self.find_by_id(request_id)
        if request is None:
            return False
        request.update_status(new_status)
        return True

    def cancel(self, request_id: int) -> bool:
        """
        Flag a queued request as CANCELLED. It stays in the heap;
        whoever drains the queue skips it.
        """
        return self.update_status(request_id, RequestStatus.CANCELLED)

    def check_invariants(self) -> None:
        """Raise InvariantViolation if heap order or the index map is off."""
        if len(self.index_map) != len(self.heap):
            raise InvariantViolation(
                f"Index map holds {len(self.index_map)} ids for {len(self.heap)} heap slots"
            )
        for i, request in enumerate(self.heap):
            if self.index_map.get(request.request_id) != i:
                raise InvariantViolation(f"Stale index for request {request.request_id}")
            for child in (2 * i + 1, 2 * i + 2):
                if child < len(self.heap) and self.heap[child].priority > request.priority:
                    raise InvariantViolation(f"Heap order broken between slots {i} and {child}")
