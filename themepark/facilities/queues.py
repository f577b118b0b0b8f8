# themepark/facilities/queues.py
from __future__ import annotations
import threading
from collections import deque  # O(1) pops from the head
from typing import Deque, List, Optional, Tuple

from themepark.visitors.base import Visitor


class RideQueue:
    """
    Thread-safe FIFO waiting line for a ride.

    No duplicate detection: the same visitor object may be queued twice.
    Eligibility is the ride's business, not the queue's.
    """

    def __init__(self):
        self._lock = threading.Lock()  # protects _q
        self._q: Deque[Visitor] = deque()

    # ----------------------- Query helpers -----------------------

    def size(self) -> int:
        with self._lock:
            return len(self._q)

    def is_empty(self) -> bool:
        return self.size() == 0

    def snapshot(self) -> Tuple[Visitor, ...]:
        """Current contents, head first."""
        with self._lock:
            return tuple(self._q)

    # ----------------------- Core operations -----------------------

    def enqueue(self, visitor: Visitor) -> None:
        with self._lock:
            self._q.append(visitor)

    def dequeue(self) -> Optional[Visitor]:
        """Pop the head of the line, or None if nobody is waiting."""
        with self._lock:
            if self._q:
                return self._q.popleft()
            return None

    def clear(self) -> None:
        with self._lock:
            self._q.clear()

    # ----------------------- Ride boarding -----------------------

    def get_batch_for_boarding(self, capacity: int) -> List[Visitor]:
        """
        Pop up to `capacity` visitors for the next ride cycle, in arrival order.
        Non-blocking; returns an empty list if nothing to board.
        """
        if capacity <= 0:
            return []

        with self._lock:
            taken: List[Visitor] = []
            while len(taken) < capacity and self._q:
                taken.append(self._q.popleft())
            return taken

    # ----------------------- Pickling -----------------------

    def __getstate__(self):
        with self._lock:
            return {"_q": list(self._q)}

    def __setstate__(self, state):
        self._lock = threading.Lock()
        self._q = deque(state["_q"])
