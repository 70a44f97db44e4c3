"""
Shared work queue of pending port numbers.

Ports live in a preallocated range; pop only advances a cursor under a
lock, so draining is O(1) per item and no port is handed out twice.
"""

import logging
import threading
from typing import Optional

log = logging.getLogger(__name__)


class PortQueue:
    def __init__(self, start: Optional[int] = None, end: Optional[int] = None):
        self._lock = threading.Lock()
        self._ports = range(0)
        self._cursor = 0
        if start is not None and end is not None:
            self.seed(start, end)

    def seed(self, start: int, end: int) -> None:
        """Replace the contents with every port in [start, end], ascending."""
        with self._lock:
            self._ports = range(start, end + 1)
            self._cursor = 0
        log.debug("seeded %d ports (%d-%d)", len(self._ports), start, end)

    def pop(self) -> Optional[int]:
        """Return the lowest pending port, or None once the queue is drained."""
        with self._lock:
            if self._cursor >= len(self._ports):
                return None
            port = self._ports[self._cursor]
            self._cursor += 1
            return port

    def remaining(self) -> int:
        with self._lock:
            return len(self._ports) - self._cursor

    def __len__(self) -> int:
        return self.remaining()
