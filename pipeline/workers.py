"""
Fixed-size thread pool draining a shared PortQueue.

Each worker pops a port, probes it and forwards open outcomes to the
result sink until the queue reports empty. run() is the join barrier.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from core.models import ScanOutcome
from core.queue import PortQueue
from core.sink import ResultSink

log = logging.getLogger(__name__)

Probe = Callable[[int], Optional[ScanOutcome]]


class WorkerPool:
    def __init__(self, queue: PortQueue, probe: Probe, sink: ResultSink, workers: int):
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.queue = queue
        self.probe = probe
        self.sink = sink
        self.workers = workers
        self.scanned = 0
        self._lock = threading.Lock()
        self._open: List[int] = []

    def _worker(self) -> None:
        scanned = 0
        found: List[int] = []
        while True:
            port = self.queue.pop()
            if port is None:
                break
            scanned += 1
            try:
                outcome = self.probe(port)
            except Exception:  # noqa: BLE001
                log.exception("probe crashed on port %d", port)
                continue
            if outcome is not None and outcome.open:
                self.sink.write(outcome.line())
                found.append(outcome.port)
        with self._lock:
            self.scanned += scanned
            self._open.extend(found)

    def run(self) -> List[int]:
        """Start all workers, block until every one has exited, return open ports."""
        self.scanned = 0
        self._open = []
        threads = [
            threading.Thread(target=self._worker, name=f"scan-worker-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        log.debug("pool finished: %d ports scanned, %d open", self.scanned, len(self._open))
        return sorted(self._open)
