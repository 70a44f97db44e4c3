"""
Single-run orchestrator: marks the log, seeds the queue, runs the worker
pool against one target and reports a summary once every worker joined.
"""

from __future__ import annotations

import logging
import time
from functools import partial
from typing import Optional

from core.config import settings
from core.models import ScanConfig, ScanSummary
from core.queue import PortQueue
from core.sink import ResultSink
from pipeline.workers import Probe, WorkerPool
from probers.l4_tcp import ProbeTimings, tcp_probe

log = logging.getLogger(__name__)


class Orchestrator:
    def __init__(
        self,
        sink: Optional[ResultSink] = None,
        timings: Optional[ProbeTimings] = None,
        probe: Optional[Probe] = None,
    ) -> None:
        self.sink = sink or ResultSink(settings.log_path, echo=settings.echo_stdout)
        self.timings = timings or ProbeTimings.from_settings()
        self._probe = probe

    def _probe_for(self, target: str) -> Probe:
        if self._probe is not None:
            return self._probe
        return partial(tcp_probe, target, timings=self.timings)

    def scan(self, config: ScanConfig) -> ScanSummary:
        start = time.time()
        failures_before = self.sink.failures
        self.sink.mark(
            f"=== New scan: target={config.target} ports={config.start_port}-{config.end_port} "
            f"threads={config.workers}"
        )
        queue = PortQueue(config.start_port, config.end_port)
        pool = WorkerPool(queue, self._probe_for(config.target), self.sink, config.workers)
        log.info(
            "scanning %s ports %d-%d with %d workers",
            config.target,
            config.start_port,
            config.end_port,
            config.workers,
        )
        found = pool.run()
        self.sink.mark(f"=== Scan finished for {config.target}")

        failures = self.sink.failures - failures_before
        if failures:
            log.warning("%d result log writes failed (last: %s)", failures, self.sink.last_error)

        return ScanSummary(
            target=config.target,
            start_port=config.start_port,
            end_port=config.end_port,
            workers=config.workers,
            ports_scanned=pool.scanned,
            open_ports=found,
            sink_failures=failures,
            duration_ms=int((time.time() - start) * 1000),
            log_path=str(self.sink.path) if self.sink.path else None,
        )

