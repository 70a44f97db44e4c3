"""
TCP connect scanner with banner capture, using plain connect() without
crafting raw packets.

Every wait is a socket deadline: the handshake is bounded by the connect
timeout, each read window by the grace period or the HTTP fallback wait.
A read collects everything that arrives inside its window, so banners
written in several segments are kept whole.
"""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from core.config import Settings, settings
from core.models import ScanOutcome
from probers.http_probe import send_request

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeTimings:
    connect_timeout_s: float = 0.8
    grace_s: float = 0.010
    http_wait_s: float = 0.020
    read_bytes: int = 1024
    http_ports: FrozenSet[int] = field(default_factory=lambda: frozenset({80, 8080, 8000}))

    @classmethod
    def from_settings(cls, cfg: Settings = settings, **overrides) -> "ProbeTimings":
        values = dict(
            connect_timeout_s=cfg.connect_timeout_s,
            grace_s=cfg.grace_s,
            http_wait_s=cfg.http_wait_s,
            read_bytes=cfg.banner_read_bytes,
            http_ports=frozenset(cfg.http_ports),
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def read_window(sock: socket.socket, buf: bytearray, n: int, timeout: float) -> None:
    """Append to buf whatever arrives within timeout, up to n bytes.

    Stops at the deadline, when n bytes were read or on EOF. Data read
    before a socket error stays in buf.
    """
    deadline = time.monotonic() + timeout
    while len(buf) < n:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return
        sock.settimeout(remaining)
        try:
            chunk = sock.recv(n - len(buf))
        except socket.timeout:
            return
        if not chunk:
            return
        buf.extend(chunk)


def grab_banner(sock: socket.socket, target: str, port: int, timings: ProbeTimings) -> Optional[str]:
    """Read an unsolicited banner, falling back to HTTP GET on web ports.

    A socket error after connect ends the exchange early; whatever was
    captured until then is kept.
    """
    data = bytearray()
    try:
        read_window(sock, data, timings.read_bytes, timings.grace_s)
        if not data and port in timings.http_ports:
            send_request(sock, target, timings.http_wait_s)
            read_window(sock, data, timings.read_bytes * 2, timings.http_wait_s)
    except OSError as exc:
        log.debug("read from %s:%d failed after connect: %s", target, port, exc)

    banner = data.decode(errors="ignore").strip()
    return banner or None


def tcp_probe(target: str, port: int, timings: Optional[ProbeTimings] = None) -> Optional[ScanOutcome]:
    """Connect to target:port and capture its banner.

    Returns None when the port is closed or filtered, otherwise an open
    outcome (banner None when nothing was captured).
    """
    timings = timings or ProbeTimings.from_settings()
    try:
        sock = socket.create_connection((target, port), timeout=timings.connect_timeout_s)
    except OSError as exc:
        log.debug("%s:%d closed/filtered: %s", target, port, exc)
        return None

    with sock:
        banner = grab_banner(sock, target, port, timings)
    return ScanOutcome(target=target, port=port, open=True, banner=banner)
