"""
HTTP fallback for silent listeners: a bare HTTP/1.0 GET written to the
already connected socket. The response is collected by the caller.
"""

import logging
import socket

log = logging.getLogger(__name__)


def build_request(host: str) -> bytes:
    return f"GET / HTTP/1.0\r\nHost: {host}\r\n\r\n".encode()


def send_request(sock: socket.socket, host: str, timeout: float) -> None:
    """Write the request; socket errors propagate to the caller."""
    sock.settimeout(timeout)
    sock.sendall(build_request(host))
    log.debug("sent http fallback request to %s", host)
