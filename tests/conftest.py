import socket
import socketserver
import struct
import threading
import time

import pytest

from probers.l4_tcp import ProbeTimings

SSH_BANNER = b"SSH-2.0-OpenSSH_9.6 lab\r\n"
HTTP_RESPONSE = b"HTTP/1.1 200 OK\r\nServer: lab-httpd\r\nContent-Length: 2\r\n\r\nok\r\n"
SPLIT_DELAY_S = 0.02


def _wait_for_close(sock, timeout=3.0):
    sock.settimeout(timeout)
    try:
        while sock.recv(1024):
            pass
    except OSError:
        pass


class BannerHandler(socketserver.BaseRequestHandler):
    def handle(self):
        self.request.sendall(SSH_BANNER)
        _wait_for_close(self.request)


class SilentHandler(socketserver.BaseRequestHandler):
    def handle(self):
        _wait_for_close(self.request)


class HttpHandler(socketserver.BaseRequestHandler):
    requests = []

    def handle(self):
        self.request.settimeout(3.0)
        data = b""
        try:
            while b"\r\n\r\n" not in data:
                chunk = self.request.recv(1024)
                if not chunk:
                    return
                data += chunk
        except OSError:
            return
        HttpHandler.requests.append(data)
        if data.startswith(b"GET / HTTP/1.0\r\n"):
            self.request.sendall(HTTP_RESPONSE)


class SplitBannerHandler(socketserver.BaseRequestHandler):
    """Writes the banner in two segments a few milliseconds apart."""

    def handle(self):
        self.request.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self.request.sendall(SSH_BANNER[:8])
        time.sleep(SPLIT_DELAY_S)
        self.request.sendall(SSH_BANNER[8:])
        _wait_for_close(self.request)


class SplitHttpHandler(socketserver.BaseRequestHandler):
    """Answers GET with headers and body flushed separately."""

    def handle(self):
        self.request.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self.request.settimeout(3.0)
        data = b""
        try:
            while b"\r\n\r\n" not in data:
                chunk = self.request.recv(1024)
                if not chunk:
                    return
                data += chunk
        except OSError:
            return
        head, body = HTTP_RESPONSE.split(b"\r\n\r\n", 1)
        self.request.sendall(head + b"\r\n\r\n")
        time.sleep(SPLIT_DELAY_S)
        self.request.sendall(body)


class ResetHandler(socketserver.BaseRequestHandler):
    def handle(self):
        self.request.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
        self.request.close()


class _Server(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


@pytest.fixture
def listener():
    servers = []

    def start(handler_cls):
        server = _Server(("127.0.0.1", 0), handler_cls)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server.server_address[1]

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture
def free_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def timings():
    return ProbeTimings(connect_timeout_s=1.0, grace_s=0.3, http_wait_s=1.0, http_ports=frozenset())


@pytest.fixture(autouse=True)
def reset_http_requests():
    HttpHandler.requests = []
    yield
