"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /user-agent HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: foobar/1.2.3\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"12345"
    return (
        b"POST /files/number HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Served directory with one file in it."""
    (tmp_path / "hello.txt").write_bytes(b"Hello, World!")
    return tmp_path


@pytest.fixture
def config(files_dir: Path) -> ServerConfig:
    """Test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        directory=str(files_dir),
        log_level="WARNING",
    )


class LiveServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def address(self) -> Tuple[str, int]:
        return self.server.address

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self) -> socket.socket:
        """Open a client connection to the server."""
        sock = socket.create_connection(self.address, timeout=5.0)
        return sock


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """A running server on a free port, serving files_dir."""
    server = LiveServer(HTTPServer(config))
    server.start()

    yield server

    server.stop()
