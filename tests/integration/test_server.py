"""
End-to-end tests against a running server over real sockets.
"""

import gzip
import socket
import threading
from pathlib import Path

import pytest


def recv_response(sock: socket.socket) -> bytes:
    """Read one response: headers, then Content-Length bytes of body."""
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = sock.recv(4096)
        if not chunk:
            return data
        data += chunk

    head, _, body = data.partition(b"\r\n\r\n")
    length = 0
    for line in head.split(b"\r\n")[1:]:
        name, _, value = line.partition(b":")
        if name.strip().lower() == b"content-length":
            length = int(value.strip())

    while len(body) < length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk
    return head + b"\r\n\r\n" + body


def exchange(live_server, raw_request: bytes) -> bytes:
    """Send one request on a fresh connection and return the response."""
    with live_server.connect() as sock:
        sock.sendall(raw_request)
        return recv_response(sock)


def split_response(data: bytes):
    head, _, body = data.partition(b"\r\n\r\n")
    status_line, *header_lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in header_lines:
        name, _, value = line.partition(": ")
        headers[name.lower()] = value
    return status_line, headers, body


class TestRoutes:
    """One request per connection against each route."""

    def test_root(self, live_server):
        response = exchange(live_server, b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        assert response == b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 0\r\n\r\n"

    def test_not_found(self, live_server):
        response = exchange(live_server, b"GET /banana HTTP/1.1\r\n\r\n")
        assert response == (
            b"HTTP/1.1 404 Not Found\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 9\r\n"
            b"\r\n"
            b"Not Found"
        )

    def test_echo(self, live_server):
        response = exchange(live_server, b"GET /echo/abc HTTP/1.1\r\n\r\n")
        assert response == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_user_agent(self, live_server):
        response = exchange(
            live_server,
            b"GET /user-agent HTTP/1.1\r\nHost: localhost\r\nUser-Agent: foobar/1.2.3\r\n\r\n",
        )
        status_line, headers, body = split_response(response)

        assert status_line == "HTTP/1.1 200 OK"
        assert headers["content-length"] == "12"
        assert body == b"foobar/1.2.3"

    def test_get_file(self, live_server):
        status_line, headers, body = split_response(
            exchange(live_server, b"GET /files/hello.txt HTTP/1.1\r\n\r\n")
        )

        assert status_line == "HTTP/1.1 200 OK"
        assert headers["content-type"] == "application/octet-stream"
        assert body == b"Hello, World!"

    def test_get_missing_file(self, live_server):
        response = exchange(live_server, b"GET /files/missing HTTP/1.1\r\n\r\n")
        assert response.startswith(b"HTTP/1.1 404 Not Found\r\n")

    def test_post_file(self, live_server, files_dir: Path, sample_post_request: bytes):
        response = exchange(live_server, sample_post_request)

        assert response.startswith(b"HTTP/1.1 201 Created\r\n")
        assert (files_dir / "number").read_bytes() == b"12345"

    def test_traversal_refused(self, live_server, files_dir: Path):
        secret = files_dir.parent / "outside.txt"
        secret.write_bytes(b"secret")

        response = exchange(live_server, b"GET /files/../outside.txt HTTP/1.1\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 404 Not Found\r\n")
        assert b"secret" not in response


class TestCompression:
    """gzip negotiation end to end."""

    def test_gzip_echo(self, live_server):
        response = exchange(
            live_server,
            b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: invalid-encoding-1, gzip, invalid-encoding-2\r\n\r\n",
        )
        _, headers, body = split_response(response)

        assert headers["content-encoding"] == "gzip"
        assert headers["content-length"] == str(len(body))
        assert gzip.decompress(body) == b"abc"

    def test_unsupported_encoding(self, live_server):
        response = exchange(
            live_server,
            b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: invalid-encoding\r\n\r\n",
        )
        _, headers, body = split_response(response)

        assert "content-encoding" not in headers
        assert body == b"abc"


class TestConnectionHandling:
    """Keep-alive, malformed input and concurrency."""

    def test_keep_alive(self, live_server):
        with live_server.connect() as sock:
            sock.sendall(b"GET /echo/first HTTP/1.1\r\n\r\n")
            first = recv_response(sock)
            sock.sendall(b"GET /echo/second HTTP/1.1\r\n\r\n")
            second = recv_response(sock)

        assert first.endswith(b"first")
        assert second.endswith(b"second")

    def test_malformed_request_closes(self, live_server):
        with live_server.connect() as sock:
            sock.sendall(b"NONSENSE\r\n\r\n")
            assert sock.recv(4096) == b""

    def test_server_survives_malformed_request(self, live_server):
        with live_server.connect() as sock:
            sock.sendall(b"GET /\r\n\r\n")
            sock.recv(4096)

        assert exchange(live_server, b"GET / HTTP/1.1\r\n\r\n").startswith(b"HTTP/1.1 200 OK")

    def test_idle_connection_does_not_block_others(self, live_server):
        """A client that never sends anything holds only its own thread."""
        idle = live_server.connect()
        try:
            response = exchange(live_server, b"GET /echo/busy HTTP/1.1\r\n\r\n")
            assert response.endswith(b"busy")
        finally:
            idle.close()

    def test_concurrent_clients(self, live_server):
        results = {}

        def client(index: int):
            raw = f"GET /echo/client-{index} HTTP/1.1\r\n\r\n".encode()
            results[index] = exchange(live_server, raw)

        threads = [threading.Thread(target=client, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10.0)

        assert len(results) == 10
        for index, response in results.items():
            assert response.endswith(f"client-{index}".encode())
