"""
Unit tests for the /files/ handler.
"""

from pathlib import Path

import pytest

from minihttp.handlers.files import FileHandler, UnsafePathError
from minihttp.http.request import HTTPRequest
from minihttp.http.status_codes import HTTPStatus


def make_request(method: str, filename: str, body: bytes = b"") -> HTTPRequest:
    return HTTPRequest(method=method, target=f"/files/{filename}", body=body)


class TestFileHandler:
    """Tests for FileHandler class."""

    @pytest.fixture
    def handler(self, files_dir: Path) -> FileHandler:
        return FileHandler(files_dir)

    def test_read_existing(self, handler: FileHandler):
        response = handler.read(make_request("GET", "hello.txt"), "hello.txt")

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Type"] == "application/octet-stream"
        assert response.body == b"Hello, World!"

    def test_read_missing(self, handler: FileHandler):
        response = handler.read(make_request("GET", "nope"), "nope")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b"Not Found"

    def test_read_directory(self, handler: FileHandler):
        """The served directory itself is not a file."""
        assert handler.read(make_request("GET", ""), "").status == HTTPStatus.NOT_FOUND

    def test_write_creates(self, handler: FileHandler, files_dir: Path):
        response = handler.write(make_request("POST", "new.bin", b"\x00abc"), "new.bin")

        assert response.status == HTTPStatus.CREATED
        assert response.body == b""
        assert (files_dir / "new.bin").read_bytes() == b"\x00abc"

    def test_write_overwrites(self, handler: FileHandler, files_dir: Path):
        handler.write(make_request("POST", "hello.txt", b"bye"), "hello.txt")
        assert (files_dir / "hello.txt").read_bytes() == b"bye"

    def test_write_then_read(self, handler: FileHandler):
        handler.write(make_request("POST", "data", b"12345"), "data")
        assert handler.read(make_request("GET", "data"), "data").body == b"12345"

    def test_write_empty_body(self, handler: FileHandler, files_dir: Path):
        assert handler.write(make_request("POST", "empty"), "empty").status == HTTPStatus.CREATED
        assert (files_dir / "empty").read_bytes() == b""

    def test_write_missing_subdirectory(self, handler: FileHandler):
        """Parent directories are not created."""
        response = handler.write(make_request("POST", "no/such/dir", b"x"), "no/such/dir")

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert response.body == b""

    def test_read_in_subdirectory(self, handler: FileHandler, files_dir: Path):
        (files_dir / "sub").mkdir()
        (files_dir / "sub" / "f").write_bytes(b"nested")

        assert handler.read(make_request("GET", "sub/f"), "sub/f").body == b"nested"


class TestPathTraversal:
    """Names must stay inside the served directory."""

    @pytest.fixture
    def handler(self, tmp_path: Path) -> FileHandler:
        served = tmp_path / "served"
        served.mkdir()
        (tmp_path / "secret").write_bytes(b"top secret")
        return FileHandler(served)

    def test_resolve_inside(self, handler: FileHandler):
        assert handler.resolve("a/../b") == handler.root_dir / "b"

    def test_resolve_parent(self, handler: FileHandler):
        with pytest.raises(UnsafePathError):
            handler.resolve("../secret")

    def test_resolve_absolute(self, handler: FileHandler):
        with pytest.raises(UnsafePathError):
            handler.resolve("/etc/passwd")

    def test_unsafe_path_is_os_error(self):
        assert issubclass(UnsafePathError, OSError)

    def test_read_outside_is_404(self, handler: FileHandler):
        response = handler.read(make_request("GET", "../secret"), "../secret")

        assert response.status == HTTPStatus.NOT_FOUND
        assert b"secret" not in response.body

    def test_write_outside_is_500(self, handler: FileHandler, tmp_path: Path):
        response = handler.write(make_request("POST", "../secret", b"pwned"), "../secret")

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert (tmp_path / "secret").read_bytes() == b"top secret"

    def test_resolve_nul_byte(self, handler: FileHandler):
        with pytest.raises(UnsafePathError):
            handler.resolve("a\x00b")

    def test_read_nul_byte_is_404(self, handler: FileHandler):
        response = handler.read(make_request("GET", "a\x00b"), "a\x00b")

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b"Not Found"

    def test_write_nul_byte_is_500(self, handler: FileHandler):
        response = handler.write(make_request("POST", "a\x00b", b"x"), "a\x00b")

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert response.body == b""
