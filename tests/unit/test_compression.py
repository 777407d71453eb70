"""
Unit tests for gzip content negotiation.
"""

import gzip
import logging

import pytest

from minihttp.http.headers import Headers
from minihttp.http.request import HTTPRequest
from minihttp.http.response import HTTPResponse, ok
from minihttp.middleware.compression import ContentEncoder, CompressionMiddleware


def make_request(accept_encoding: str = None) -> HTTPRequest:
    headers = Headers()
    if accept_encoding is not None:
        headers["Accept-Encoding"] = accept_encoding
    return HTTPRequest(method="GET", target="/echo/abc", headers=headers)


class BrokenEncoder(ContentEncoder):
    """Encoder whose codec always fails."""

    def compress(self, body: bytes) -> bytes:
        raise RuntimeError("codec exploded")


class TestContentEncoder:
    """Tests for ContentEncoder class."""

    @pytest.fixture
    def encoder(self) -> ContentEncoder:
        return ContentEncoder()

    def test_accepts_gzip(self, encoder: ContentEncoder):
        assert encoder.accepts_gzip(make_request("gzip"))
        assert encoder.accepts_gzip(make_request("deflate, gzip, br"))
        assert not encoder.accepts_gzip(make_request("deflate"))
        assert not encoder.accepts_gzip(make_request())

    def test_tokens_split_on_comma_space(self, encoder: ContentEncoder):
        """Only ", " separates tokens; "gzip;q=1" is not "gzip"."""
        assert not encoder.accepts_gzip(make_request("deflate,gzip"))
        assert not encoder.accepts_gzip(make_request("gzip;q=1.0"))

    def test_compresses_body(self, encoder: ContentEncoder):
        response = encoder.apply(make_request("gzip"), ok(b"abc"))

        assert response.headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(response.body) == b"abc"
        assert response.headers["Content-Length"] == str(len(response.body))

    def test_content_length_in_wire_bytes(self, encoder: ContentEncoder):
        response = encoder.apply(make_request("invalid, gzip"), ok(b"x" * 1000))
        data = response.to_bytes()

        head, body = data.split(b"\r\n\r\n", 1)
        assert f"Content-Length: {len(body)}".encode() in head
        assert gzip.decompress(body) == b"x" * 1000

    def test_no_gzip_untouched(self, encoder: ContentEncoder):
        response = encoder.apply(make_request("deflate"), ok(b"abc"))

        assert "Content-Encoding" not in response.headers
        assert response.body == b"abc"

    def test_stale_encoding_removed(self, encoder: ContentEncoder):
        """A Content-Encoding set upstream is dropped when gzip is not accepted."""
        response = ok(b"abc")
        response.headers["Content-Encoding"] = "br"

        encoder.apply(make_request(), response)

        assert "Content-Encoding" not in response.headers
        assert response.body == b"abc"

    def test_empty_body_marked_not_compressed(self, encoder: ContentEncoder):
        response = encoder.apply(make_request("gzip"), ok())

        assert response.headers["Content-Encoding"] == "gzip"
        assert response.body == b""
        assert b"Content-Length: 0\r\n" in response.to_bytes()

    def test_none_body(self, encoder: ContentEncoder):
        response = encoder.apply(make_request("gzip"), HTTPResponse(body=None))
        assert response.headers["Content-Encoding"] == "gzip"

    def test_codec_failure_falls_back(self, caplog):
        encoder = BrokenEncoder()

        with caplog.at_level(logging.WARNING, logger="minihttp.middleware.compression"):
            response = encoder.apply(make_request("gzip"), ok(b"abc"))

        assert "Content-Encoding" not in response.headers
        assert response.body == b"abc"
        assert response.headers["Content-Length"] == "3"
        assert "codec exploded" in caplog.text

    def test_level(self):
        assert ContentEncoder().level == 1
        body = b"abc" * 100
        assert gzip.decompress(ContentEncoder(level=9).compress(body)) == body


class TestCompressionMiddleware:
    """Tests for CompressionMiddleware class."""

    def test_wraps_next_handler(self):
        middleware = CompressionMiddleware()
        response = middleware(make_request("gzip"), lambda request: ok(b"hello"))

        assert gzip.decompress(response.body) == b"hello"

    def test_custom_encoder(self):
        middleware = CompressionMiddleware(BrokenEncoder())
        response = middleware(make_request("gzip"), lambda request: ok(b"hello"))

        assert response.body == b"hello"
