"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Holds response parameters and serializes them to HTTP/1.1 wire bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                  ← STATUS LINE                │
    │    Content-Type: text/plain\r\n         ← HEADERS (insertion order)  │
    │    Content-Encoding: gzip\r\n                                        │
    │    Content-Length: 33\r\n               ← added if missing           │
    │    \r\n                                 ← BLANK LINE                 │
    │    <33 gzip bytes>                      ← BODY                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE CONTENT-LENGTH RULE
=============================================================================

Without Content-Length (and without chunked encoding, which this server
never uses) a keep-alive client cannot tell where one response ends and the
next begins. So serialization ALWAYS emits one:

    - explicitly set by a handler or the compressor → kept as is
    - not set → len(body), which is "0" for b"" or None

The check and the default happen on a copy of the headers; serializing a
response never changes it.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .headers import Headers
from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Response parameters: status, headers and body.

    Handlers return one, middleware mutates it, to_bytes() serializes it.

        HTTPResponse(                    to_bytes()
          status=HTTPStatus.OK,     ──────────────►   b"HTTP/1.1 200 OK\r\n"
          headers=Headers(...),                       b"Content-Type: ...\r\n"
          body=b"hello",                              ...
        )
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Headers = field(default_factory=Headers)
    body: Optional[bytes] = b""
    version: str = "HTTP/1.1"

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header, returning self for chaining."""
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize to wire bytes.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            status line CRLF
            Name: Value CRLF        (one per header, insertion order)
            CRLF
            body

        =====================================================================

        Header names and values are written as given; nothing is validated.
        """
        body = self.body or b""

        response_headers = self.headers.copy()
        if "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(body))

        lines = [self.status_line]
        for name, value in response_headers.pairs():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return header_bytes + body


def build_response(
    status: HTTPStatus,
    headers: Optional[Headers] = None,
    body: Optional[bytes] = None,
) -> bytes:
    """
    Serialize (status, headers, body) straight to bytes.

    Functional form of HTTPResponse.to_bytes() for callers that have the
    three parts and no response object.
    """
    return HTTPResponse(status=status, headers=headers or Headers(), body=body).to_bytes()


class ResponseBuilder:
    """
    Fluent builder for HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("hello")
            .build())

    Every method except build() returns self.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers = Headers()
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: bytes) -> "ResponseBuilder":
        self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain") -> "ResponseBuilder":
        """Set a text body and its Content-Type."""
        self.content_type(content_type)
        self._body = text.encode("utf-8")
        return self

    def octets(self, data: bytes) -> "ResponseBuilder":
        """Set a binary body served as application/octet-stream."""
        self.content_type("application/octet-stream")
        self._body = data
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers.copy(),
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the route handlers produce.
#
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: str = "text/plain") -> HTTPResponse:
    """200 OK with a text or binary body."""
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if isinstance(body, str):
        builder.text(body, content_type)
    else:
        builder.content_type(content_type).body(body)
    return builder.build()


def created(content_type: str = "application/octet-stream") -> HTTPResponse:
    """201 Created with an empty body."""
    return (ResponseBuilder()
        .status(HTTPStatus.CREATED)
        .content_type(content_type)
        .build())


def not_found(message: str = "Not Found") -> HTTPResponse:
    """404 Not Found with a plain-text message."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(message).build()


def internal_error() -> HTTPResponse:
    """500 with no Content-Type and an empty body."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).build()
