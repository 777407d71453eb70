"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Turns bytes into requests and responses into bytes, and decides which
handler answers.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSER (request.py)                                         │
    │   b"GET /echo/hi HTTP/1.1\r\n..."  →  HTTPRequest(method="GET", ...)│
    ├─────────────────────────────────────────────────────────────────────┤
    │ HEADERS (headers.py)                                                │
    │   ordered pairs + case-insensitive lookup                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTER (router.py)                                                  │
    │   PathMatcher: precompiled, anchored, at most one capture           │
    │   Router: exact routes → capture routes → 404                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE (response.py)                                              │
    │   HTTPResponse(status, headers, body).to_bytes()                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)                                      │
    │   HTTPStatus.NOT_FOUND → 404, phrase "Not Found"                    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HTTP MESSAGE FORMAT (RFC 7230)
=============================================================================

    REQUEST:                          RESPONSE:
    ─────────                         ──────────
    GET /path HTTP/1.1\r\n            HTTP/1.1 200 OK\r\n
    Header: Value\r\n                 Header: Value\r\n
    \r\n                              \r\n
    [body]                            [body]

=============================================================================
"""

from .headers import Headers
from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    build_response,
    ok,             # 200 OK
    created,        # 201 Created
    not_found,      # 404 Not Found
    internal_error, # 500 Internal Server Error
)
from .router import PathMatcher, Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    "Headers",
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "HTTPResponse",
    "ResponseBuilder",
    "build_response",
    "ok",
    "created",
    "not_found",
    "internal_error",
    "PathMatcher",
    "Router",
    "Route",
    "RouteMatch",
    "HTTPStatus",
]
