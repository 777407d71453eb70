"""
=============================================================================
ROUTE TABLE
=============================================================================

The server's fixed set of routes, evaluated in this order:

    ┌──────────┬──────────────────┬────────┬──────────────────────────────┐
    │ Method   │ Path             │ Status │ Body                         │
    ├──────────┼──────────────────┼────────┼──────────────────────────────┤
    │ any      │ /                │ 200    │ empty                        │
    │ any      │ /user-agent      │ 200    │ User-Agent header value      │
    │ any      │ /echo/<text>     │ 200    │ <text> verbatim              │
    │ GET      │ /files/<name>    │ 200/404│ file bytes / "Not Found"     │
    │ POST     │ /files/<name>    │ 201/500│ empty                        │
    │ other    │ other            │ 404    │ "Not Found"                  │
    └──────────┴──────────────────┴────────┴──────────────────────────────┘

Everything except the two /files/ handlers is a pure function of the
request.

=============================================================================
"""

from pathlib import Path
from typing import Union

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok
from ..http.router import Router
from .files import FileHandler


def root(request: HTTPRequest) -> HTTPResponse:
    return ok()


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """Echo the User-Agent header back (empty if the client sent none)."""
    # Header text was decoded as latin-1; encoding it back gives the bytes sent
    return ok(request.user_agent.encode("latin-1"))


def echo(request: HTTPRequest, text: str) -> HTTPResponse:
    """Echo the rest of the target back, undecoded."""
    return ok(text.encode("latin-1"))


def build_router(directory: Union[str, Path]) -> Router:
    """
    Build the route table.

    Args:
        directory: Root for the /files/ routes.

    Returns:
        A Router whose handle() is the server's request dispatcher.
    """
    router = Router()
    files = FileHandler(directory)

    router.add_route("/", root)
    router.add_route("/user-agent", user_agent)
    router.add_route("/echo/*text", echo)
    router.add_route("/files/*filename", files.read, method="GET")
    router.add_route("/files/*filename", files.write, method="POST")

    return router
