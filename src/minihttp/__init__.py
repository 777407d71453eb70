"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.1 Server Core
=============================================================================

A small HTTP/1.1 server on raw Python sockets: it parses requests, routes
them by path, gzips responses when the client allows it, and keeps each
connection open for further requests.

=============================================================================
ROUTES
=============================================================================

    GET  /                  200, empty body
    GET  /user-agent        200, the User-Agent header
    GET  /echo/<text>       200, <text>
    GET  /files/<name>      200 file bytes, or 404
    POST /files/<name>      201 after storing the body, or 500
    *                       404 Not Found

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: wires everything together
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Networking
    │   ├── socket_server.py # Listening socket, accept loop
    │   ├── connection.py    # Connection wrapper
    │   └── loop.py          # Per-connection read/dispatch/write loop
    ├── http/                # Protocol
    │   ├── headers.py       # Ordered, case-insensitive headers
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response serialization
    │   ├── router.py        # PathMatcher and Router
    │   └── status_codes.py  # HTTPStatus
    ├── middleware/
    │   ├── base.py          # Middleware, MiddlewarePipeline
    │   ├── logging.py       # Access log
    │   └── compression.py   # gzip negotiation
    └── handlers/
        ├── routes.py        # The route table
        └── files.py         # /files/ read and write

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(directory="/tmp/data"))
    server.run()

or from a shell:

    python -m minihttp --directory /tmp/data

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
