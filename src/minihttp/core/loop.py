"""
=============================================================================
CONNECTION LOOP
=============================================================================

Drives one connection through read → parse → dispatch → write, over and
over, until the connection ends.

=============================================================================
THE KEEP-ALIVE LOOP
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ┌──► read_request()         one recv(), up to buffer_size         │
    │   │        │                                                         │
    │   │        ├── None ─────────────────────────────────► close (peer  │
    │   │        │                                            gone/error) │
    │   │        ▼                                                         │
    │   │    parser.parse()                                                │
    │   │        │                                                         │
    │   │        ├── HTTPParseError ───────────────────────► close, send  │
    │   │        │                                            NOTHING     │
    │   │        ▼                                                         │
    │   │    handler(request)       logging → compression → router        │
    │   │        │                                                         │
    │   │        ▼                                                         │
    │   │    response.to_bytes()                                           │
    │   │        │                                                         │
    │   │    send_response()                                               │
    │   │        │                                                         │
    │   │        ├── False ────────────────────────────────► close        │
    │   │        │                                                         │
    │   └────────┘                                                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A plain while loop: the number of requests a client sends on one
connection has no effect on stack depth. There is no idle timeout and no
per-connection request limit; the client decides when it is done.

A handler that raises does not end the loop. It is logged and answered with
500, and the connection stays usable.

=============================================================================
"""

import logging
from typing import Callable, Optional

from .connection import Connection, ConnectionState
from ..http.request import HTTPRequest, HTTPParseError, RequestParser
from ..http.response import HTTPResponse, internal_error


logger = logging.getLogger(__name__)


RequestHandler = Callable[[HTTPRequest], HTTPResponse]


class ConnectionLoop:
    """
    Serves every request on one connection.

    One instance per accepted connection; it owns the connection exclusively
    and closes it when run() returns.

        loop = ConnectionLoop(conn, handler)
        loop.run()        # blocks until the connection ends
    """

    def __init__(
        self,
        conn: Connection,
        handler: RequestHandler,
        parser: Optional[RequestParser] = None,
        should_continue: Callable[[], bool] = lambda: True,
    ):
        """
        Args:
            conn: The accepted connection.
            handler: Request → response callable (the wrapped router).
            parser: Request parser; a fresh one if omitted.
            should_continue: Checked before each read. Lets a server that
                             is shutting down stop taking new requests on
                             open connections.
        """
        self.conn = conn
        self.handler = handler
        self.parser = parser or RequestParser()
        self.should_continue = should_continue

    def run(self) -> None:
        """Service requests until the connection ends, then close it."""
        with self.conn:
            while self.should_continue():
                if not self._serve_one():
                    break

    def _serve_one(self) -> bool:
        """
        Handle a single request/response exchange.

        Returns:
            True to keep the connection open for another request.
        """
        conn = self.conn

        raw_request = conn.read_request()
        if raw_request is None:
            return False

        try:
            request = self.parser.parse(raw_request, conn.address)
        except HTTPParseError as e:
            # Close without answering
            logger.warning(f"[{conn.id}] Closing connection, unparseable request: {e}")
            return False

        conn.state = ConnectionState.PROCESSING

        try:
            response = self.handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            response = internal_error()

        return conn.send_response(response.to_bytes())
