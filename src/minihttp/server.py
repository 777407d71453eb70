"""
=============================================================================
HTTP SERVER
=============================================================================

Puts the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ── accept ──► Connection                              │
    │                                  │                                   │
    │                                  ▼  one thread per connection        │
    │                           ConnectionLoop                             │
    │                                  │                                   │
    │                    RequestParser │                                   │
    │                                  ▼                                   │
    │      LoggingMiddleware → CompressionMiddleware → Router.handle       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY MODEL
=============================================================================

Every accepted connection gets its own daemon thread running a
ConnectionLoop. The thread owns that socket; no two threads ever touch the
same connection. Threads share only the configuration, the router and the
parser, none of which change after startup, so there are no locks.

There is no cap on concurrent connections and no timeout: a
slow or silent client holds one thread until it disconnects.

=============================================================================
SHUTDOWN
=============================================================================

shutdown() (or SIGINT/SIGTERM) stops the accept loop. Open connections are
told to stop before their next read; a connection blocked in recv() ends
when its client disconnects or the process exits (the threads are daemons).

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionLoop
from .handlers import build_router
from .http import RequestParser, Router
from .middleware import MiddlewarePipeline, LoggingMiddleware, CompressionMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP/1.1 server.

        server = HTTPServer(ServerConfig(directory="/tmp/data"))
        server.run()      # blocks until Ctrl+C / SIGTERM
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Validated here (fail fast).

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._router: Router = build_router(self.config.directory)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))
        self._middleware.add(CompressionMiddleware())

        self._handler = self._middleware.wrap(self._router.handle)
        self._running = False
        self._connection_count = 0

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """Bound (host, port) once running."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self):
        """Start the server. Blocks until shutdown."""
        self._setup_logging()
        self._running = True

        logger.info(f"Serving files from {self.config.directory}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info(f"Server stopped after {self._connection_count} connections")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections; open loops stop before their next read."""
        self._running = False
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """
        Start a thread for a freshly accepted connection.

        Called from the accept loop, so it only spawns and returns.
        """
        self._connection_count += 1
        loop = ConnectionLoop(
            conn,
            self._handler,
            parser=self._parser,
            should_continue=lambda: self._running,
        )
        thread = threading.Thread(
            target=self._process_connection,
            args=(loop,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, loop: ConnectionLoop):
        """Thread body: run the loop, never let an error escape the thread."""
        conn = loop.conn
        logger.debug(f"[{conn.id}] Serving {conn.client_ip}")
        try:
            loop.run()
        except Exception as e:
            logger.exception(f"[{conn.id}] Connection error: {e}")
