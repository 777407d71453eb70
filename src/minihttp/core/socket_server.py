"""
=============================================================================
SOCKET SERVER
=============================================================================

The TCP listener: bind, listen, accept, and hand each accepted socket to a
callback wrapped in a Connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(handler)                                                    │
    │        ├──► _create_socket()   SO_REUSEADDR, TCP_NODELAY, 1s poll   │
    │        ├──► bind() / listen()                                        │
    │        ├──► _setup_signals()   SIGINT/SIGTERM → shutdown()          │
    │        └──► _accept_loop()     accept → Connection → handler(conn)  │
    │                                                                      │
    │    shutdown()                  stop accepting (idempotent)          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Accept errors other than the poll timeout stop the loop; they are logged,
not retried. Deciding whether to start again belongs to whoever called
start().

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready_event = threading.Event()
        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port). With port 0 in the config this is the
        port the OS picked, once start() has bound the socket.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without "Address already in use" while the
        # old socket sits in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # TCP_NODELAY: send small responses immediately (no Nagle delay)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up every second so shutdown() is noticed
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Turn SIGTERM/SIGINT into a graceful shutdown.

        Signal handlers can only be installed from the main thread; when the
        server runs in a background thread (tests) this is skipped.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until shutdown() is called. Blocks.

        Args:
            connection_handler: Receives every accepted Connection. It must
                                return quickly; the HTTP server starts a
                                thread per connection there.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Normal: lets us re-check self._running once a second
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop accepting connections. Safe to call more than once."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. True if it is."""
        return self._ready_event.wait(timeout)
