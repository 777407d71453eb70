"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the small API the connection loop
needs: read one chunk, send a whole response, close properly.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

TCP does not preserve message boundaries. A client that sends

    POST /files/big.bin HTTP/1.1\r\n ... \r\n\r\n <70000 bytes>

may arrive at the server as one recv() or as ten.

THIS SERVER READS EACH REQUEST WITH A SINGLE recv() OF UP TO buffer_size
BYTES. Whatever that one call returns is parsed as the request:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  recv(65536)  →  b"GET /echo/hi HTTP/1.1\r\nHost: x\r\n\r\n"        │
    │                  complete request, parsed and answered              │
    │                                                                      │
    │  recv(65536)  →  b"POST /files/a HTTP/1.1\r\n...\r\n\r\n<part>"      │
    │                  body is truncated to what arrived in this read     │
    └─────────────────────────────────────────────────────────────────────┘

Small requests from ordinary clients fit in one segment and one read. A
request bigger than buffer_size, or one the network splits, is truncated.
This is a known limitation of the server, not something the connection
layer tries to paper over; raise buffer_size if uploads need more room.

=============================================================================
CONNECTION STATES
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► READING ──► ...
                │                          │
                └──────────┬───────────────┘
                           ▼
                 CLOSING ──► CLOSED

=============================================================================
"""

import socket
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, tracked for logging and debugging."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. ONE READ PER REQUEST                                             │
    │     └── read_request() does a single recv(buffer_size)              │
    │     └── None means the peer closed or the read failed               │
    │                                                                      │
    │  2. COMPLETE WRITES                                                  │
    │     └── send_response() uses sendall()                              │
    │     └── False means the write failed                                │
    │                                                                      │
    │  3. STATE AND COUNTERS                                               │
    │     └── state and requests_handled, for logs                        │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── shutdown(SHUT_WR), drain, close; safe to call twice          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    No timeouts are applied: a silent peer keeps the connection, and the
    thread serving it, alive until it closes.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used in log lines.
        buffer_size: Maximum bytes taken by one read.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    requests_handled: int = 0

    buffer_size: int = 65536

    def __post_init__(self):
        # Blocking, no timeout
        self.socket.settimeout(None)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        return self.address[0]

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read up to buffer_size bytes with ONE recv() call.

        Returns:
            The bytes read, or None if the peer closed the connection
            (recv returned b"") or the read failed.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            # ConnectionResetError, a socket closed under us, ...
            logger.debug(f"[{self.id}] Read failed: {e}")
            return None

        if not data:
            logger.debug(f"[{self.id}] Peer closed the connection")
            return None

        self.requests_handled += 1
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send a whole response.

        sendall() blocks until every byte is handed to the kernel; plain
        send() may stop part way.

        Returns:
            True if sent, False if the connection is gone.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

        return True

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR) sends FIN: we're done sending
        2. drain whatever the client still sent, briefly
        3. close() releases the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Always close, never suppress exceptions."""
        self.close()
        return False
