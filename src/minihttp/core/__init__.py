"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SOCKET SERVER (socket_server.py)                                    │
    │  • Binds the listening socket, runs the accept() loop               │
    │  • SIGINT/SIGTERM → graceful shutdown                               │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ one Connection per accept()
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONNECTION (connection.py)                                          │
    │  • One recv() per request, sendall() per response                   │
    │  • State tracking, graceful close                                   │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ owned by
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONNECTION LOOP (loop.py)                                           │
    │  • read → parse → handle → write, until the connection ends        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .loop import ConnectionLoop
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "ConnectionLoop",
    "SocketServer",
]
