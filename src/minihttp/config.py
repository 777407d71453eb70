"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m minihttp --directory /tmp/data                   │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_DIRECTORY=/tmp/data python -m minihttp                │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The only value the request-handling core depends on is `directory`, the
root for the /files/ routes. Everything else configures the listener and
logging around it. The configuration is read-only once the server starts;
every connection thread shares the same instance.

=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(host="127.0.0.1", directory="./data", log_level="DEBUG")

    Tests:
        ServerConfig(host="127.0.0.1", port=0)   # OS picks a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """IP address to bind to. All interfaces by default."""

    port: int = 4221
    """Port to listen on. 0 lets the OS choose (useful in tests)."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 65536
    """
    Bytes taken by the single read that receives each request.
    Requests larger than this are truncated.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "."
    """Root directory for GET/POST /files/<name>."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST         Bind address (default: 0.0.0.0)
        HTTP_PORT         Port (default: 4221)
        HTTP_DIRECTORY    Files root (default: .)
        HTTP_BUFFER_SIZE  Read buffer in bytes (default: 65536)
        HTTP_LOG_LEVEL    Logging level (default: INFO)
        HTTP_LOG_FORMAT   text or json (default: text)

        =====================================================================
        """
        return cls(
            host=os.getenv("HTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY", "."),
            buffer_size=int(os.getenv("HTTP_BUFFER_SIZE", "65536")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction: fail fast, not at the first request.

        Raises:
            ValueError: On any invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")

        if not Path(self.directory).is_dir():
            raise ValueError(f"Directory does not exist: {self.directory}")
