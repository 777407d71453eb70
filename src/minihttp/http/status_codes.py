"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can answer with, plus their reason phrases.

    HTTP/1.1 201 Created
             ─┬─ ───┬───
              │     │
              │     └── Reason phrase (HTTPStatus.phrase)
              └──────── Status code   (int(HTTPStatus.CREATED))

=============================================================================
WHICH ROUTE USES WHICH CODE
=============================================================================

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  200   │ "/", "/user-agent", "/echo/...", GET "/files/..." found │
    │  201   │ POST "/files/..." written                               │
    │  400   │ HTTPParseError.status_code (never sent, see loop.py)    │
    │  404   │ unknown target, GET "/files/..." missing                │
    │  500   │ POST "/files/..." write failed, handler crashed         │
    └────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """4xx or 5xx. Used by the access log to pick a level."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
