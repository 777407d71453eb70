"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses the bytes of one HTTP/1.1 request into a structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST /files/report.txt HTTP/1.1\r\n       ← REQUEST LINE           │
    │   ─┬── ─────────┬─────── ────┬───                                    │
    │    │            │            │                                       │
    │  Method       Target      Version                                    │
    │                                                                      │
    │   Host: localhost:4221\r\n                  ← HEADERS                │
    │   User-Agent: curl/8.4.0\r\n                                         │
    │   Content-Length: 3\r\n                                              │
    │   \r\n                                      ← BLANK LINE             │
    │   abc                                       ← BODY                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THIS PARSER DOES (AND DOES NOT) DO
=============================================================================

    ✔ Request line split on single spaces into EXACTLY three tokens.
      Anything else ("GET /", "GET  / HTTP/1.1") is fatal → HTTPParseError.
      Leading and trailing whitespace is trimmed first, so only spaces
      BETWEEN tokens count: " GET / HTTP/1.1 " is accepted.

    ✔ Header lines split on the FIRST colon, name and value trimmed.
      A line with no colon is logged and skipped, parsing continues.

    ✔ Everything after the blank line is the body, byte for byte.

    ✘ The target is NOT decoded: "/echo/hello%20world" stays as sent.
    ✘ Content-Length does NOT limit the body and chunked encoding is
      NOT decoded. Whatever bytes followed the headers in the buffer
      are the body.
    ✘ No method or version whitelist. Routing decides what is served.

=============================================================================
FAILURE IS EXPLICIT
=============================================================================

parse() either returns a complete HTTPRequest or raises HTTPParseError.
There is no half-built request for the caller to trip over:

    try:
        request = parser.parse(data)
    except HTTPParseError:
        conn.close()          # never touch request here
        return

=============================================================================
"""

import logging
from dataclasses import dataclass, field

from .headers import Headers
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


CRLF = b"\r\n"


class HTTPParseError(Exception):
    """
    Raised when a buffer does not contain a usable HTTP request.

    Carries the HTTP status code a server would answer with if it chose to
    answer. The connection loop does not answer: it closes the connection.
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    Built once per parse() call and not modified afterwards (frozen).

    Attributes:
        method:  Request method token ("GET", "POST", ...), as sent.
        target:  Request target (path plus optional query), undecoded.
        version: Protocol version token ("HTTP/1.1").
        headers: Ordered, case-insensitive header mapping.
        body:    Raw bytes after the blank line, possibly empty.
        client_address: (ip, port) of the peer, for logging only.
    """

    method: str
    target: str
    version: str = "HTTP/1.1"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)

    @property
    def path(self) -> str:
        """Target without the query string."""
        return self.target.split("?", 1)[0]

    @property
    def user_agent(self) -> str:
        return self.get_header("User-Agent")

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("accept-encoding")  # finds "Accept-Encoding"
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        bytes
          │
          ▼
        ┌───────────────────────────────────────────────────────────────┐
        │ 1. Read first line (up to CRLF)                               │
        │    no CRLF at all? → HTTPParseError                           │
        │ 2. Split on " " → must be exactly 3 tokens                    │
        │    else → HTTPParseError                                      │
        │ 3. Read header lines until blank line or end of input         │
        │    no colon? → log + skip                                     │
        │ 4. Remaining bytes → body                                     │
        └───────────────────────────────────────────────────────────────┘
          │
          ▼
        HTTPRequest

    The parser is stateless; one instance can be shared by every
    connection thread.
    ==========================================================================
    """

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one request from a buffer.

        Args:
            data: Bytes read from the connection. May hold less than the
                  full request; whatever is there is parsed.
            client_address: Peer (ip, port), carried along for logging.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: If the request line is missing or malformed.
        """
        # =====================================================================
        # STEP 1: Request line
        # =====================================================================
        line_end = data.find(CRLF)
        if line_end == -1:
            raise HTTPParseError("Incomplete request: no request line terminator")

        method, target, version = self._parse_request_line(data[:line_end])

        # =====================================================================
        # STEP 2: Headers
        # =====================================================================
        headers, body_start = self._parse_headers(data, line_end + len(CRLF))

        # =====================================================================
        # STEP 3: Body is whatever is left, verbatim
        # =====================================================================
        return HTTPRequest(
            method=method,
            target=target,
            version=version,
            headers=headers,
            body=data[body_start:],
            client_address=client_address,
        )

    def _parse_request_line(self, raw_line: bytes) -> tuple[str, str, str]:
        """
        Split "METHOD SP TARGET SP VERSION" into its three tokens.

        The line is trimmed, then split on single spaces. A doubled space
        between tokens produces an empty token and therefore the wrong
        count, which is rejected. Spaces at either end are not tokens.
        """
        line = raw_line.decode("latin-1").strip()
        parts = line.split(" ")
        if len(parts) != 3:
            raise HTTPParseError(f"Invalid request line format: {line!r}")

        method, target, version = parts
        return method, target, version

    def _parse_headers(self, data: bytes, offset: int) -> tuple[Headers, int]:
        """
        Parse header lines starting at offset.

        Returns the headers and the offset where the body starts. Stops at
        the first blank line, or at the end of the buffer if there is none,
        in which case the body is empty. A last line with no CRLF is an
        incomplete header and is dropped.
        """
        headers = Headers()
        position = offset

        while position < len(data):
            line_end = data.find(CRLF, position)
            if line_end == -1:
                logger.debug(f"Unterminated header line dropped: {data[position:]!r}")
                position = len(data)
                break

            line = data[position:line_end].decode("latin-1").strip()
            position = line_end + len(CRLF)

            if not line:
                break  # End of headers

            name, sep, value = line.partition(":")
            if not sep:
                logger.warning(f"Malformed header line skipped: {line!r}")
                continue

            headers[name.strip()] = value.strip()

        return headers, position


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

_default_parser = RequestParser()


def parse_request(data: bytes, client_address: tuple[str, int] = ("", 0)) -> HTTPRequest:
    """Parse a request with a shared parser instance."""
    return _default_parser.parse(data, client_address)
