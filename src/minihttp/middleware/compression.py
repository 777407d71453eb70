"""
=============================================================================
COMPRESSION MIDDLEWARE
=============================================================================

Negotiates gzip Content-Encoding from the request's Accept-Encoding header
and compresses the response body.

=============================================================================
NEGOTIATION
=============================================================================

    Accept-Encoding: deflate, gzip
                     ───┬───  ──┬─
                        │       └── tokens are split on ", "
                        └────────── only "gzip" is looked for

    ┌───────────────────────────┬─────────────────────────────────────────┐
    │ "gzip" among the tokens   │ Content-Encoding: gzip                  │
    │                           │ body → gzip(body), level 1              │
    │                           │ Content-Length → compressed size        │
    ├───────────────────────────┼─────────────────────────────────────────┤
    │ ... but body is empty     │ Content-Encoding: gzip                  │
    │                           │ body left as b"" (Content-Length: 0)    │
    ├───────────────────────────┼─────────────────────────────────────────┤
    │ no "gzip" / no header     │ Content-Encoding removed if present     │
    └───────────────────────────┴─────────────────────────────────────────┘

Tokens are compared exactly: "gzip;q=1.0" or "x-gzip" do not count, and
neither does "gzip" inside a token list joined with "," and no space.

=============================================================================
WHEN THE CODEC FAILS
=============================================================================

If compression raises, the response is served UNCOMPRESSED:

    - body stays the original bytes
    - Content-Encoding is removed
    - Content-Length is set to the original size
    - a warning is logged

The client asked for gzip but did not require it, so the identity encoding
is always an acceptable answer.

=============================================================================
"""

import gzip
import logging

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


class ContentEncoder:
    """
    Applies Accept-Encoding negotiation to a response in place.

        encoder = ContentEncoder()
        encoder.apply(request, response)
    """

    ENCODING = "gzip"

    def __init__(self, level: int = 1):
        """
        Args:
            level: gzip compression level (1-9).
                   1 = fastest, which is what a per-request codec wants.
        """
        self.level = level

    def accepts_gzip(self, request: HTTPRequest) -> bool:
        tokens = request.get_header("Accept-Encoding").split(", ")
        return self.ENCODING in tokens

    def compress(self, body: bytes) -> bytes:
        return gzip.compress(body, compresslevel=self.level)

    def apply(self, request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
        """
        Negotiate and, if agreed, compress the response body.

        Mutates and returns the response.
        """
        if not self.accepts_gzip(request):
            if "Content-Encoding" in response.headers:
                del response.headers["Content-Encoding"]
            return response

        response.headers["Content-Encoding"] = self.ENCODING

        body = response.body or b""
        if not body:
            return response

        try:
            compressed = self.compress(body)
        except Exception as e:
            # Fall back to the identity encoding
            logger.warning(f"gzip failed, sending uncompressed body: {type(e).__name__}: {e}")
            del response.headers["Content-Encoding"]
            response.headers["Content-Length"] = str(len(body))
            return response

        response.body = compressed
        response.headers["Content-Length"] = str(len(compressed))
        return response


class CompressionMiddleware(Middleware):
    """
    Pipeline adapter for ContentEncoder.

    Should be the innermost middleware so it sees the handler's final body:

        pipeline.add(LoggingMiddleware())
        pipeline.add(CompressionMiddleware())
    """

    def __init__(self, encoder: ContentEncoder = None):
        self.encoder = encoder or ContentEncoder()

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)
        return self.encoder.apply(request, response)
