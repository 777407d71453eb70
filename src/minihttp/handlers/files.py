"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes raw files under the served directory for the
"/files/<name>" routes.

    GET  /files/report.txt   →  200 application/octet-stream <file bytes>
                                404 text/plain "Not Found"    (any read error)

    POST /files/new.txt      →  201 application/octet-stream <empty>
         body: abc              500 <empty>                   (any write error)

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

The captured name comes straight from the request target, so it can try to
climb out of the served directory:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /files/../../etc/passwd HTTP/1.1                               │
    │  GET /files//etc/passwd HTTP/1.1        (absolute after the prefix) │
    │                                                                      │
    │  Our protection:                                                    │
    │  1. Join the name under the served directory                       │
    │  2. Resolve the result (collapse .., follow symlinks)              │
    │  3. Refuse it unless it is still inside the directory              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A refused path raises UnsafePathError. It is an OSError, so it lands in the
same branch as "file not found" or "permission denied": 404 for reads, 500
for writes. Nothing about the refusal is revealed to the client.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, created, internal_error, not_found


logger = logging.getLogger(__name__)


class UnsafePathError(OSError):
    """The requested name resolves outside the served directory."""


class FileHandler:
    """
    Serves and stores files below one root directory.

    Usage:
        files = FileHandler("/tmp/data")
        router.get("/files/*filename")(files.read)
        router.post("/files/*filename")(files.write)
    """

    def __init__(self, root_dir: Union[str, Path]):
        # Resolve once; the containment check compares against this
        self.root_dir = Path(root_dir).resolve()

    def resolve(self, filename: str) -> Path:
        """
        Map a captured filename to a path inside root_dir.

        Raises:
            UnsafePathError: If the result would lie outside root_dir, or
                             the name is not a usable path (NUL byte).
        """
        # The OS rejects NUL with ValueError, not OSError
        if "\x00" in filename:
            raise UnsafePathError(f"Path contains a NUL byte: {filename!r}")

        try:
            full_path = (self.root_dir / filename).resolve()
            full_path.relative_to(self.root_dir)
        except ValueError:
            raise UnsafePathError(f"Path escapes served directory: {filename!r}") from None
        return full_path

    def read(self, request: HTTPRequest, filename: str) -> HTTPResponse:
        """GET: return the file's bytes, or 404 on any failure."""
        try:
            data = self.resolve(filename).read_bytes()
        except OSError as e:
            logger.info(f"Cannot read {filename!r}: {e}")
            return not_found()

        return ResponseBuilder().octets(data).build()

    def write(self, request: HTTPRequest, filename: str) -> HTTPResponse:
        """POST: store the request body (create or overwrite), 500 on failure."""
        try:
            self.resolve(filename).write_bytes(request.body)
        except OSError as e:
            logger.warning(f"Cannot write {filename!r}: {e}")
            return internal_error()

        logger.debug(f"Stored {len(request.body)} bytes in {filename!r}")
        return created()
