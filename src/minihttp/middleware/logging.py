"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

One access-log line per request, with timing.

    127.0.0.1 - - [19/Oct/2026:10:15:02 +0000] "GET /echo/abc" 200 3 0.41ms

or, with log_format="json":

    {"request_id": "1f0c9a2e", "method": "GET", "target": "/echo/abc", ...}

The logger is namespaced so access logs can be routed separately:

    logging.getLogger("minihttp.access").addHandler(file_handler)

=============================================================================
"""

import time
import json
import uuid
import logging
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """Structured access-log entry."""

    request_id: str
    method: str
    target: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "target": self.target,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache common-log style line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware. Add it FIRST so its timing covers
    everything downstream, compression included.

        pipeline.add(LoggingMiddleware(log_format="json"))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
    ):
        """
        Args:
            log_format: "text" (human readable) or "json" (machine parseable).
            log_level: Level for successful requests; 4xx/5xx use WARNING.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] Request failed: {request.method} {request.target} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_entry = RequestLog(
            request_id=request_id,
            method=request.method,
            target=request.target,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body or b""),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        level = logging.WARNING if response.status.is_error else self.log_level
        if self.log_format == "json":
            logger.log(level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(level, log_entry.to_text())

        return response
