"""
=============================================================================
MIDDLEWARE FRAMEWORK
=============================================================================

Code that runs around the route dispatcher for every request:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    MIDDLEWARE PIPELINE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌───────────────────────┐                                         │
    │   │ LoggingMiddleware     │ ──► times the request, logs one line    │
    │   └──────────┬────────────┘                                         │
    │              ▼                                                       │
    │   ┌───────────────────────┐                                         │
    │   │ CompressionMiddleware │ ──► gzip when Accept-Encoding allows    │
    │   └──────────┬────────────┘                                         │
    │              ▼                                                       │
    │        Router.handle                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware
from .compression import CompressionMiddleware, ContentEncoder

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Built-in middleware
    "LoggingMiddleware",
    "CompressionMiddleware",
    "ContentEncoder",
]
