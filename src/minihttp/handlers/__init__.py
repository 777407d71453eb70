"""
Request handlers for the server's fixed routes.

    build_router(directory)  → the Router the server dispatches with
    FileHandler              → GET/POST /files/<name> under one directory
"""

from .files import FileHandler, UnsafePathError
from .routes import build_router, root, user_agent, echo

__all__ = [
    "FileHandler",
    "UnsafePathError",
    "build_router",
    "root",
    "user_agent",
    "echo",
]
