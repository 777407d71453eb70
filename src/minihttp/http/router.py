"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request target to a handler with a fixed, priority-ordered route
table:

    1. EXACT paths          "/", "/user-agent"
    2. CAPTURE patterns     "/echo/*text", "/files/*filename"
    3. DEFAULT              404 Not Found

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /echo/abc/def                                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER                                                      │   │
    │   │                                                              │   │
    │   │  exact:    ANY  /                → root         ✗            │   │
    │   │            ANY  /user-agent      → user_agent   ✗            │   │
    │   │  pattern:  ANY  /echo/*text      → echo         ✔ MATCH      │   │
    │   │            GET  /files/*filename → read_file                 │   │
    │   │            POST /files/*filename → write_file                │   │
    │   │  default:  → not_found                                       │   │
    │   │                                                              │   │
    │   │  captures = ["abc/def"]                                      │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   echo(request, "abc/def")                                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Exact routes are always tried before pattern routes, whatever order they
were registered in. Within each group, first registered wins.

=============================================================================
ROUTE PATTERNS
=============================================================================

1. STATIC: exact string match on the whole target

   Pattern: /user-agent
   Regex:   ^/user\\-agent$
   Matches: /user-agent            Doesn't match: /user-agent/, /user-agent?x

2. WILDCARD (*name): fixed prefix, then ONE greedy capture of the rest

   Pattern: /echo/*text
   Regex:   ^/echo/(.*)$
   Matches: /echo/abc       → ["abc"]
            /echo/a/b/c     → ["a/b/c"]      (slashes kept)
            /echo/a%20b     → ["a%20b"]      (nothing decoded)
            /echo/          → [""]

   The wildcard must be the last segment. With at most one group that
   always eats the remaining suffix, there is nothing to backtrack over.

The target is matched as sent, query string included.

=============================================================================
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)


# Handlers receive the request plus one positional argument per capture:
#     root(request)
#     echo(request, text)
Handler = Callable[..., HTTPResponse]


class PathMatcher:
    """
    An anchored regex with zero or one capture group, compiled once.

        matcher = PathMatcher(r"^/echo/(.*)$")
        matcher.match("/echo/hi")     # (True, ["hi"])
        matcher.match("/nope")        # (False, [])
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self._regex = re.compile(pattern)
        if self._regex.groups > 1:
            raise ValueError(f"Pattern {pattern!r} has {self._regex.groups} groups, at most 1 allowed")

    @classmethod
    def from_route(cls, path: str) -> "PathMatcher":
        """
        Compile a route path ("/files/*filename") into a matcher.

        Static segments are escaped; a "*name" segment becomes "(.*)" and
        ends the pattern.
        """
        regex_parts = ["^"]

        segments = path.split("/")
        for index, segment in enumerate(segments):
            if index > 0:
                regex_parts.append("/")

            if segment.startswith("*"):
                regex_parts.append("(.*)")
                break  # Wildcard consumes everything, stop here

            regex_parts.append(re.escape(segment))

        regex_parts.append("$")
        return cls("".join(regex_parts))

    @property
    def has_capture(self) -> bool:
        return self._regex.groups == 1

    def match(self, target: str) -> Tuple[bool, List[str]]:
        """
        Match the whole target. fullmatch, because "$" alone also matches
        before a trailing newline.

        Returns:
            (True, captures) on a match, captures being [] for a static
            pattern or [suffix] for a wildcard one; (False, []) otherwise.
        """
        result = self._regex.fullmatch(target)
        if result is None:
            return False, []
        return True, list(result.groups())

    def __repr__(self) -> str:
        return f"PathMatcher({self.pattern!r})"


@dataclass
class Route:
    """A registered route: path pattern, method filter and handler."""

    path: str
    method: Optional[str]          # None = any method
    handler: Handler
    matcher: PathMatcher = field(repr=False, default=None)

    def __post_init__(self):
        if self.matcher is None:
            self.matcher = PathMatcher.from_route(self.path)

    @property
    def is_exact(self) -> bool:
        return not self.matcher.has_capture


@dataclass
class RouteMatch:
    """The route that matched and what its pattern captured."""

    route: Route
    captures: List[str]


class Router:
    """
    Priority-ordered request dispatcher.

    ==========================================================================
    USAGE
    ==========================================================================

        router = Router()

        @router.route("/")
        def root(request):
            return ok()

        @router.get("/files/*filename")
        def read_file(request, filename):
            ...

        response = router.handle(request)

    ==========================================================================
    """

    def __init__(self, default_handler: Optional[Handler] = None):
        """
        Args:
            default_handler: Called when nothing matches. Defaults to a
                             plain-text 404 "Not Found".
        """
        self._exact_routes: List[Route] = []
        self._pattern_routes: List[Route] = []
        self._default_handler = default_handler or (lambda request: not_found())

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, method: Optional[str] = None) -> Route:
        """
        Register a route. The pattern is compiled here, once.

        Args:
            path: "/exact" or "/prefix/*name"
            handler: Callable taking the request and any capture
            method: Method filter ("GET", "POST"); None accepts any method
        """
        route = Route(path=path, method=method.upper() if method else None, handler=handler)

        if route.is_exact:
            self._exact_routes.append(route)
        else:
            self._pattern_routes.append(route)

        logger.debug(f"Registered route {route.method or 'ANY'} {route.path}")
        return route

    def route(self, path: str, method: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST")

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, target: str) -> Optional[RouteMatch]:
        """
        Find the first matching route: exact routes, then pattern routes.

        Returns:
            RouteMatch, or None if only the default handler applies.
        """
        for route in self.routes():
            if route.method and route.method != method:
                continue

            matched, captures = route.matcher.match(target)
            if matched:
                return RouteMatch(route=route, captures=captures)

        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request to its handler.

        The handler's response is returned as is; unmatched requests get the
        default handler's response.
        """
        match = self.match(request.method, request.target)
        if match is None:
            return self._default_handler(request)
        return match.route.handler(request, *match.captures)

    def routes(self) -> List[Route]:
        """All routes in evaluation order."""
        return self._exact_routes + self._pattern_routes
