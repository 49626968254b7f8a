"""Compiled router with ordered, literal path matching.

Patterns ending in ``/`` match every path under them; other patterns
match exactly. Precedence, highest first:

1. Routes bound to the request's host over host-less routes.
2. Exact routes over prefix routes.
3. Longer prefixes over shorter ones.
4. Earlier registration over later.
"""

from frontdoor.errors import NotFound
from frontdoor.routing.route import Route, RouteMatch


def parse_pattern(pattern: str) -> tuple[str | None, str, bool]:
    """Split a pattern into ``(host, path, exact)``.

    Examples::

        "/static/"         -> (None, "/static/", False)
        "/favicon.ico"     -> (None, "/favicon.ico", True)
        "build.example/"   -> ("build.example", "/", False)
    """
    host: str | None = None
    path = pattern
    if not pattern.startswith("/"):
        host, slash, rest = pattern.partition("/")
        path = slash + rest
        if not path:
            path = "/"
    return host.lower() if host else None, path, not path.endswith("/")


def _bare_host(host: str) -> str:
    """Lowercased host without a port."""
    host = host.lower()
    if host.startswith("["):
        return host.split("]", 1)[0] + "]"
    return host.rsplit(":", 1)[0] if ":" in host else host


class Router:
    """Ordered router with first-match-wins semantics.

    Usage::

        router = Router()
        router.add(Route("/static/", static, exact=False))
        router.add(Route("/code", redirect))
        router.compile()
        match = router.match("/static/app.css")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes.append(route)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order."""
        return sorted(self._routes, key=lambda r: r.rank)

    def compile(self) -> None:
        """Freeze the router and order routes by precedence."""
        self._routes.sort(
            key=lambda r: (r.host is None, not r.exact, -len(r.pattern), r.rank),
        )
        self._compiled = True

    def match(self, path: str, host: str = "") -> RouteMatch:
        """Match a request path (and host) against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches.
        """
        bare = _bare_host(host) if host else ""
        for route in self._routes:
            if route.host is not None and route.host != bare:
                continue
            if route.matches(path):
                return RouteMatch(route=route)

        # "/r" when only "/r/" is registered: send the client to the subtree.
        slashed = path + "/"
        for route in self._routes:
            if route.host is not None and route.host != bare:
                continue
            if not route.exact and route.pattern == slashed:
                return RouteMatch(route=route, redirect_slash=True)

        raise NotFound(f"No route matches {path!r}")
