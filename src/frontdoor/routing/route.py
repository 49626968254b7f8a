"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route binding.

    ``pattern`` is a literal path. When ``exact`` is False the pattern
    is a prefix and conventionally ends with ``/``. ``host`` restricts
    the route to requests carrying that Host header. ``rank`` is the
    registration order and breaks ties between equal prefixes.
    """

    pattern: str
    handler: Callable[..., Any]
    exact: bool = True
    host: str | None = None
    name: str | None = None
    rank: int = 0

    def matches(self, path: str) -> bool:
        if self.exact:
            return path == self.pattern
        return path.startswith(self.pattern)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``redirect_slash`` is set when the path named a prefix route
    without its trailing slash; the dispatcher answers with a redirect
    instead of calling the handler.
    """

    route: Route
    redirect_slash: bool = False
