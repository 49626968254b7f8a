"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> AnyResponse: ...

No base class required. The framework checks the shape, not the lineage.

Middleware added with ``app.add_middleware()`` wraps the whole
dispatcher. ``wrap()`` applies middleware to a single adapter, so a
route can carry its own URL fix-ups or gates.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from frontdoor._internal.invoke import invoke
from frontdoor.http.request import Request
from frontdoor.http.response import Response, StreamingResponse
from frontdoor.server.negotiation import negotiate

# Any response type the pipeline can produce
type AnyResponse = Response | StreamingResponse

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for frontdoor middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> AnyResponse:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class HostFilter:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...


def chain(handler: Next, middleware: tuple[Middleware, ...]) -> Next:
    """Compose *middleware* around *handler*; the first entry is outermost."""
    wrapped = handler
    for mw in reversed(middleware):
        outer = wrapped

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> AnyResponse:
            return await _mw(req, _next)

        wrapped = make_next
    return wrapped


def wrap(handler: Callable[..., Any], *middleware: Middleware) -> Next:
    """Wrap a single adapter with route-level middleware.

    Usage::

        app.mount("/code/", wrap(gitweb, FixEncodedSemicolons()))
    """

    async def call_handler(request: Request) -> AnyResponse:
        return negotiate(await invoke(handler, request))

    return chain(call_handler, middleware)
