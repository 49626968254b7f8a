"""Frontdoor application class.

Mutable during setup (route mounting, middleware, hooks, background
tasks). Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import anyio

from frontdoor._internal.asgi import Receive, Scope, Send
from frontdoor._internal.invoke import invoke
from frontdoor._internal.types import Handler, Hook
from frontdoor.config import SiteConfig
from frontdoor.middleware.protocol import Middleware
from frontdoor.routing.route import Route
from frontdoor.routing.router import Router, parse_pattern
from frontdoor.server.handler import handle_request

logger = logging.getLogger("frontdoor.server")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    pattern: str
    handler: Handler
    host: str | None
    name: str | None


class App:
    """The frontdoor application.

    Mutable during setup (mounting, middleware, hooks).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses
        a Lock + double-check so exactly one thread compiles the app,
        even when several listeners deliver their first request at once.
        After freezing, the route table, middleware, and adapters are
        read-only and shared by every in-flight request.
    """

    __slots__ = (
        "_background",
        "_background_claimed",
        "_fallback",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: SiteConfig | None = None) -> None:
        self.config: SiteConfig = config or SiteConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._fallback: Handler | None = None
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._background: list[Hook] = []
        self._background_claimed: bool = False
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Callable[..., Any], ...] = ()

    # -- Route registration --

    def mount(
        self,
        pattern: str,
        handler: Handler,
        *,
        host: str | None = None,
        name: str | None = None,
    ) -> None:
        """Bind *handler* to a path pattern.

        Patterns ending in ``/`` match the whole subtree; others match
        exactly. A pattern may start with a hostname
        (``"build.example.org/"``) to bind it to that Host only.
        Registration order breaks ties between equal prefixes.
        """
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(pattern, handler, host, name))

    def route(
        self,
        pattern: str,
        *,
        host: str | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register an adapter via decorator.

        Usage::

            @app.route("/debugz/ping")
            async def ping(request):
                return Response("ok", content_type="text/plain")
        """

        def decorator(func: Handler) -> Handler:
            self.mount(pattern, func, host=host, name=name)
            return func

        return decorator

    def fallback(self, handler: Handler) -> Handler:
        """Set the handler for requests no route matches."""
        self._check_not_frozen()
        self._fallback = handler
        return handler

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware around the dispatcher. First added is outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def background(self, func: Hook) -> Hook:
        """Register a long-running async task supervised by the app.

        Background tasks start after the startup hooks, run for the
        lifetime of the server, and are cancelled at lifespan shutdown.
        A task that raises is logged; it does not take the server down.
        """
        self._check_not_frozen()
        self._background.append(func)
        return func

    # -- Server --

    def run(self) -> None:
        """Compile the app and serve it on the configured listeners."""
        self._ensure_frozen()
        from frontdoor.server.run import serve

        serve(self)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            fallback=self._fallback,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, runs startup hooks, then keeps the
        registered background tasks running in a task group until the
        server asks for shutdown.
        """
        self._ensure_frozen()

        async with anyio.create_task_group() as tg:
            while True:
                message = await receive()
                msg_type = message["type"]

                if msg_type == "lifespan.startup":
                    try:
                        await self.startup()
                    except Exception as exc:
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    # Each listener runs its own lifespan; only the
                    # first one owns the background tasks.
                    if self._claim_background():
                        for task in self._background:
                            tg.start_soon(self._supervise, task)
                    await send({"type": "lifespan.startup.complete"})

                elif msg_type == "lifespan.shutdown":
                    tg.cancel_scope.cancel()
                    break

        # Outside the cancelled scope so the hooks can still await.
        await self.shutdown()
        await send({"type": "lifespan.shutdown.complete"})

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)

    def _claim_background(self) -> bool:
        with self._freeze_lock:
            if self._background_claimed:
                return False
            self._background_claimed = True
            return True

    @staticmethod
    async def _supervise(task: Hook) -> None:
        try:
            await invoke(task)
        except Exception:
            logger.exception("Background task %r failed", task)

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for rank, pending in enumerate(self._pending_routes):
            host, path, exact = parse_pattern(pending.pattern)
            router.add(
                Route(
                    pattern=path,
                    handler=pending.handler,
                    exact=exact,
                    host=(pending.host or host or "").lower() or None,
                    name=pending.name,
                    rank=rank,
                )
            )
        router.compile()
        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True

    @property
    def routes(self) -> list[Route]:
        """The compiled route table, in registration order."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Mount routes, middleware, and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
