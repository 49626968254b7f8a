"""ASGI handler — translates ASGI scope/messages to frontdoor types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through middleware and routing,
and sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from frontdoor._internal.asgi import Receive, Scope, Send
from frontdoor._internal.invoke import invoke
from frontdoor.errors import HTTPError, NotFound
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect, StreamingResponse
from frontdoor.middleware.protocol import AnyResponse, chain
from frontdoor.routing.router import Router
from frontdoor.server.errors import handle_http_error, handle_internal_error
from frontdoor.server.negotiation import negotiate
from frontdoor.server.sender import send_response, send_streaming_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    fallback: Callable[..., Any] | None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    async def dispatch(req: Request) -> AnyResponse:
        try:
            match = router.match(req.path, req.host)
        except NotFound:
            if fallback is None:
                raise
            return negotiate(await invoke(fallback, req))

        if match.redirect_slash:
            target = req.raw_path + "/"
            if req.query_string:
                target = f"{target}?{req.query_string}"
            return Redirect(target, status=301).to_response()

        return negotiate(await invoke(match.route.handler, req))

    # Errors become responses inside the chain so outer middleware
    # (access logging) sees the final status.
    async def guarded(req: Request) -> AnyResponse:
        try:
            return await dispatch(req)
        except HTTPError as exc:
            return handle_http_error(exc, req)
        except Exception as exc:
            return handle_internal_error(exc, req)

    handler = chain(guarded, middleware)

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    head = request.method == "HEAD"
    if isinstance(response, StreamingResponse):
        await send_streaming_response(response, send, head=head)
    else:
        await send_response(response, send, head=head)
