"""TLS gate for adapters that must not be used over plaintext."""

from collections.abc import Callable
from typing import Any

from frontdoor._internal.invoke import invoke
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect


class RequireTLS:
    """Wrap an adapter so plaintext requests are sent to HTTPS first.

    When *enabled* is false (the process serves no HTTPS) every request
    goes straight to the inner adapter. Otherwise a plaintext request
    is redirected (302) to the same URI on ``https://<canonical_host>``
    and only TLS requests reach the adapter.
    """

    __slots__ = ("_canonical_host", "_enabled", "_handler")

    def __init__(self, handler: Callable[..., Any], *, enabled: bool, canonical_host: str) -> None:
        self._handler = handler
        self._enabled = enabled
        self._canonical_host = canonical_host

    async def __call__(self, request: Request) -> Any:
        if self._enabled and not request.is_tls:
            return Redirect(f"https://{self._canonical_host}{request.request_uri}")
        return await invoke(self._handler, request)
