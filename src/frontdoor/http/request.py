"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from frontdoor._internal.asgi import Receive
from frontdoor.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()`` or ``.stream()``.

    ``path`` is percent-decoded; ``raw_path`` is the path exactly as the
    client sent it. Redirects and URL fix-ups work from the raw form.
    ``query_string`` is the raw query string without the ``?``; the proxy
    and CGI adapters forward it untouched.
    """

    method: str
    path: str
    raw_path: str
    headers: Headers
    query_string: str
    scheme: str
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def host(self) -> str:
        """The Host header, or the server name when the client sent none."""
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            return self.server[0]
        return ""

    @property
    def is_tls(self) -> bool:
        """True if the request arrived over TLS."""
        return self.scheme in ("https", "wss")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "") or ""

    @property
    def request_uri(self) -> str:
        """Unmodified request target: raw path plus ``?query`` if present."""
        qs = self.query_string
        if qs:
            return f"{self.raw_path}?{qs}"
        return self.raw_path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        server = scope.get("server")
        client = scope.get("client")
        raw_path = scope.get("raw_path") or b""
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=raw_path.decode("latin-1") if raw_path else scope["path"],
            headers=headers,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            scheme=scope.get("scheme", "http"),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
