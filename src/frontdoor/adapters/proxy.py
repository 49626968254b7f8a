"""Single-host reverse proxy adapter.

Forwards the request to a fixed upstream origin and streams the
upstream response back unchanged.
"""

import logging
from collections.abc import AsyncIterator
from urllib.parse import urlsplit

import httpx

from frontdoor.http.request import Request
from frontdoor.http.response import Response, StreamingResponse, plain_text

logger = logging.getLogger("frontdoor.proxy")

HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


def join_url(base: str, path: str, query: str = "") -> str:
    """Join the upstream base URL with a request path and query.

    Exactly one slash separates the base path from the request path::

        join_url("http://review:8000/", "/r/1")      -> "http://review:8000/r/1"
        join_url("http://docs/godoc", "/pkg/x", "a") -> "http://docs/godoc/pkg/x?a"
    """
    parts = urlsplit(base)
    base_path = parts.path or "/"
    if base_path.endswith("/") and path.startswith("/"):
        joined = base_path + path[1:]
    elif not base_path.endswith("/") and not path.startswith("/"):
        joined = base_path + "/" + path
    else:
        joined = base_path + path
    url = f"{parts.scheme}://{parts.netloc}{joined}"
    combined = "&".join(q for q in (parts.query, query) if q)
    if combined:
        url += "?" + combined
    return url


def _filter(headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
    connection_tokens = {
        token.strip().lower()
        for name, value in headers
        if name.lower() == "connection"
        for token in value.split(",")
    }
    return [
        (name, value)
        for name, value in headers
        if name.lower() not in HOP_BY_HOP and name.lower() not in connection_tokens
    ]


class ReverseProxy:
    """Adapter that proxies every request to one upstream.

    The incoming Host header is forwarded as-is, hop-by-hop headers are
    dropped in both directions, and the client address is appended to
    ``X-Forwarded-For``. A connection failure is logged and answered
    with ``502 Bad Gateway``.

    Usage::

        app.mount("/r/", ReverseProxy("http://review.internal:8000/"))

    One pooled client is shared by all requests. It is created on first
    use and released by :meth:`aclose`, which the site registers as a
    shutdown hook. *transport* replaces the network transport; tests pass
    an ``httpx.MockTransport``.
    """

    __slots__ = ("_client", "_target", "_timeout", "_transport")

    def __init__(
        self,
        target: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = 300.0,
    ) -> None:
        self._target = target
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def target(self) -> str:
        return self._target

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=False,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the pooled upstream client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _outgoing_headers(self, request: Request) -> list[tuple[str, str]]:
        headers = _filter(request.headers.items_decoded())
        if request.client is not None:
            prior = request.headers.get_list("x-forwarded-for")
            forwarded = ", ".join([*prior, request.client[0]])
            headers = [(k, v) for k, v in headers if k != "x-forwarded-for"]
            headers.append(("x-forwarded-for", forwarded))
        return headers

    async def __call__(self, request: Request) -> StreamingResponse | Response:
        url = join_url(self._target, request.raw_path, request.query_string)
        client = self._get_client()
        has_body = bool(request.content_length) or "transfer-encoding" in request.headers
        outgoing = client.build_request(
            request.method,
            url,
            headers=self._outgoing_headers(request),
            content=request.stream() if has_body else None,
        )
        try:
            upstream = await client.send(outgoing, stream=True)
        except httpx.HTTPError as exc:
            logger.error("proxy error: %s %s: %s", request.method, url, exc)
            return plain_text("Bad Gateway", 502)

        return StreamingResponse(
            chunks=_relay(upstream),
            status=upstream.status_code,
            content_type=None,
            headers=tuple(_filter(list(upstream.headers.multi_items()))),
        )


async def _relay(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream.aiter_raw():
            yield chunk
    finally:
        await upstream.aclose()
