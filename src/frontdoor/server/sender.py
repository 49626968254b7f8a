"""ASGI response sending — translates frontdoor Response types to ASGI messages.

Handles both standard single-body responses and streamed responses
from the proxy and CGI adapters.
"""

import logging
from collections.abc import AsyncIterator

from frontdoor._internal.asgi import Send
from frontdoor.http.response import Response, StreamingResponse

logger = logging.getLogger("frontdoor.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_chunk(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls.

    For HEAD requests the headers (including Content-Length) describe
    the full body, but no body bytes are sent.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    if head:
        body = b""
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(
    response: StreamingResponse,
    send: Send,
    *,
    head: bool = False,
) -> None:
    """Send a streaming response chunk by chunk.

    Sends headers immediately, then each chunk as an ASGI body
    message with ``more_body=True``. Closes with an empty body.
    A mid-stream failure is logged and the stream is closed early;
    the status line has already been sent, so nothing else can be done.
    """
    raw_headers: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    sent = 0
    try:
        if isinstance(response.chunks, AsyncIterator):
            async for chunk in response.chunks:
                if chunk and not head:
                    data = _encode_chunk(chunk)
                    sent += len(data)
                    await send({"type": "http.response.body", "body": data, "more_body": True})
        else:
            for chunk in response.chunks:
                if chunk and not head:
                    data = _encode_chunk(chunk)
                    sent += len(data)
                    await send({"type": "http.response.body", "body": data, "more_body": True})
    except Exception:
        logger.exception("Response stream failed after %d bytes", sent)

    # Close the stream
    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
