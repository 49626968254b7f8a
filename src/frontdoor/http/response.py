"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    # -- Header access --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def plain_text(body: str, status: int) -> Response:
    """A ``text/plain`` response with a trailing newline, for errors and denials."""
    return Response(body=body + "\n", status=status, content_type="text/plain; charset=utf-8")


@dataclass(frozen=True, slots=True)
class Redirect:
    """A redirect response."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()

    def to_response(self) -> Response:
        """Build the concrete Response with a Location header and short body."""
        text = _REDIRECT_TEXT.get(self.status, "Redirect")
        body = f'<a href="{_escape_attr(self.url)}">{text}</a>.\n\n'
        return (
            Response(body=body, status=self.status)
            .with_header("Location", self.url)
            .with_headers(dict(self.headers))
        )


_REDIRECT_TEXT = {
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
}


def _escape_attr(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&#34;")
        .replace("'", "&#39;")
    )


@dataclass(frozen=True, slots=True)
class StreamingResponse:
    """A streaming HTTP response that sends chunks progressively.

    Used for proxied and CGI bodies: headers are sent immediately,
    then each chunk is sent as an ASGI body message with
    ``more_body=True``.

    Supports the same ``.with_*()`` chainable API as ``Response``
    so middleware can modify headers/status without knowing the
    response is streamed.
    """

    chunks: Iterator[str | bytes] | AsyncIterator[str | bytes]
    status: int = 200
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "StreamingResponse":
        """Return a new StreamingResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "StreamingResponse":
        """Return a new StreamingResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None
