"""Redirect away URLs whose query delimiters were percent-encoded twice."""

from frontdoor.http.request import Request
from frontdoor.http.response import Redirect
from frontdoor.middleware.protocol import AnyResponse, Next


class FixEncodedSemicolons:
    """Redirect requests carrying an encoded semicolon to the decoded URL.

    Some link rewriters turn gitweb's ``;`` separators into ``%3B``.
    The CGI program cannot parse that form, so the client is sent to
    the corrected URI instead. Only the corrupt sequence is replaced;
    every other byte of the URI is left as received.

    Usage::

        app.mount("/code/", wrap(gitweb, FixEncodedSemicolons()))
    """

    __slots__ = ("_sequence",)

    def __init__(self, sequence: str = "%3B") -> None:
        self._sequence = sequence

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        uri = request.request_uri
        fixed = uri.replace(self._sequence, ";")
        if fixed != uri:
            return Redirect(fixed).to_response()
        return await next(request)
