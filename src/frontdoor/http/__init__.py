"""HTTP primitives — immutable Request, chainable Response."""

from frontdoor.http.headers import Headers
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect, Response, StreamingResponse

__all__ = [
    "Headers",
    "Redirect",
    "Request",
    "Response",
    "StreamingResponse",
]
