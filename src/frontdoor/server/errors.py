"""Error handling pipeline for frontdoor requests.

Maps HTTPError exceptions and unexpected failures to plain-text
responses. Never exposes a traceback or exception object to the client.
"""

import logging

from frontdoor.errors import HTTPError
from frontdoor.http.request import Request
from frontdoor.http.response import Response, plain_text

logger = logging.getLogger("frontdoor.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a plain-text Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    resp = plain_text(exc.detail or f"Error {exc.status}", exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.error("500 %s %s", request.method, request.path, exc_info=exc)
    return plain_text("Internal Server Error", 500)
