"""Access logging in the combined log format.

One line per request on the ``frontdoor.access`` logger::

    203.0.113.9 - - [18/Oct/2026:10:55:36 +0000] "GET /code/ HTTP/1.1" 200 5120 "-" "curl/8.5"

Handlers are attached by ``configure_logging()``: stdout, an
hourly-rotated ``access.log`` in the log directory, or both.
"""

import logging
import logging.handlers
import sys
import time
from collections.abc import AsyncIterator
from dataclasses import replace
from pathlib import Path

from frontdoor.http.request import Request
from frontdoor.http.response import StreamingResponse
from frontdoor.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("frontdoor.access")

ACCESS_LOG_NAME = "access.log"


def configure_logging(log_dir: str | Path = "", log_stdout: bool = True) -> logging.Logger:
    """Attach access-log handlers and return the access logger.

    Replaces handlers from an earlier call so reconfiguring never
    duplicates lines.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter("%(message)s")
    if log_stdout:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(formatter)
        logger.addHandler(stream)
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.TimedRotatingFileHandler(path / ACCESS_LOG_NAME, when="H")
        rotating.setFormatter(formatter)
        logger.addHandler(rotating)

    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_line(request: Request, status: int, size: int, when: float | None = None) -> str:
    """Render one combined-log-format line."""
    client = request.client[0] if request.client else "-"
    stamp = time.strftime("%d/%b/%Y:%H:%M:%S %z", time.localtime(when))
    request_line = f"{request.method} {request.request_uri} HTTP/{request.http_version}"
    referer = request.headers.get("referer") or "-"
    agent = request.user_agent or "-"
    return (
        f'{client} - - [{stamp}] "{_quote(request_line)}" {status} {size} '
        f'"{_quote(referer)}" "{_quote(agent)}"'
    )


class AccessLog:
    """Middleware that logs every request after its response is produced.

    Streamed bodies (proxy, CGI) are logged when the stream ends so the
    byte count is the number actually produced.

    Usage::

        configure_logging(config.log_dir, config.log_stdout)
        app.add_middleware(AccessLog())
    """

    __slots__ = ("_logger",)

    def __init__(self, access_logger: logging.Logger | None = None) -> None:
        self._logger = access_logger or logger

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        started = time.time()
        response = await next(request)

        if isinstance(response, StreamingResponse):
            return replace(response, chunks=self._counting(response, request, started))

        self._logger.info(format_line(request, response.status, len(response.body_bytes), started))
        return response

    async def _counting(
        self,
        response: StreamingResponse,
        request: Request,
        started: float,
    ) -> AsyncIterator[str | bytes]:
        size = 0
        try:
            if isinstance(response.chunks, AsyncIterator):
                async for chunk in response.chunks:
                    size += len(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
                    yield chunk
            else:
                for chunk in response.chunks:
                    size += len(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
                    yield chunk
        finally:
            self._logger.info(format_line(request, response.status, size, started))
