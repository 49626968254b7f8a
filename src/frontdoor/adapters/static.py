"""Static file adapter.

Serves files from a directory for requests routed to it. The route
prefix is stripped before the path is resolved under the directory.
"""

import mimetypes
from pathlib import Path

import anyio

from frontdoor.errors import HTTPError
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect, Response, plain_text


class StaticFiles:
    """Adapter that serves a directory tree.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Directories are served through their ``index.html``; a directory
    requested without its trailing slash is redirected to the slashed
    form first so relative links inside the index resolve.

    Usage::

        app.mount("/static/", StaticFiles(config.static_dir, prefix="/static/"))
        app.mount("/favicon.ico", StaticFiles(config.static_dir))
    """

    __slots__ = ("_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "",
        *,
        index: str = "index.html",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._prefix = prefix.rstrip("/")

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(self, request: Request) -> Response | Redirect:
        if request.method not in ("GET", "HEAD"):
            raise HTTPError(
                status=405, detail="Method Not Allowed", headers=(("Allow", "GET, HEAD"),)
            )

        path = request.path
        if self._prefix and path.startswith(self._prefix):
            path = path[len(self._prefix) :]
        relative = path.lstrip("/")

        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return plain_text("403 Forbidden", 403)

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return _not_found()
            if not request.path.endswith("/"):
                return Redirect(request.raw_path + "/", status=301)
            file_path = index_path

        if not file_path.is_file():
            return _not_found()

        return await self._serve_file(file_path)

    async def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/"):
            content_type += "; charset=utf-8"

        body = await anyio.Path(file_path).read_bytes()
        return Response(body=body, content_type=content_type)


def _not_found() -> Response:
    return plain_text("404 page not found", 404)
