"""Fallback handler: content files rendered through the page template."""

import logging

import anyio.to_thread

from frontdoor.config import SiteConfig
from frontdoor.content.resolver import ContentError, ContentResolver, TraversalError
from frontdoor.errors import BadRequest
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect, Response
from frontdoor.templating.renderer import PageData, PageRenderer

logger = logging.getLogger("frontdoor.content")

GITWEB_PREFIX = "gw/"


class ContentPages:
    """Serve every request no route claimed.

    ``/gw/<file>`` is a short link into the source browser. Any other
    path is resolved under the content root and wrapped in the page
    template, titled by the file's first ``<h1>``. A path that cannot
    be resolved renders the error template inside the page template
    with status 404.
    """

    __slots__ = ("_canonical_host", "_renderer", "_repo", "_resolver")

    def __init__(
        self,
        resolver: ContentResolver,
        renderer: PageRenderer,
        *,
        canonical_host: str,
        repo: str,
    ) -> None:
        self._resolver = resolver
        self._renderer = renderer
        self._canonical_host = canonical_host
        self._repo = repo

    @classmethod
    def from_config(cls, config: SiteConfig, renderer: PageRenderer) -> "ContentPages":
        return cls(
            ContentResolver(config.content_dir),
            renderer,
            canonical_host=config.canonical_host,
            repo=config.gitweb_repo,
        )

    def source_link(self, path: str) -> str:
        return f"http://{self._canonical_host}/code/?p={self._repo};f={path};hb=master"

    async def __call__(self, request: Request) -> Response | Redirect:
        relpath = request.path[1:]
        if ".." in relpath:
            raise BadRequest()

        if relpath.startswith(GITWEB_PREFIX):
            return Redirect(self.source_link(relpath[len(GITWEB_PREFIX) :]))

        try:
            content = await anyio.to_thread.run_sync(self._resolver.resolve, relpath)
        except TraversalError:
            raise BadRequest() from None
        except ContentError as exc:
            logger.info("%s", exc)
            return self.error_page(exc)

        body = self._renderer.render_page(PageData(title=content.title, content=content.data))
        return Response(body=body)

    def error_page(self, exc: ContentError) -> Response:
        """The 404 page for a path that could not be resolved."""
        # The error text may include an absolute path; the error
        # template decides how it is escaped.
        details = self._renderer.render_error(exc)
        body = self._renderer.render_page(PageData(title=f"File {exc.relpath}", content=details))
        return Response(body=body, status=404)
