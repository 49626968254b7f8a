"""Host and bot filtering, evaluated before any routing."""

import logging

from frontdoor.config import SiteConfig
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect, plain_text
from frontdoor.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("frontdoor.server")


class HostFilter:
    """Reject crawler storms on the source browser and canonicalize the host.

    Two checks, in order:

    1. A request whose URI contains the protected path and a query
       string, sent by a known bot user agent, is answered with
       ``401 bye``.
    2. A request addressed to the secondary hostname is redirected
       (302) to the same URI on the canonical hostname.

    The bot check runs first so a bot hitting the protected path on
    the secondary host is blocked rather than bounced.

    Usage::

        app.add_middleware(HostFilter(config))
    """

    __slots__ = ("_bots", "_canonical", "_protected", "_secondary")

    def __init__(self, config: SiteConfig) -> None:
        self._bots = config.bot_agents
        self._protected = config.protected_path
        self._canonical = config.canonical_host
        self._secondary = config.secondary_host.lower()

    def is_bot(self, user_agent: str) -> bool:
        """True if *user_agent* contains any of the configured bot substrings."""
        return any(bot in user_agent for bot in self._bots)

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        uri = request.request_uri
        if self._protected in uri and request.query_string and self.is_bot(request.user_agent):
            logger.info("bot denied: %s %s", request.user_agent, uri)
            return plain_text("bye", 401)

        if self._secondary and request.host.lower() == self._secondary:
            return Redirect(f"http://{self._canonical}{uri}").to_response()

        return await next(request)
