"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    AccessLog -- Combined-log-format request logging
    FixEncodedSemicolons -- Redirect ``%3B``-corrupted gitweb URLs
    HostFilter -- Bot denial and secondary-host canonicalization
"""

from frontdoor.middleware.access_log import AccessLog, configure_logging
from frontdoor.middleware.filters import HostFilter
from frontdoor.middleware.protocol import Middleware, Next, chain, wrap
from frontdoor.middleware.urlfix import FixEncodedSemicolons

__all__ = [
    "AccessLog",
    "FixEncodedSemicolons",
    "HostFilter",
    "Middleware",
    "Next",
    "chain",
    "configure_logging",
    "wrap",
]
