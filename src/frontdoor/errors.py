"""Frontdoor exception hierarchy.

Shared across Router, App, adapters, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class FrontdoorError(Exception):
    """Base for all frontdoor-specific errors."""


class ConfigurationError(FrontdoorError):
    """Raised when site configuration or templates are invalid.

    Always raised at startup. The CLI treats it as fatal.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(FrontdoorError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or adapters. The ASGI handler
    catches these and turns them into a plain-text response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400 — the request path or parameters are malformed."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route or file matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
