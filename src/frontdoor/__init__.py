"""Frontdoor — a front-door web server for a project site.

Serves static trees, renders content pages through a template, proxies
code review and build status to their backends, and runs gitweb as a
CGI program, all behind one ordered routing table.

Basic usage::

    from frontdoor import SiteConfig, create_site

    app = create_site(SiteConfig(root="/srv/site", gerrit_host="review.internal"))
    app.run()

Or from the command line::

    frontdoor --root /srv/site --http :8080 --logdir /var/log/frontdoor
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "BadRequest",
    "ConfigurationError",
    "FrontdoorError",
    "HTTPError",
    "Middleware",
    "Next",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "SiteConfig",
    "StreamingResponse",
    "create_site",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import frontdoor`` fast while providing a clean top-level API.
    """
    if name == "App":
        from frontdoor.app import App

        return App

    if name == "SiteConfig":
        from frontdoor.config import SiteConfig

        return SiteConfig

    if name == "create_site":
        from frontdoor.site import create_site

        return create_site

    if name == "Request":
        from frontdoor.http.request import Request

        return Request

    if name in ("Response", "Redirect", "StreamingResponse"):
        from frontdoor.http import response as _resp

        return getattr(_resp, name)

    if name in ("AnyResponse", "Middleware", "Next"):
        from frontdoor.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "FrontdoorError",
        "HTTPError",
        "NotFound",
    ):
        from frontdoor import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
