"""Backend adapters — one callable per kind of backend.

An adapter is any ``(request) -> response value`` callable. Each one
holds an immutable backend descriptor fixed at startup.

    StaticFiles -- Directory-rooted file server
    ReverseProxy -- Single-host reverse proxy
    RequireTLS -- Redirect plaintext requests to HTTPS before proxying
    CGIHandler -- Per-request CGI/1.1 program
    ScriptOrAssets -- CGI program at the root, static assets below it
    RedirectTo, IssueRedirect -- Redirect-only adapters
    InterfaceAddress -- Diagnostic IPv4 address report
"""

from frontdoor.adapters.cgi import CGIHandler, ScriptOrAssets
from frontdoor.adapters.diagnostics import InterfaceAddress
from frontdoor.adapters.proxy import ReverseProxy
from frontdoor.adapters.redirects import IssueRedirect, RedirectTo
from frontdoor.adapters.static import StaticFiles
from frontdoor.adapters.tls import RequireTLS

__all__ = [
    "CGIHandler",
    "InterfaceAddress",
    "IssueRedirect",
    "RedirectTo",
    "RequireTLS",
    "ReverseProxy",
    "ScriptOrAssets",
    "StaticFiles",
]
