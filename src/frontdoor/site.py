"""The site: every route, adapter, and filter wired into one App.

Routes are registered in a fixed order; the router's precedence rules
(host, then exact, then longest prefix, then order) pick the adapter.
Requests no route claims go to the content pages.
"""

import httpx

from frontdoor.adapters import (
    CGIHandler,
    InterfaceAddress,
    IssueRedirect,
    RedirectTo,
    RequireTLS,
    ReverseProxy,
    ScriptOrAssets,
    StaticFiles,
)
from frontdoor.app import App
from frontdoor.config import SiteConfig
from frontdoor.content.pages import ContentPages
from frontdoor.middleware.access_log import AccessLog, configure_logging
from frontdoor.middleware.filters import HostFilter
from frontdoor.middleware.protocol import wrap
from frontdoor.middleware.urlfix import FixEncodedSemicolons
from frontdoor.mirror.sync import MirrorSync, prepare_mirror_dir
from frontdoor.templating.renderer import PageRenderer

CODE_ROOT = "/code/"


def create_site(
    config: SiteConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> App:
    """Build the site App from *config*.

    Loads the page templates immediately, so a missing or broken
    template raises ConfigurationError here rather than at the first
    request. *transport* is handed to every reverse proxy (tests pass
    an ``httpx.MockTransport``).
    """
    config = (config or SiteConfig()).resolved()
    renderer = PageRenderer(config.template_dir)
    app = App(config)
    proxies: list[ReverseProxy] = []

    static = StaticFiles(config.static_dir)
    app.mount("/favicon.ico", static, name="favicon")
    app.mount("/robots.txt", static, name="robots")
    app.mount("/static/", StaticFiles(config.static_dir, prefix="/static/"), name="static")
    app.mount("/talks/", StaticFiles(config.talks_dir, prefix="/talks/"), name="talks")

    if config.docs_backend:
        docs = ReverseProxy(config.docs_backend, transport=transport)
        proxies.append(docs)
        app.mount("/pkg/", docs, name="pkg")
        app.mount("/cmd/", docs, name="cmd")

    if config.gerrit_host:
        gerrit = ReverseProxy(config.gerrit_url, transport=transport)
        proxies.append(gerrit)
        review = RequireTLS(
            gerrit,
            enabled=config.https_enabled,
            canonical_host=config.canonical_host,
        )
        app.mount("/r/", review, name="review")

    app.mount("/debugz/ip", InterfaceAddress(config.diag_interface), name="debugz-ip")
    app.mount("/code", RedirectTo(CODE_ROOT), name="code-redirect")

    if config.gitweb_script:
        gitweb = ScriptOrAssets(
            CGIHandler(config.gitweb_script, root=CODE_ROOT, env=config.gitweb_env()),
            StaticFiles(config.gitweb_files, prefix=CODE_ROOT),
            root=CODE_ROOT,
        )
        fix = FixEncodedSemicolons(config.corrupt_sequence)
        app.mount(CODE_ROOT, wrap(gitweb, fix), name="code")

    app.mount("/issue/", IssueRedirect(config.issue_tracker_url), name="issue")

    if config.buildbot_host and config.buildbot_backend:
        buildbot = ReverseProxy(config.buildbot_backend, transport=transport)
        proxies.append(buildbot)
        app.mount(
            config.buildbot_host.rstrip("/") + "/",
            buildbot,
            name="buildbot",
        )

    app.fallback(ContentPages.from_config(config, renderer))

    if config.logging_enabled:
        configure_logging(config.log_dir, config.log_stdout)
        app.add_middleware(AccessLog())
    app.add_middleware(HostFilter(config))

    app.on_startup(lambda: prepare_mirror_dir(config.mirror_dir))
    if config.gerrit_host:
        app.background(MirrorSync.from_config(config).run)
    for proxy in proxies:
        app.on_shutdown(proxy.aclose)

    return app
