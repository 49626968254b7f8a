"""Frontdoor CLI — run the site server.

Entry point registered as ``frontdoor`` in ``pyproject.toml``::

    [project.scripts]
    frontdoor = "frontdoor.cli:main"
"""

import argparse

from frontdoor.config import DEFAULT_GITWEB_FILES, DEFAULT_HTTP_ADDR, SiteConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frontdoor",
        description="Frontdoor — front-door web server for a project site.",
    )

    # -- Listeners --------------------------------------------------------
    parser.add_argument("--http", default=DEFAULT_HTTP_ADDR, help="HTTP address")
    parser.add_argument("--https", default="", help="HTTPS address")
    parser.add_argument("--tlscert", default="", help="TLS cert file")
    parser.add_argument("--tlskey", default="", help="TLS private key file")

    # -- Site -------------------------------------------------------------
    parser.add_argument(
        "--root",
        default="",
        help="Website root (parent of 'static', 'content', and 'tmpl')",
    )
    parser.add_argument(
        "--gitwebscript",
        default="/usr/lib/cgi-bin/gitweb.cgi",
        help="Path to gitweb.cgi, or blank to disable",
    )
    parser.add_argument(
        "--gitwebfiles",
        default=DEFAULT_GITWEB_FILES,
        help="Path to gitweb's static files",
    )

    # -- Logging ----------------------------------------------------------
    parser.add_argument("--logdir", default="", help="Directory to store logs. Empty to disable.")
    parser.add_argument(
        "--logstdout",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write access logs to stdout",
    )

    # -- Backends ---------------------------------------------------------
    parser.add_argument("--gerrituser", default="ubuntu", help="Gerrit host's username")
    parser.add_argument("--gerrithost", default="", help="Gerrit host, or empty.")
    parser.add_argument("--buildbot-backend", default="", help="Build bot status backend URL")
    parser.add_argument(
        "--buildbot-host",
        default="",
        help="Hostname to map to the buildbot backend",
    )
    parser.add_argument(
        "--docs-backend",
        default="",
        help="Package documentation backend URL for /pkg/ and /cmd/, or empty",
    )

    parser.add_argument(
        "--routes",
        action="store_true",
        help="Print the routing table and exit",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SiteConfig:
    """Assemble the immutable site configuration from parsed flags."""
    return SiteConfig(
        http_addr=args.http,
        https_addr=args.https,
        tls_cert_file=args.tlscert,
        tls_key_file=args.tlskey,
        root=args.root,
        gitweb_script=args.gitwebscript,
        gitweb_files=args.gitwebfiles,
        log_dir=args.logdir,
        log_stdout=args.logstdout,
        gerrit_user=args.gerrituser,
        gerrit_host=args.gerrithost,
        buildbot_backend=args.buildbot_backend,
        buildbot_host=args.buildbot_host,
        docs_backend=args.docs_backend,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``frontdoor`` command."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    if args.routes:
        from frontdoor.cli._routes import print_routes

        print_routes(config)
    else:
        from frontdoor.cli._run import run_site

        run_site(config)
