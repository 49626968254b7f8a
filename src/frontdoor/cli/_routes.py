"""``frontdoor --routes`` — list the routing table.

Builds the site from the configuration and prints every route in
registration order with its pattern, host, and adapter.
"""

import sys

from frontdoor.config import SiteConfig
from frontdoor.errors import ConfigurationError


def print_routes(config: SiteConfig) -> None:
    """Print a table of PATTERN, HOST, and ADAPTER."""
    from frontdoor.site import create_site

    try:
        app = create_site(config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str]] = []
    for route in app.routes:
        adapter = getattr(route.handler, "__name__", type(route.handler).__name__)
        if route.name:
            adapter = f"{adapter} ({route.name})"
        rows.append((route.pattern, route.host or "*", adapter))

    max_pattern = max([len(r[0]) for r in rows] + [7])  # "PATTERN" header
    max_host = max([len(r[1]) for r in rows] + [4])  # "HOST" header

    fmt = f"{{:<{max_pattern}}}  {{:<{max_host}}}  {{}}"
    print(fmt.format("PATTERN", "HOST", "ADAPTER"))
    sep_len = max_pattern + max_host + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for pattern, host, adapter in rows:
        print(fmt.format(pattern, host, adapter))
