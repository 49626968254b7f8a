"""Start the site server.

Builds the site from the configuration and serves it until
interrupted. Template and listener failures are fatal.
"""

import logging
import sys

from frontdoor.config import SiteConfig
from frontdoor.errors import ConfigurationError

logger = logging.getLogger("frontdoor.server")


def run_site(config: SiteConfig) -> None:
    """Build the site App and serve it on the configured listeners."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    from frontdoor.site import create_site

    try:
        app = create_site(config)
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except (OSError, ConfigurationError) as exc:
        logger.critical("Serve error: %s", exc)
        raise SystemExit(1) from exc
