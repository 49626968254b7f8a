"""Site templating — kida environment, output filters, page renderer."""

from frontdoor.templating.renderer import PageData, PageRenderer, create_environment

__all__ = ["PageData", "PageRenderer", "create_environment"]
