"""Site content — path resolution and the fallback page handler."""

from frontdoor.content.pages import ContentPages
from frontdoor.content.resolver import (
    ContentError,
    ContentFile,
    ContentResolver,
    TraversalError,
    extract_title,
)

__all__ = [
    "ContentError",
    "ContentFile",
    "ContentPages",
    "ContentResolver",
    "TraversalError",
    "extract_title",
]
