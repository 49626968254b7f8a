"""Test utilities for frontdoor applications.

    from frontdoor.testing import TestClient
"""

from frontdoor.testing.client import TestClient

__all__ = ["TestClient"]
