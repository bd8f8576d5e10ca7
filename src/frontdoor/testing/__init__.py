"""Test utilities for frontdoor servers.

    from frontdoor.testing import TestClient
"""

from frontdoor.testing.client import TestClient

__all__ = ["TestClient"]
