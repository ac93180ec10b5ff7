"""Test utilities for muxr routers.

    from muxr.testing import TestClient
"""

from muxr.testing.client import TestClient

__all__ = ["TestClient"]
