"""Test utilities for parvus servers.

    from parvus.testing import TestClient
"""

from parvus.testing.client import CapturedResponse, TestClient
from parvus.testing.sse import SSETestResult, parse_sse_frames

__all__ = ["CapturedResponse", "SSETestResult", "TestClient", "parse_sse_frames"]
