"""Pytest configuration and fixtures for cache_dial tests."""
import pytest


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a fake clock for expiry tests."""
    return FakeClock()
