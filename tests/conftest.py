"""Shared fixtures for PaperScout tests."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    from cache import CacheStore
    return CacheStore(max_size=5, default_ttl=60, clock=clock)


@pytest.fixture(autouse=True)
def fresh_app_context():
    """Give every test its own process-wide cache."""
    from cache import reset_app_context
    yield reset_app_context()
    reset_app_context()
