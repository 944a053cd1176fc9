"""
Shared fixtures for Keygate tests
"""

import pytest

from keygate.services.key_registry import KeyRegistry
from keygate.services.registry_storage import InMemoryRegistryStorage


# 2023-11-14T22:13:20.000Z
START_TIME_MS = 1_700_000_000_000


class FakeClock:
    """Controllable millisecond clock"""

    def __init__(self, start: int = START_TIME_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    """Clock frozen at START_TIME_MS until advanced"""
    return FakeClock()


@pytest.fixture
def memory_storage():
    """Empty in-memory registry storage"""
    return InMemoryRegistryStorage()


@pytest.fixture
def registry(memory_storage, clock):
    """KeyRegistry over in-memory storage and the fake clock"""
    return KeyRegistry(storage=memory_storage, clock=clock)
