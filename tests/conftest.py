"""Pytest configuration and shared fixtures."""

import pytest

from loka.storage.kv import MemoryKeyValueStore
from loka.store.controller import AppController


class FakeClock:
    """Manually advanced clock returning seconds since the epoch."""

    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def controller(kv, clock) -> AppController:
    return AppController(kv, clock=clock)
