"""Shared fixtures for the ratatype test suite."""

from __future__ import annotations

import pytest


class FakeClock:
    """Monotonic clock whose time only moves when a test advances it."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
