"""Pytest configuration and fixtures."""

import pytest

from liquidity_book.clock import ManualClock
from liquidity_book.pool import Pool, PoolRegistry
from tests.helpers import make_pool


@pytest.fixture
def clock() -> ManualClock:
    """A manual clock starting at t=1000ms."""
    return ManualClock(1000)


@pytest.fixture
def pool(clock: ManualClock) -> Pool:
    """A fee-free pool at price 1.0 with a 1% bin step."""
    return make_pool(clock=clock)


@pytest.fixture
def fee_pool(clock: ManualClock) -> Pool:
    """A pool at price 1.0 with a 1% bin step and a 1% fee."""
    return make_pool("fee-pool", fee_bps=100, clock=clock)


@pytest.fixture
def registry(clock: ManualClock) -> PoolRegistry:
    """An empty registry whose pools share the manual clock."""
    return PoolRegistry(clock=clock)
