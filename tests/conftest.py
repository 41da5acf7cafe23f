import time

import pytest

from threadstats.services.thread_tracking import (
    ThreadTrackingRegistry,
    get_thread_tracking_registry,
    set_thread_tracking_registry,
)


@pytest.fixture
def registry():
    """Fresh registry with collection still inactive."""
    return ThreadTrackingRegistry()


@pytest.fixture
def active_registry():
    registry = ThreadTrackingRegistry()
    registry.activate_collection()
    return registry


@pytest.fixture
def default_registry():
    """Swap in a fresh process-wide registry for the duration of a test."""
    previous = get_thread_tracking_registry()
    fresh = ThreadTrackingRegistry()
    set_thread_tracking_registry(fresh)
    yield fresh
    set_thread_tracking_registry(previous)


@pytest.fixture
def burn_cpu():
    """Return a function that spins the calling thread for at least ``ms`` of CPU time."""
    def _burn(ms: float = 5.0) -> None:
        target = time.thread_time_ns() + int(ms * 1_000_000)
        x = 0
        while time.thread_time_ns() < target:
            x += 1
    return _burn
