"""
Integration tests for TrackedWorkerThread driving a tracker from its own thread.
"""

import pytest

from threadstats.services.thread_tracking import (
    StatisticKind,
    TrackedWorkerThread,
    TrackerState,
    first_client_connected_start_tracking,
)


def _run(worker, items):
    worker.start()
    for item in items:
        worker.submit(item)
    worker.stop()
    worker.join(timeout=5)
    assert not worker.is_alive()


def test_worker_counts_processed_items(active_registry, burn_cpu):
    handled = []

    def handler(item):
        burn_cpu(1)
        handled.append(item)

    worker = TrackedWorkerThread("Worker-1", handler, registry=active_registry)
    _run(worker, range(5))

    assert handled == [0, 1, 2, 3, 4]
    assert worker.tracker.num_requests == 5
    assert worker.tracker.state is TrackerState.EXECUTING
    assert worker.tracker.processing_cpu_time.elapsed_ms > 0
    assert worker.tracker.executing_wall_clock_time.elapsed_ms >= worker.tracker.processing_wall_clock_time.elapsed_ms
    assert not worker.tracker.executing_wall_clock_time.is_running
    assert active_registry.total_requests() == 5.0


def test_worker_batches_queued_items(active_registry):
    """Items already queued when the worker starts are drained in batches."""
    seen = []
    worker = TrackedWorkerThread("Worker-1", seen.append, registry=active_registry, batch_size=4)
    for item in range(10):
        worker.submit(item)
    worker.stop()
    worker.start()
    worker.join(timeout=5)

    assert seen == list(range(10))
    assert worker.tracker.num_requests == 10


def test_handler_failure_does_not_stop_worker(active_registry):
    def handler(item):
        if item == 1:
            raise RuntimeError("boom")

    worker = TrackedWorkerThread("Worker-1", handler, registry=active_registry)
    _run(worker, [0, 1, 2])

    assert worker.tracker.num_requests == 3


def test_worker_before_activation_measures_nothing(registry):
    worker = TrackedWorkerThread("Worker-1", lambda item: None, registry=registry)
    _run(worker, [0, 1])

    assert worker.tracker.num_requests == 0
    assert worker.tracker.state is TrackerState.NOT_STARTED
    for kind in StatisticKind:
        assert worker.tracker.current_value(kind) == 0.0


def test_first_client_connected_activates_default_registry(default_registry):
    worker = TrackedWorkerThread("Worker-1", lambda item: None)
    assert worker.tracker.registry is default_registry
    assert default_registry.collection_active is False

    first_client_connected_start_tracking()
    _run(worker, [0, 1, 2])

    assert default_registry.collection_active is True
    assert default_registry.total_requests() == 3.0


def test_invalid_batch_size(active_registry):
    with pytest.raises(ValueError):
        TrackedWorkerThread("Worker-1", lambda item: None, registry=active_registry, batch_size=0)
