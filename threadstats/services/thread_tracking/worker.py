"""
Worker thread that reports its own executing and processing time.

The tracker is built in the constructor, i.e. on the thread that creates the
worker, and every lifecycle call is made from run() on the worker thread.
"""
import queue
import threading
from typing import Any, Callable, List, Optional

from threadstats.core.logging_config import get_logger
from threadstats.services.statistics import StatisticsLevel
from .registry import ThreadTrackingRegistry
from .stage_analysis import StageAnalysis
from .tracker import ThreadTrackingStatistic

logger = get_logger(__name__)

_STOP = object()


class TrackedWorkerThread(threading.Thread):
    """Consumes work items from a queue, processing them in batches."""

    def __init__(
        self,
        name: str,
        handler: Callable[[Any], None],
        registry: Optional[ThreadTrackingRegistry] = None,
        batch_size: int = 1,
        statistics_level: Optional[StatisticsLevel] = None,
        stage_analysis: Optional[StageAnalysis] = None,
    ):
        """
        Initialize the worker and its tracker.

        Args:
            name: Thread name, also used to label its statistics
            handler: Called once per work item on the worker thread
            registry: Thread tracking registry; defaults to the process-wide one
            batch_size: Maximum number of queued items handled per processing span
            statistics_level: Collection verbosity for the tracker
            stage_analysis: Optional consumer notified of the tracker
        """
        super().__init__(name=name, daemon=True)
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.handler = handler
        self.batch_size = batch_size
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self.tracker = ThreadTrackingStatistic(
            name,
            registry=registry,
            statistics_level=statistics_level,
            stage_analysis=stage_analysis,
        )

    def submit(self, item: Any) -> None:
        self._queue.put(item)

    def stop(self) -> None:
        """Ask the worker to exit once the items queued so far are handled."""
        self._queue.put(_STOP)

    def run(self) -> None:
        self.tracker.on_start_execution()
        logger.debug(f"Worker '{self.name}' started")
        try:
            stopping = False
            while not stopping:
                item = self._queue.get()
                if item is _STOP:
                    break
                batch, stopping = self._collect_batch(item)
                self._process_batch(batch)
        finally:
            self.tracker.on_stop_execution()
            logger.debug(f"Worker '{self.name}' stopped after {self.tracker.num_requests} requests")

    def _collect_batch(self, first: Any):
        """
        Drain up to batch_size items without blocking.

        Returns:
            Tuple of (batch, stop_requested)
        """
        batch: List[Any] = [first]
        while len(batch) < self.batch_size:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _STOP:
                return batch, True
            batch.append(item)
        return batch, False

    def _process_batch(self, batch: List[Any]) -> None:
        self.tracker.on_start_processing()
        try:
            for item in batch:
                try:
                    self.handler(item)
                except Exception:
                    logger.exception(f"Worker '{self.name}' failed to handle item {item!r}")
            self.tracker.increment_number_of_processed(len(batch))
        finally:
            self.tracker.on_stop_processing()
