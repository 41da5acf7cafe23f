"""ThreadTrackingStatistic - CPU and wall-clock timing of one worker thread.

A tracker separates two spans of its thread's life:

* the *executing* span, while the thread is alive and available for work;
* *processing* spans, while it handles one item or a batch, nested inside the
  executing span and repeated any number of times.

Trackers are usually created by whoever owns the thread (a pool manager)
before the thread runs. Every lifecycle method must then be called from the
tracked thread itself, otherwise the CPU timers measure the wrong thread.
Nothing is measured until collection is activated on the registry.
"""

from enum import Enum
from typing import Optional

from threadstats.core.config import settings
from threadstats.core.logging_config import get_logger
from threadstats.services.statistics import (
    CounterStorage,
    StatisticsLevel,
    ThreadCpuTimer,
    WallClockTimer,
)
from .instance import get_thread_tracking_registry
from .registry import StatisticKind, ThreadTrackingRegistry
from .stage_analysis import StageAnalysis

logger = get_logger(__name__)


class TrackerState(Enum):
    NOT_STARTED = "not_started"
    EXECUTING = "executing"
    EXECUTING_AND_PROCESSING = "executing_and_processing"


class ThreadTrackingStatistic:
    """Per-thread executing/processing timers and processed request counter."""

    def __init__(
        self,
        thread_name: str,
        registry: Optional[ThreadTrackingRegistry] = None,
        statistics_level: Optional[StatisticsLevel] = None,
        stage_analysis: Optional[StageAnalysis] = None,
    ):
        """Create the timers and publish this thread's statistics.

        May be called from a thread other than the one being tracked. No timer
        is started here.

        Args:
            thread_name: Name used to label this thread's statistics
            registry: Registry to publish to; defaults to the process-wide one
            statistics_level: Collection verbosity; defaults to settings
            stage_analysis: Optional consumer notified of this tracker
        """
        self.registry = registry if registry is not None else get_thread_tracking_registry()
        self.name = thread_name
        # Suffixed with #N by the registry when the name is already tracked
        self.statistics_label = thread_name

        self.executing_cpu_time = ThreadCpuTimer()
        self.executing_wall_clock_time = WallClockTimer()
        self.processing_cpu_time = ThreadCpuTimer()
        self.processing_wall_clock_time = WallClockTimer()

        self.num_requests = 0
        self.state = TrackerState.NOT_STARTED

        if statistics_level is None:
            statistics_level = StatisticsLevel.parse(settings.STATISTICS_COLLECTION_LEVEL)
        self.statistics_level = statistics_level

        if statistics_level.report_detailed_thread_time_tracking_stats:
            storage = CounterStorage.LOG_AND_TABLE
        else:
            storage = CounterStorage.LOG_ONLY
        self.registry.register(self, storage)

        if stage_analysis is not None and stage_analysis.perform_stage_analysis:
            stage_analysis.add_tracking(self)

    @property
    def collection_active(self) -> bool:
        return self.registry.collection_active

    def current_value(self, kind: StatisticKind) -> float:
        """Current value of one of this thread's statistics (milliseconds or count)."""
        if kind is StatisticKind.EXECUTING_CPU_TIME:
            return self.executing_cpu_time.elapsed_ms
        if kind is StatisticKind.EXECUTING_WALL_CLOCK_TIME:
            return self.executing_wall_clock_time.elapsed_ms
        if kind is StatisticKind.PROCESSING_CPU_TIME:
            return self.processing_cpu_time.elapsed_ms
        if kind is StatisticKind.PROCESSING_WALL_CLOCK_TIME:
            return self.processing_wall_clock_time.elapsed_ms
        return float(self.num_requests)

    def on_start_execution(self) -> None:
        """Call once when the thread starts running, from the tracked thread."""
        if not self.collection_active:
            return
        self.executing_cpu_time.start()
        self.executing_wall_clock_time.start()
        if self.state is TrackerState.NOT_STARTED:
            self.state = TrackerState.EXECUTING

    def on_stop_execution(self) -> None:
        """Call once when the thread is about to exit, from the tracked thread."""
        if not self.collection_active:
            return
        self.executing_cpu_time.stop()
        self.executing_wall_clock_time.stop()

    def on_start_processing(self) -> None:
        """Call before processing an item or batch, from the tracked thread.

        Must be paired with on_stop_processing(); overlapping calls are not
        detected.
        """
        if not self.collection_active:
            return

        if self.state is TrackerState.NOT_STARTED:
            # Constructed off-thread, so the thread start could not be observed:
            # the first processing span opens the executing span.
            self.on_start_execution()
        else:
            # The CPU clock can only be sampled here, on the tracked thread.
            self.executing_cpu_time.restart()

        self.processing_cpu_time.start()
        self.processing_wall_clock_time.start()
        self.state = TrackerState.EXECUTING_AND_PROCESSING

    def on_stop_processing(self) -> None:
        """Call after processing a single item or a batch, from the tracked thread."""
        if not self.collection_active:
            return
        self.processing_cpu_time.stop()
        self.processing_wall_clock_time.stop()
        if self.state is TrackerState.EXECUTING_AND_PROCESSING:
            self.state = TrackerState.EXECUTING

    def increment_number_of_processed(self, num: int = 1) -> None:
        """Add ``num`` processed requests. Non-positive values are ignored."""
        if not self.collection_active:
            return
        if num > 0:
            self.num_requests += num

    def __repr__(self) -> str:
        return f"ThreadTrackingStatistic(name={self.name!r}, state={self.state.value}, num_requests={self.num_requests})"
