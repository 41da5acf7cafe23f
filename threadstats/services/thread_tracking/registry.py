"""ThreadTrackingRegistry - Per-thread statistic lists and AllThreads aggregates.

The registry holds, for each kind of thread statistic, the ordered list of
per-thread handles contributed by every tracker ever constructed against it,
plus one derived "AllThreads" handle per kind. Aggregates are pull-based:
each read walks a snapshot of the current list, so trackers created later are
picked up without any registration protocol. Lists only grow; a tracker whose
thread has exited keeps contributing its last values.
"""

import threading
import time
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from threadstats.core.logging_config import get_logger
from threadstats.services.statistics import (
    CounterStorage,
    FloatValueStatistic,
    StatisticName,
    StatisticNames,
    StatisticsRegistry,
)

if TYPE_CHECKING:
    from .models import ThreadTrackingSnapshotModel
    from .tracker import ThreadTrackingStatistic

logger = get_logger(__name__)


class StatisticKind(Enum):
    EXECUTING_CPU_TIME = "executing_cpu_time"
    EXECUTING_WALL_CLOCK_TIME = "executing_wall_clock_time"
    PROCESSING_CPU_TIME = "processing_cpu_time"
    PROCESSING_WALL_CLOCK_TIME = "processing_wall_clock_time"
    NUM_REQUESTS = "num_requests"


TIMER_KINDS = (
    StatisticKind.EXECUTING_CPU_TIME,
    StatisticKind.EXECUTING_WALL_CLOCK_TIME,
    StatisticKind.PROCESSING_CPU_TIME,
    StatisticKind.PROCESSING_WALL_CLOCK_TIME,
)

# kind -> (per-thread name, AllThreads name)
_STATISTIC_NAMES = {
    StatisticKind.EXECUTING_CPU_TIME: (
        StatisticNames.THREADS_EXECUTION_TIME_TOTAL_CPU_CYCLES,
        StatisticNames.THREADS_EXECUTION_TIME_AVERAGE_CPU_CYCLES,
    ),
    StatisticKind.EXECUTING_WALL_CLOCK_TIME: (
        StatisticNames.THREADS_EXECUTION_TIME_TOTAL_WALL_CLOCK,
        StatisticNames.THREADS_EXECUTION_TIME_AVERAGE_WALL_CLOCK,
    ),
    StatisticKind.PROCESSING_CPU_TIME: (
        StatisticNames.THREADS_PROCESSING_TIME_TOTAL_CPU_CYCLES,
        StatisticNames.THREADS_PROCESSING_TIME_AVERAGE_CPU_CYCLES,
    ),
    StatisticKind.PROCESSING_WALL_CLOCK_TIME: (
        StatisticNames.THREADS_PROCESSING_TIME_TOTAL_WALL_CLOCK,
        StatisticNames.THREADS_PROCESSING_TIME_AVERAGE_WALL_CLOCK,
    ),
    StatisticKind.NUM_REQUESTS: (
        StatisticNames.THREADS_PROCESSED_REQUESTS_PER_THREAD,
        StatisticNames.THREADS_PROCESSED_REQUESTS_PER_THREAD,
    ),
}

AGGREGATE_STORAGE = CounterStorage.LOG_AND_TABLE


def per_thread_statistic_name(kind: StatisticKind, thread_name: str) -> StatisticName:
    return StatisticName(_STATISTIC_NAMES[kind][0], thread_name)


def aggregate_statistic_name(kind: StatisticKind) -> StatisticName:
    return StatisticName(_STATISTIC_NAMES[kind][1], StatisticNames.ALL_THREADS)


class ThreadTrackingRegistry:
    """Shared state for all thread trackers of one process.

    Mutation (registering a tracker and creating the aggregates) happens under
    a single lock since it only occurs at thread construction. Reads iterate
    list copies and tolerate concurrent growth.
    """

    def __init__(self, statistics: Optional[StatisticsRegistry] = None):
        """Initialize with the statistics registry handles are published to.

        Args:
            statistics: Named statistics store; a private one is created if omitted
        """
        self.statistics = statistics if statistics is not None else StatisticsRegistry()
        self._lock = threading.Lock()
        self._collection_active = False
        self._trackers: List["ThreadTrackingStatistic"] = []
        self._per_thread: Dict[StatisticKind, List[FloatValueStatistic]] = {kind: [] for kind in StatisticKind}
        self._aggregates: Dict[StatisticKind, FloatValueStatistic] = {}

    # ------------------------------------------------------------------
    # Activation gate
    # ------------------------------------------------------------------

    @property
    def collection_active(self) -> bool:
        return self._collection_active

    def activate_collection(self) -> None:
        """Turn collection on for every tracker bound to this registry. One-way."""
        if self._collection_active:
            return
        with self._lock:
            if self._collection_active:
                return
            self._collection_active = True
        logger.info(f"Thread tracking collection activated ({len(self._trackers)} trackers registered)")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, tracker: "ThreadTrackingStatistic", storage: CounterStorage) -> None:
        """Publish a tracker's five per-thread statistics and ensure the aggregates exist.

        Args:
            tracker: Newly constructed tracker
            storage: Storage mode for the per-thread statistics

        Raises:
            ValueError: If the statistics store already holds AllThreads
                statistics created by another ThreadTrackingRegistry
        """
        with self._lock:
            self._ensure_aggregates()
            label = self._claim_label(tracker, storage)
            for kind in StatisticKind:
                self._per_thread[kind].append(
                    self.statistics.find_or_create(
                        per_thread_statistic_name(kind, label),
                        lambda kind=kind: tracker.current_value(kind),
                        storage,
                        owner=tracker,
                    )
                )
            tracker.statistics_label = label
            self._trackers.append(tracker)
        logger.debug(f"Registered thread tracking statistics for '{label}' (storage={storage.value})")

    def _claim_label(self, tracker: "ThreadTrackingStatistic", storage: CounterStorage) -> str:
        """Pick the first free label among ``name``, ``name#2``, ``name#3``...

        A label is claimed by creating its request-count statistic, so every
        tracker publishes under names nobody else holds.
        """
        # Caller holds self._lock
        label = tracker.name
        index = 1
        while True:
            claimed = self.statistics.find_or_create(
                per_thread_statistic_name(StatisticKind.NUM_REQUESTS, label),
                lambda: tracker.current_value(StatisticKind.NUM_REQUESTS),
                storage,
                owner=tracker,
            )
            if claimed.owner is tracker:
                if label != tracker.name:
                    logger.warning(f"Thread name '{tracker.name}' already tracked, publishing as '{label}'")
                return label
            index += 1
            label = f"{tracker.name}#{index}"

    def _ensure_aggregates(self) -> None:
        # Caller holds self._lock
        for kind in StatisticKind:
            if kind in self._aggregates:
                continue
            if kind is StatisticKind.NUM_REQUESTS:
                producer = self.total_requests
            else:
                producer = lambda kind=kind: self.average_of(kind)
            statistic = self.statistics.find_or_create(
                aggregate_statistic_name(kind), producer, AGGREGATE_STORAGE, owner=self
            )
            if statistic.owner is not self:
                raise ValueError(
                    f"Statistic '{statistic.name}' belongs to another thread tracking registry; "
                    f"use one ThreadTrackingRegistry per StatisticsRegistry"
                )
            self._aggregates[kind] = statistic

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def per_thread(self, kind: StatisticKind) -> List[FloatValueStatistic]:
        """Snapshot copy of the per-thread handles of one kind."""
        return list(self._per_thread[kind])

    def aggregate(self, kind: StatisticKind) -> Optional[FloatValueStatistic]:
        """The AllThreads handle of one kind, or None before any tracker exists."""
        return self._aggregates.get(kind)

    def trackers(self) -> List["ThreadTrackingStatistic"]:
        return list(self._trackers)

    def sum_of(self, kind: StatisticKind) -> float:
        return sum(statistic.get_current_value() for statistic in self.per_thread(kind))

    def total_requests(self) -> float:
        return self.sum_of(StatisticKind.NUM_REQUESTS)

    def average_of(self, kind: StatisticKind) -> float:
        """Summed per-thread time of ``kind`` divided by the total request count.

        Returns 0.0 when no request has been counted yet.
        """
        requests_statistic = self._aggregates.get(StatisticKind.NUM_REQUESTS)
        if requests_statistic is not None:
            num_requests = requests_statistic.get_current_value()
        else:
            num_requests = self.total_requests()
        if num_requests <= 0:
            return 0.0
        return self.sum_of(kind) / num_requests

    def snapshot(self) -> "ThreadTrackingSnapshotModel":
        """Serialize current state into a Pydantic ThreadTrackingSnapshotModel."""
        # Import here to avoid circular imports
        from .models import (
            AggregateStatisticsModel,
            ThreadStatisticsModel,
            ThreadTrackingSnapshotModel,
        )

        threads = [
            ThreadStatisticsModel(
                name=tracker.name,
                label=tracker.statistics_label,
                state=tracker.state.value,
                executing_cpu_ms=tracker.current_value(StatisticKind.EXECUTING_CPU_TIME),
                executing_wall_clock_ms=tracker.current_value(StatisticKind.EXECUTING_WALL_CLOCK_TIME),
                processing_cpu_ms=tracker.current_value(StatisticKind.PROCESSING_CPU_TIME),
                processing_wall_clock_ms=tracker.current_value(StatisticKind.PROCESSING_WALL_CLOCK_TIME),
                num_requests=tracker.num_requests,
            )
            for tracker in self.trackers()
        ]

        def read(kind: StatisticKind) -> float:
            statistic = self.aggregate(kind)
            return statistic.get_current_value() if statistic is not None else 0.0

        aggregate = AggregateStatisticsModel(
            average_executing_cpu_ms=read(StatisticKind.EXECUTING_CPU_TIME),
            average_executing_wall_clock_ms=read(StatisticKind.EXECUTING_WALL_CLOCK_TIME),
            average_processing_cpu_ms=read(StatisticKind.PROCESSING_CPU_TIME),
            average_processing_wall_clock_ms=read(StatisticKind.PROCESSING_WALL_CLOCK_TIME),
            total_num_requests=int(read(StatisticKind.NUM_REQUESTS)),
        )

        return ThreadTrackingSnapshotModel(
            timestamp=time.time(),
            collection_active=self.collection_active,
            threads=threads,
            aggregate=aggregate,
        )
