"""Per-thread CPU and wall-clock time tracking with cross-thread aggregation.

Each worker thread owns a ThreadTrackingStatistic that splits its lifetime into
executing and processing spans and counts processed requests. All trackers
publish into a ThreadTrackingRegistry, which derives AllThreads averages (time
per processed request) on every read. Nothing is measured until collection is
activated.
"""

from .registry import StatisticKind, ThreadTrackingRegistry
from .tracker import ThreadTrackingStatistic, TrackerState
from .stage_analysis import StageAnalysis, NullStageAnalysis, StageAnalysisStatisticsGroup
from .instance import (
    get_thread_tracking_registry,
    set_thread_tracking_registry,
    first_client_connected_start_tracking,
)
from .worker import TrackedWorkerThread

__all__ = [
    "StatisticKind",
    "ThreadTrackingRegistry",
    "ThreadTrackingStatistic",
    "TrackerState",
    "StageAnalysis",
    "NullStageAnalysis",
    "StageAnalysisStatisticsGroup",
    "get_thread_tracking_registry",
    "set_thread_tracking_registry",
    "first_client_connected_start_tracking",
    "TrackedWorkerThread",
]
