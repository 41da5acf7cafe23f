"""Stage analysis consumer hook.

An optional subscriber told about every newly constructed tracker, used for
separate stage-level analysis. Notifying it has no effect on the tracker.
"""

import threading
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol

from threadstats.core.config import settings
from threadstats.core.logging_config import get_logger

if TYPE_CHECKING:
    from .tracker import ThreadTrackingStatistic

logger = get_logger(__name__)


class StageAnalysis(Protocol):
    """Interface for consumers of newly created thread trackers."""

    @property
    def perform_stage_analysis(self) -> bool:
        """Whether trackers should be handed to add_tracking()."""
        ...

    def add_tracking(self, tracker: "ThreadTrackingStatistic") -> None:
        """Receive a newly constructed tracker."""
        ...


class NullStageAnalysis:
    """No-op consumer; trackers are never handed over."""

    @property
    def perform_stage_analysis(self) -> bool:
        return False

    def add_tracking(self, tracker: "ThreadTrackingStatistic") -> None:
        pass


class StageAnalysisStatisticsGroup:
    """Collects trackers and reports how busy each thread has been."""

    def __init__(self, perform_stage_analysis: Optional[bool] = None):
        if perform_stage_analysis is None:
            perform_stage_analysis = settings.THREADSTATS_ENABLE_STAGE_ANALYSIS
        self._perform_stage_analysis = perform_stage_analysis
        self._lock = threading.Lock()
        self._trackers: List["ThreadTrackingStatistic"] = []

    @property
    def perform_stage_analysis(self) -> bool:
        return self._perform_stage_analysis

    def add_tracking(self, tracker: "ThreadTrackingStatistic") -> None:
        with self._lock:
            self._trackers.append(tracker)
        logger.debug(f"Stage analysis tracking thread '{tracker.name}'")

    @property
    def trackers(self) -> List["ThreadTrackingStatistic"]:
        with self._lock:
            return list(self._trackers)

    def utilization(self) -> Dict[str, float]:
        """Fraction of each thread's executing wall-clock time spent processing.

        Returns:
            Mapping of thread name to a ratio in [0, 1]; 0.0 for threads that
            have not executed yet
        """
        result: Dict[str, float] = {}
        for tracker in self.trackers:
            executing_ms = tracker.executing_wall_clock_time.elapsed_ms
            processing_ms = tracker.processing_wall_clock_time.elapsed_ms
            if executing_ms <= 0:
                result[tracker.name] = 0.0
            else:
                result[tracker.name] = min(processing_ms / executing_ms, 1.0)
        return result
