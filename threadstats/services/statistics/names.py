"""Statistic names and collection levels shared by all statistics producers."""

from dataclasses import dataclass
from enum import IntEnum


class StatisticNames:
    THREADS_EXECUTION_TIME_TOTAL_CPU_CYCLES = "Thread.ExecutionTime.Total.CPUCycles.Milliseconds"
    THREADS_EXECUTION_TIME_TOTAL_WALL_CLOCK = "Thread.ExecutionTime.Total.WallClock.Milliseconds"
    THREADS_PROCESSING_TIME_TOTAL_CPU_CYCLES = "Thread.ProcessingTime.Total.CPUCycles.Milliseconds"
    THREADS_PROCESSING_TIME_TOTAL_WALL_CLOCK = "Thread.ProcessingTime.Total.WallClock.Milliseconds"

    THREADS_EXECUTION_TIME_AVERAGE_CPU_CYCLES = "Thread.ExecutionTime.Average.CPUCycles.Milliseconds"
    THREADS_EXECUTION_TIME_AVERAGE_WALL_CLOCK = "Thread.ExecutionTime.Average.WallClock.Milliseconds"
    THREADS_PROCESSING_TIME_AVERAGE_CPU_CYCLES = "Thread.ProcessingTime.Average.CPUCycles.Milliseconds"
    THREADS_PROCESSING_TIME_AVERAGE_WALL_CLOCK = "Thread.ProcessingTime.Average.WallClock.Milliseconds"

    THREADS_PROCESSED_REQUESTS_PER_THREAD = "Thread.NumProcessedRequests"

    ALL_THREADS = "AllThreads"


@dataclass(frozen=True)
class StatisticName:
    """Compound statistic name, e.g. ``Thread.NumProcessedRequests.Worker-1``."""
    name: str
    suffix: str = ""

    def __str__(self) -> str:
        if not self.suffix:
            return self.name
        return f"{self.name}.{self.suffix}"


class StatisticsLevel(IntEnum):
    """Ordered statistics collection verbosity."""
    CRITICAL = 0
    INFO = 1
    VERBOSE = 2
    VERBOSE2 = 3
    VERBOSE3 = 4

    @classmethod
    def parse(cls, value: str) -> "StatisticsLevel":
        """Parse a level name case-insensitively.

        Args:
            value: Level name such as 'info' or 'Verbose2'

        Returns:
            The matching StatisticsLevel

        Raises:
            ValueError: If the name is not a known level
        """
        key = (value or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(level.name.lower() for level in cls)
            raise ValueError(f"Unknown statistics level '{value}' (expected one of: {valid})") from None

    @property
    def report_detailed_thread_time_tracking_stats(self) -> bool:
        return self >= StatisticsLevel.VERBOSE2
