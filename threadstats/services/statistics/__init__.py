"""Generic named statistics: timers, names, levels and the statistics registry."""

from .names import StatisticName, StatisticNames, StatisticsLevel
from .registry import CounterStorage, FloatValueStatistic, StatisticsRegistry
from .timers import IntervalTimer, ThreadCpuTimer, WallClockTimer

__all__ = [
    "StatisticName",
    "StatisticNames",
    "StatisticsLevel",
    "CounterStorage",
    "FloatValueStatistic",
    "StatisticsRegistry",
    "IntervalTimer",
    "ThreadCpuTimer",
    "WallClockTimer",
]
