"""StatisticsRegistry - Named, pull-based float statistics.

Every statistic is a named handle around a value producer. Reading a handle
invokes its producer; the storage mode decides whether the value is logged
and whether the last read value is retained for later querying.
"""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .names import StatisticName


class CounterStorage(Enum):
    """How a statistic's values are kept."""
    DONT_STORE = "dont_store"        # Never logged, never retained
    LOG_ONLY = "log_only"            # Computed only when logged
    LOG_AND_TABLE = "log_and_table"  # Logged and last value retained

    @property
    def is_logged(self) -> bool:
        return self is not CounterStorage.DONT_STORE


class FloatValueStatistic:
    """Handle to a single named float statistic."""

    def __init__(
        self,
        name: str,
        value_producer: Callable[[], float],
        storage: CounterStorage,
        owner: Any = None,
    ):
        self.name = name
        self.storage = storage
        # Object that created the statistic, None when anonymous
        self.owner = owner
        self._value_producer = value_producer
        self.last_value: Optional[float] = None

    def get_current_value(self) -> float:
        """Invoke the producer, retaining the value in LOG_AND_TABLE mode."""
        value = float(self._value_producer())
        if self.storage is CounterStorage.LOG_AND_TABLE:
            self.last_value = value
        return value

    def __repr__(self) -> str:
        return f"FloatValueStatistic(name={self.name!r}, storage={self.storage.value})"


class StatisticsRegistry:
    """Thread-safe name -> FloatValueStatistic store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._statistics: Dict[str, FloatValueStatistic] = {}

    def find_or_create(
        self,
        name: Union[StatisticName, str],
        value_producer: Callable[[], float],
        storage: CounterStorage = CounterStorage.LOG_ONLY,
        owner: Any = None,
    ) -> FloatValueStatistic:
        """Return the statistic registered under ``name``, creating it if absent.

        Idempotent by name: when the statistic already exists the given
        producer, storage and owner are ignored and the existing handle is
        returned. Callers that must not share a name compare ``owner`` on the
        returned handle.

        Args:
            name: Statistic name
            value_producer: Zero-argument callable returning the current value
            storage: Storage mode used if the statistic is created
            owner: Recorded on the statistic if it is created

        Returns:
            The registered FloatValueStatistic
        """
        key = str(name)
        with self._lock:
            statistic = self._statistics.get(key)
            if statistic is None:
                statistic = FloatValueStatistic(key, value_producer, storage, owner)
                self._statistics[key] = statistic
            return statistic

    def find(self, name: Union[StatisticName, str]) -> Optional[FloatValueStatistic]:
        with self._lock:
            return self._statistics.get(str(name))

    def statistics(self) -> List[FloatValueStatistic]:
        """Snapshot of all registered statistics in registration order."""
        with self._lock:
            return list(self._statistics.values())

    def table(self) -> Dict[str, float]:
        """Last retained value of every LOG_AND_TABLE statistic that has been read."""
        return {
            statistic.name: statistic.last_value
            for statistic in self.statistics()
            if statistic.storage is CounterStorage.LOG_AND_TABLE and statistic.last_value is not None
        }

    def log_statistics(self, logger: logging.Logger) -> int:
        """Read and log every statistic whose storage mode allows logging.

        Args:
            logger: Destination logger

        Returns:
            Number of statistics logged
        """
        count = 0
        for statistic in self.statistics():
            if not statistic.storage.is_logged:
                continue
            logger.info(f"{statistic.name}={statistic.get_current_value():.3f}")
            count += 1
        return count

    def reset(self) -> None:
        """Drop all registered statistics. Used for testing."""
        with self._lock:
            self._statistics.clear()
