"""
Unit tests for StatisticsRegistry, FloatValueStatistic and statistic names.
"""

import logging

import pytest

from threadstats.services.statistics import (
    CounterStorage,
    StatisticName,
    StatisticsLevel,
    StatisticsRegistry,
)


def test_statistic_name_formats_with_suffix():
    assert str(StatisticName("Thread.NumProcessedRequests", "Worker-1")) == "Thread.NumProcessedRequests.Worker-1"
    assert str(StatisticName("Thread.NumProcessedRequests")) == "Thread.NumProcessedRequests"


def test_find_or_create_is_idempotent_by_name():
    """The first producer wins; later calls with the same name return the same handle."""
    registry = StatisticsRegistry()
    first = registry.find_or_create(StatisticName("a", "x"), lambda: 1.0, CounterStorage.LOG_ONLY)
    second = registry.find_or_create("a.x", lambda: 2.0, CounterStorage.LOG_AND_TABLE)

    assert first is second
    assert second.get_current_value() == 1.0
    assert second.storage is CounterStorage.LOG_ONLY
    assert registry.find("a.x") is first
    assert registry.find("missing") is None


def test_current_value_invokes_producer_each_read():
    values = iter([1, 2, 3])
    registry = StatisticsRegistry()
    statistic = registry.find_or_create("counter", lambda: next(values))

    assert statistic.get_current_value() == 1.0
    assert statistic.get_current_value() == 2.0
    assert isinstance(statistic.get_current_value(), float)


def test_only_log_and_table_retains_last_value():
    registry = StatisticsRegistry()
    kept = registry.find_or_create("kept", lambda: 4.0, CounterStorage.LOG_AND_TABLE)
    transient = registry.find_or_create("transient", lambda: 5.0, CounterStorage.LOG_ONLY)

    assert registry.table() == {}

    kept.get_current_value()
    transient.get_current_value()

    assert kept.last_value == 4.0
    assert transient.last_value is None
    assert registry.table() == {"kept": 4.0}


def test_log_statistics_skips_dont_store(caplog):
    registry = StatisticsRegistry()
    registry.find_or_create("logged.one", lambda: 1.5, CounterStorage.LOG_ONLY)
    registry.find_or_create("logged.two", lambda: 2.0, CounterStorage.LOG_AND_TABLE)
    registry.find_or_create("hidden", lambda: 3.0, CounterStorage.DONT_STORE)

    test_logger = logging.getLogger("test_statistics_registry")
    with caplog.at_level(logging.INFO, logger="test_statistics_registry"):
        count = registry.log_statistics(test_logger)

    assert count == 2
    assert "logged.one=1.500" in caplog.text
    assert "logged.two=2.000" in caplog.text
    assert "hidden" not in caplog.text


def test_reset_clears_statistics():
    registry = StatisticsRegistry()
    registry.find_or_create("a", lambda: 1.0)
    registry.reset()
    assert registry.statistics() == []


@pytest.mark.parametrize("raw, expected", [
    ("info", StatisticsLevel.INFO),
    ("Verbose2", StatisticsLevel.VERBOSE2),
    (" CRITICAL ", StatisticsLevel.CRITICAL),
])
def test_statistics_level_parse(raw, expected):
    assert StatisticsLevel.parse(raw) is expected


def test_statistics_level_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown statistics level"):
        StatisticsLevel.parse("chatty")


def test_detailed_thread_time_tracking_starts_at_verbose2():
    assert StatisticsLevel.VERBOSE.report_detailed_thread_time_tracking_stats is False
    assert StatisticsLevel.VERBOSE2.report_detailed_thread_time_tracking_stats is True
    assert StatisticsLevel.VERBOSE3.report_detailed_thread_time_tracking_stats is True
