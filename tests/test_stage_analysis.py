"""
Unit tests for the stage analysis consumer hook.
"""

import time

from threadstats.core.config import settings
from threadstats.services.thread_tracking import (
    NullStageAnalysis,
    StageAnalysisStatisticsGroup,
    ThreadTrackingStatistic,
)


def test_null_stage_analysis_is_disabled():
    assert NullStageAnalysis().perform_stage_analysis is False


def test_group_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(settings, "THREADSTATS_ENABLE_STAGE_ANALYSIS", True)
    assert StageAnalysisStatisticsGroup().perform_stage_analysis is True

    monkeypatch.setattr(settings, "THREADSTATS_ENABLE_STAGE_ANALYSIS", False)
    assert StageAnalysisStatisticsGroup().perform_stage_analysis is False


def test_utilization_of_idle_and_busy_threads(active_registry):
    group = StageAnalysisStatisticsGroup(perform_stage_analysis=True)
    busy = ThreadTrackingStatistic("Busy", registry=active_registry, stage_analysis=group)
    ThreadTrackingStatistic("Idle", registry=active_registry, stage_analysis=group)

    busy.on_start_processing()
    time.sleep(0.02)
    busy.on_stop_processing()
    busy.on_stop_execution()

    utilization = group.utilization()
    assert utilization["Idle"] == 0.0
    assert 0.0 < utilization["Busy"] <= 1.0
