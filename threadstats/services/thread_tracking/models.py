"""Pydantic V2 models for thread tracking snapshots.

These models give a serialisable view of every tracker bound to a registry
and of the AllThreads aggregates, e.g. for the periodic statistics log or a
debugging dump.
"""

from typing import List
from pydantic import BaseModel, ConfigDict


class ThreadStatisticsModel(BaseModel):
    """Timers and request count of a single tracked thread, times in milliseconds"""
    model_config = ConfigDict(from_attributes=True)

    name: str
    label: str
    state: str
    executing_cpu_ms: float
    executing_wall_clock_ms: float
    processing_cpu_ms: float
    processing_wall_clock_ms: float
    num_requests: int


class AggregateStatisticsModel(BaseModel):
    """AllThreads values - average cost per processed request plus total requests"""
    model_config = ConfigDict(from_attributes=True)

    average_executing_cpu_ms: float
    average_executing_wall_clock_ms: float
    average_processing_cpu_ms: float
    average_processing_wall_clock_ms: float
    total_num_requests: int


class ThreadTrackingSnapshotModel(BaseModel):
    """Root envelope for all thread tracking data"""
    model_config = ConfigDict(from_attributes=True)

    timestamp: float
    collection_active: bool
    threads: List[ThreadStatisticsModel]
    aggregate: AggregateStatisticsModel
