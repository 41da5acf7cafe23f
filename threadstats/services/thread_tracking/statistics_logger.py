"""StatisticsLogger - Background task that periodically logs thread statistics.

Every tick reads all statistics whose storage mode allows logging, which is
also what refreshes the retained value of LOG_AND_TABLE statistics.
"""

import asyncio
from typing import Optional

from threadstats.core.config import settings
from threadstats.core.logging_config import get_logger
from .instance import get_thread_tracking_registry
from .registry import ThreadTrackingRegistry

logger = get_logger("thread_statistics")

# Module-level task and stop event
_logger_task: Optional[asyncio.Task] = None
_stop_event: Optional[asyncio.Event] = None


async def _statistics_log_loop(
    registry: ThreadTrackingRegistry,
    stop_event: asyncio.Event,
    interval: Optional[float] = None,
) -> None:
    """Background loop that logs statistics every ``interval`` seconds.

    Args:
        registry: Registry whose statistics are logged
        stop_event: Event to signal shutdown
        interval: Seconds between ticks; defaults to settings
    """
    if interval is None:
        interval = settings.STATISTICS_LOG_INTERVAL_SEC
    logger.info(f"Statistics logger started, interval {interval}s")

    while not stop_event.is_set():
        try:
            if not registry.collection_active:
                logger.debug("Collection not active, skipping statistics log")
            else:
                count = registry.statistics.log_statistics(logger)
                logger.debug(f"Logged {count} statistics")
        except Exception as e:
            logger.error(f"Error in statistics log loop: {e}")

        try:
            # Wait for interval or until stop event is set
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
            break  # Stop event was set
        except asyncio.TimeoutError:
            continue  # Timeout is normal, continue loop

    logger.info("Statistics logger stopped")


def start_statistics_logger(registry: Optional[ThreadTrackingRegistry] = None) -> None:
    """Start the background statistics logger task. Requires a running event loop."""
    global _logger_task, _stop_event

    if _logger_task is not None and not _logger_task.done():
        logger.warning("Statistics logger already running")
        return

    if registry is None:
        registry = get_thread_tracking_registry()

    _stop_event = asyncio.Event()
    _logger_task = asyncio.create_task(_statistics_log_loop(registry, _stop_event))
    logger.info("Statistics logger task created")


def stop_statistics_logger() -> None:
    """Stop the background statistics logger task.

    The stop event wakes the loop, which finishes its current tick and exits
    on its own; the task is not cancelled.
    """
    global _logger_task, _stop_event

    if _stop_event:
        _stop_event.set()

    _logger_task = None
    _stop_event = None
    logger.info("Statistics logger stop requested")


def is_statistics_logger_running() -> bool:
    return _logger_task is not None and not _logger_task.done()
