"""Module-level default accessor for the thread tracking registry.

Trackers accept a registry explicitly; this default only serves callers that
do not wire one through, mirroring the collector accessor pattern.
"""

from .registry import ThreadTrackingRegistry

# Module-level default instance
_registry: ThreadTrackingRegistry = ThreadTrackingRegistry()


def get_thread_tracking_registry() -> ThreadTrackingRegistry:
    """Get the process-wide default thread tracking registry.

    Returns:
        The active ThreadTrackingRegistry instance
    """
    return _registry


def set_thread_tracking_registry(registry: ThreadTrackingRegistry) -> None:
    """Replace the process-wide default registry.

    Trackers already constructed stay bound to the registry they were
    created with.

    Args:
        registry: The registry new trackers should default to
    """
    global _registry
    _registry = registry


def first_client_connected_start_tracking() -> None:
    """Signal real usage: activate collection on the default registry."""
    _registry.activate_collection()
