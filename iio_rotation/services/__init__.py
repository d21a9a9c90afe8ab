"""Service layer modules for iio-rotation."""

from .dispatcher import ActionDispatcher, dispatch  # noqa: F401
from .watcher import OrientationWatcher, WatcherState, watch  # noqa: F401

__all__ = ["ActionDispatcher", "OrientationWatcher", "WatcherState", "dispatch", "watch"]
