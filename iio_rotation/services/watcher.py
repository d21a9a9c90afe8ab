"""Debounced orientation watcher.

The watcher waits for ``PropertiesChanged`` notifications from the sensor,
sleeps for the configured debounce window and then re-reads the orientation.
Only a value that is still current after the window, and differs from the
last dispatched one, triggers an action. The notification payload itself is
never trusted: a physical rotation produces bursts of transient values.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from iio_rotation.app.config import Configuration
from iio_rotation.domain.orientation import OrientationCategory, normalize
from iio_rotation.infrastructure.dbus import open_sensor
from iio_rotation.infrastructure.observability import get_logger, log_context
from iio_rotation.services.dispatcher import ActionDispatcher

ORIENTATION_PROPERTY = "AccelerometerOrientation"

WatcherStatus = Literal["idle", "debouncing", "checking"]
Sleep = Callable[[float], Awaitable[Any]]


class OrientationSource(Protocol):
    """What the watcher needs from a claimed accelerometer."""

    async def read_orientation(self) -> str: ...

    async def next_change(self) -> Mapping[str, Any]: ...


class Dispatcher(Protocol):
    def dispatch(self, category: str) -> None: ...


@dataclass
class WatcherState:
    """Current state snapshot for the orientation watcher."""

    status: WatcherStatus = "idle"
    last_orientation: OrientationCategory | None = None
    dispatch_count: int = 0


class OrientationWatcher:
    """Turns property-change notifications into at most one action per
    stable orientation."""

    def __init__(
        self,
        *,
        sensor: OrientationSource,
        dispatcher: Dispatcher,
        debounce_ms: int,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._sensor = sensor
        self._dispatcher = dispatcher
        self._debounce_ms = debounce_ms
        self._sleep = sleep
        self._logger = get_logger(__name__)
        self._state = WatcherState()

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_ms / 1000

    async def prime(self) -> OrientationCategory:
        """Record the startup orientation without dispatching for it."""

        raw = await self._sensor.read_orientation()
        self._state.last_orientation = OrientationCategory.from_string(raw)
        self._logger.info("Initial orientation: %s", raw)
        return self._state.last_orientation

    async def run(self) -> None:
        """Prime the state and process notifications until an error occurs."""

        await self.prime()
        while True:
            await self.step()

    async def step(self) -> bool:
        """Wait for one notification and handle it.

        Returns:
            True if an action was dispatched.
        """
        self._state.status = "idle"
        changed = await self._sensor.next_change()
        if ORIENTATION_PROPERTY not in changed:
            self._logger.debug(
                "Ignoring change of unrelated properties: %s", ", ".join(changed)
            )
            return False

        self._state.status = "debouncing"
        await self._sleep(self.debounce_seconds)

        self._state.status = "checking"
        try:
            raw = await self._sensor.read_orientation()
            current = OrientationCategory.from_string(raw)
            if current == self._state.last_orientation:
                self._logger.debug("Orientation settled back to %s", raw)
                return False

            with log_context(previous=self._last_label(), current=raw):
                self._logger.info("Orientation changed")
            self._dispatcher.dispatch(normalize(raw))
            self._state.last_orientation = current
            self._state.dispatch_count += 1
            return True
        finally:
            self._state.status = "idle"

    def _last_label(self) -> str:
        last = self._state.last_orientation
        return last.value if last is not None else "unknown"


SensorFactory = Callable[[], AbstractAsyncContextManager[OrientationSource]]


async def watch(
    config: Configuration,
    *,
    sensor_factory: SensorFactory = open_sensor,
    dispatcher: Dispatcher | None = None,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """Claim the accelerometer and run the watcher until an error occurs.

    Raises:
        SensorError: On bus connection, claim or read failures.
        DispatchError: If an action command cannot be spawned.
    """
    async with sensor_factory() as sensor:
        watcher = OrientationWatcher(
            sensor=sensor,
            dispatcher=dispatcher or ActionDispatcher(config),
            debounce_ms=config.debounce,
            sleep=sleep,
        )
        await watcher.run()


__all__ = [
    "ORIENTATION_PROPERTY",
    "OrientationSource",
    "OrientationWatcher",
    "SensorFactory",
    "WatcherState",
    "WatcherStatus",
    "watch",
]
