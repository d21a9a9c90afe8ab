"""Access to the iio-sensor-proxy accelerometer over the system bus.

Bus address::

    service    net.hadess.SensorProxy
    path       /net/hadess/SensorProxy
    methods    ClaimAccelerometer(), ReleaseAccelerometer()
    property   AccelerometerOrientation
               (undefined | normal | bottom-up | left-up | right-up)

Property changes arrive as ``org.freedesktop.DBus.Properties.PropertiesChanged``
signals. They are queued by :class:`SensorProxy` and consumed one at a time
through :meth:`SensorProxy.next_change`.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Protocol

from dbus_fast import BusType, DBusError
from dbus_fast.aio import MessageBus
from dbus_fast.aio.proxy_object import ProxyInterface
from dbus_fast.errors import AuthError, InterfaceNotFoundError

from iio_rotation.domain.errors import SensorError
from iio_rotation.infrastructure.observability import get_logger

SENSOR_SERVICE = "net.hadess.SensorProxy"
SENSOR_PATH = "/net/hadess/SensorProxy"
SENSOR_INTERFACE = "net.hadess.SensorProxy"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

CLOSE_TIMEOUT_SECONDS = 1.0

_logger = get_logger(__name__)


class ClaimableSensor(Protocol):
    async def claim(self) -> None: ...

    async def release(self) -> None: ...


class SensorProxy:
    """Thin asyncio wrapper around the SensorProxy D-Bus object."""

    def __init__(
        self,
        bus: MessageBus,
        sensor_interface: ProxyInterface,
        properties_interface: ProxyInterface,
    ) -> None:
        self._bus = bus
        self._sensor = sensor_interface
        self._properties = properties_interface
        self._changes: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._disconnected = asyncio.ensure_future(bus.wait_for_disconnect())
        self._properties.on_properties_changed(self._on_properties_changed)

    @classmethod
    async def connect(cls, bus_type: BusType = BusType.SYSTEM) -> "SensorProxy":
        """Connect to the bus and bind to the sensor object.

        Raises:
            SensorError: If the bus or the sensor service is unavailable.
        """
        try:
            bus = await MessageBus(bus_type=bus_type).connect()
        except (AuthError, DBusError, OSError) as exc:
            raise SensorError(f"Unable to connect to the system bus: {exc}") from exc

        try:
            introspection = await bus.introspect(SENSOR_SERVICE, SENSOR_PATH)
            proxy_object = bus.get_proxy_object(
                SENSOR_SERVICE, SENSOR_PATH, introspection
            )
            sensor_interface = proxy_object.get_interface(SENSOR_INTERFACE)
            properties_interface = proxy_object.get_interface(PROPERTIES_INTERFACE)
        except (DBusError, InterfaceNotFoundError, OSError) as exc:
            bus.disconnect()
            raise SensorError(f"Unable to reach {SENSOR_SERVICE}: {exc}") from exc

        return cls(bus, sensor_interface, properties_interface)

    async def claim(self) -> None:
        try:
            await self._sensor.call_claim_accelerometer()
        except (DBusError, EOFError, OSError) as exc:
            raise SensorError(f"Unable to claim accelerometer: {exc}") from exc
        _logger.info("Accelerometer claimed")

    async def release(self) -> None:
        await self._sensor.call_release_accelerometer()
        _logger.info("Accelerometer released")

    async def read_orientation(self) -> str:
        try:
            return str(await self._sensor.get_accelerometer_orientation())
        except (DBusError, EOFError, OSError) as exc:
            raise SensorError(f"Unable to read orientation: {exc}") from exc

    async def next_change(self) -> dict[str, Any]:
        """Block until the next ``PropertiesChanged`` signal arrives.

        Returns:
            The changed-properties mapping of the signal.

        Raises:
            SensorError: If the bus connection is lost while waiting.
        """
        getter = asyncio.ensure_future(self._changes.get())
        done, _ = await asyncio.wait(
            {getter, self._disconnected}, return_when=asyncio.FIRST_COMPLETED
        )
        if getter in done:
            return getter.result()

        getter.cancel()
        reason = None if self._disconnected.cancelled() else self._disconnected.exception()
        raise SensorError(f"Lost connection to the system bus: {reason or 'closed'}")

    async def close(self) -> None:
        """Unsubscribe and disconnect from the bus."""
        self._properties.off_properties_changed(self._on_properties_changed)
        self._bus.disconnect()
        try:
            await asyncio.wait_for(
                asyncio.shield(self._disconnected), timeout=CLOSE_TIMEOUT_SECONDS
            )
        except Exception as exc:
            _logger.debug("Bus did not disconnect cleanly: %s", exc)

    def _on_properties_changed(
        self,
        interface_name: str,
        changed_properties: dict[str, Any],
        invalidated_properties: list[str],
    ) -> None:
        _logger.debug(
            "PropertiesChanged on %s: %s", interface_name, ", ".join(changed_properties)
        )
        self._changes.put_nowait(dict(changed_properties))


class SensorHandle:
    """Scoped accelerometer claim.

    Entering claims the accelerometer; if the claim fails the handle is never
    entered and nothing is released. Leaving always attempts the release,
    including when the body raised, and only logs a failed release.
    """

    def __init__(self, sensor: ClaimableSensor) -> None:
        self._sensor = sensor

    async def __aenter__(self) -> ClaimableSensor:
        await self._sensor.claim()
        return self._sensor

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self._sensor.release()
        except Exception as release_exc:
            _logger.warning("Unable to release accelerometer: %s", release_exc)


@asynccontextmanager
async def open_sensor(bus_type: BusType = BusType.SYSTEM) -> AsyncIterator[SensorProxy]:
    """Connect to the sensor service and hold an accelerometer claim."""

    proxy = await SensorProxy.connect(bus_type)
    try:
        async with SensorHandle(proxy):
            yield proxy
    finally:
        await proxy.close()


__all__ = [
    "ClaimableSensor",
    "PROPERTIES_INTERFACE",
    "SENSOR_INTERFACE",
    "SENSOR_PATH",
    "SENSOR_SERVICE",
    "SensorHandle",
    "SensorProxy",
    "open_sensor",
]
