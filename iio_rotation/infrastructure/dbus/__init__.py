"""D-Bus access to the iio-sensor-proxy service."""

from .sensor import (
    SENSOR_INTERFACE,
    SENSOR_PATH,
    SENSOR_SERVICE,
    SensorHandle,
    SensorProxy,
    open_sensor,
)

__all__ = [
    "SENSOR_INTERFACE",
    "SENSOR_PATH",
    "SENSOR_SERVICE",
    "SensorHandle",
    "SensorProxy",
    "open_sensor",
]
