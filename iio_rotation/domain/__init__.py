"""Domain types for iio-rotation."""

from .errors import ConfigError, DispatchError, IioRotationError, SensorError
from .orientation import OrientationCategory, normalize

__all__ = [
    "ConfigError",
    "DispatchError",
    "IioRotationError",
    "OrientationCategory",
    "SensorError",
    "normalize",
]
