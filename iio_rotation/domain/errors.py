"""Exception hierarchy shared by the configuration, sensor and dispatch layers."""

from __future__ import annotations


class IioRotationError(Exception):
    """Base class for errors that should terminate the current invocation."""


class ConfigError(IioRotationError):
    """Raised when the merged configuration cannot be converted to its typed form."""


class DispatchError(IioRotationError):
    """Raised when an orientation action command cannot be spawned."""


class SensorError(IioRotationError):
    """Raised on bus connection, claim or property read failures."""


__all__ = ["ConfigError", "DispatchError", "IioRotationError", "SensorError"]
