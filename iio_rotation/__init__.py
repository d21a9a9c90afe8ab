"""
iio-rotation package initializer.

This package watches the accelerometer orientation published by
iio-sensor-proxy on the system bus and runs a user-configured command
whenever the orientation settles on a new value.

The package exposes a ``__version__`` attribute indicating the installed
version of iio-rotation. The version is read from pyproject.toml via
importlib.metadata – this is the single source of truth.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("iio-rotation")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]
