"""Command-line interface for iio-rotation."""

from .__main__ import cli

__all__ = ["cli"]
