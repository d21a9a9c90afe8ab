"""User-facing interfaces for iio-rotation."""
