"""Application configuration for iio-rotation."""

from .config import Configuration, OrientationCommands, load_config
from .merge import MergeDiagnostic, merge_with_fallback

__all__ = [
    "Configuration",
    "MergeDiagnostic",
    "OrientationCommands",
    "load_config",
    "merge_with_fallback",
]
