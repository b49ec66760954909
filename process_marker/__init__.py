"""Checkpoint markers logging run time and memory usage of a process."""

from .config import MarkerConfig
from .interface import MarkerInterface, SupportsLogging
from .marker import Marker, format_memory, format_seconds
from .version import __version__

__all__ = [
    "Marker",
    "MarkerConfig",
    "MarkerInterface",
    "SupportsLogging",
    "__version__",
    "format_memory",
    "format_seconds",
]
