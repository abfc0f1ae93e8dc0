"""bucketsync - mirror directory trees between local disks and object store buckets."""

from .core import Manager, StatisticsSnapshot
from .config import SyncOptions, DEFAULT_PARALLEL
from .exceptions import (
    SyncError,
    SyncErrors,
    LocationError,
    UnsupportedDirectionError,
    ObjectStoreError,
    ConfigurationError
)

__version__ = "1.0.0"

__all__ = [
    "Manager",
    "StatisticsSnapshot",
    "SyncOptions",
    "DEFAULT_PARALLEL",
    "SyncError",
    "SyncErrors",
    "LocationError",
    "UnsupportedDirectionError",
    "ObjectStoreError",
    "ConfigurationError"
]
