"""Core sync engine package."""

from .manager import Manager
from .models import Entry, EnumerationError, Action, Operation
from .statistics import SyncStatistics, StatisticsSnapshot
from .location import LocalLocation, RemoteLocation, parse_location
from .worker_pool import WorkerPool
from .diff import filter_for_sync
from .transfer import TransferExecutor

__all__ = [
    "Manager",
    "Entry",
    "EnumerationError",
    "Action",
    "Operation",
    "SyncStatistics",
    "StatisticsSnapshot",
    "LocalLocation",
    "RemoteLocation",
    "parse_location",
    "WorkerPool",
    "filter_for_sync",
    "TransferExecutor"
]
