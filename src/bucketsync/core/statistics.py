"""Transfer statistics shared by the execution units of one manager."""

import threading
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class StatisticsSnapshot:
    """Point-in-time copy of the sync counters."""

    bytes: int = 0
    files: int = 0
    deleted_files: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "bytes": self.bytes,
            "files": self.files,
            "deleted_files": self.deleted_files
        }


class SyncStatistics:
    """Lock-guarded counters for bytes and files transferred and files deleted."""

    def __init__(self):
        self._lock = threading.Lock()
        self._bytes = 0
        self._files = 0
        self._deleted_files = 0

    def record_transfer(self, size: int):
        """Count one transferred file of ``size`` bytes."""
        with self._lock:
            self._files += 1
            self._bytes += size

    def record_deletion(self):
        """Count one deleted file."""
        with self._lock:
            self._deleted_files += 1

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            return StatisticsSnapshot(
                bytes=self._bytes,
                files=self._files,
                deleted_files=self._deleted_files
            )
