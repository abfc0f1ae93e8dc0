"""Exceptions raised by bucketsync."""

from typing import List, Optional


class SyncError(Exception):
    """Base exception for sync errors."""
    pass


class ConfigurationError(SyncError):
    """Raised when configuration loading fails."""
    pass


class LocationError(SyncError):
    """Raised when a source or destination location cannot be parsed."""
    pass


class UnsupportedDirectionError(SyncError):
    """Raised when neither location refers to the object store."""
    pass


class ObjectStoreError(SyncError):
    """Raised when an object store request fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        bucket: Optional[str] = None,
        key: Optional[str] = None
    ):
        super().__init__(message)
        self.operation = operation
        self.bucket = bucket
        self.key = key


class SyncErrors(SyncError):
    """Every independent failure collected during one synchronization run."""

    def __init__(self, errors: List[BaseException]):
        self.errors = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        lines = [f"{len(self.errors)} errors occurred during sync:"]
        lines.extend(f"  * {type(e).__name__}: {e}" for e in self.errors)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.errors)
