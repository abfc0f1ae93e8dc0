"""Object store client interface and common structures."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, BinaryIO, Dict, List, Optional

from ..utils.logging import get_logger


@dataclass
class ObjectInfo:
    """One object returned by a listing call."""

    key: str
    size: int
    last_modified: datetime


@dataclass
class ListPage:
    """One page of a paginated listing."""

    objects: List[ObjectInfo] = field(default_factory=list)
    next_token: Optional[str] = None


class ObjectStoreClient(ABC):
    """Abstract base class for object store clients.

    Every method blocks; the sync engine calls them from worker threads.
    """

    def __init__(self, **kwargs):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def list_objects(
        self,
        bucket: str,
        prefix: str,
        continuation_token: Optional[str] = None
    ) -> ListPage:
        """List one page of objects under ``prefix``.

        Args:
            bucket: Bucket name
            prefix: Key prefix to list
            continuation_token: Cursor returned by the previous page

        Returns:
            ListPage whose ``next_token`` is None on the last page
        """
        pass

    @abstractmethod
    def download(
        self,
        bucket: str,
        key: str,
        fileobj: BinaryIO,
        options: Optional[Dict[str, Any]] = None
    ) -> int:
        """Stream an object into ``fileobj`` and return the bytes written."""
        pass

    @abstractmethod
    def upload(
        self,
        bucket: str,
        key: str,
        fileobj: BinaryIO,
        content_type: Optional[str] = None,
        acl: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> None:
        """Stream ``fileobj`` into an object."""
        pass

    @abstractmethod
    def copy(
        self,
        bucket: str,
        copy_source: Dict[str, str],
        key: str,
        acl: Optional[str] = None
    ) -> None:
        """Copy the object described by ``copy_source`` to ``bucket``/``key``.

        ``copy_source`` holds ``Bucket`` and ``Key`` of the source object.
        """
        pass

    @abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        """Delete one object."""
        pass
