"""Object store clients used by the sync engine."""

from .base import ObjectStoreClient, ObjectInfo, ListPage
from .s3 import S3Client

__all__ = [
    "ObjectStoreClient",
    "ObjectInfo",
    "ListPage",
    "S3Client"
]
