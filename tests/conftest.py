"""Shared fixtures: an in-memory object store and local tree helpers."""

import os
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import pytest

from bucketsync.core.models import Entry
from bucketsync.exceptions import ObjectStoreError
from bucketsync.storage.base import ObjectStoreClient, ObjectInfo, ListPage


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class StoredObject:
    def __init__(self, data: bytes, last_modified: datetime, content_type=None, acl=None):
        self.data = data
        self.last_modified = last_modified
        self.content_type = content_type
        self.acl = acl


class InMemoryObjectStore(ObjectStoreClient):
    """Object store fake keeping buckets in dictionaries."""

    def __init__(self, page_size: int = 1000):
        super().__init__()
        self.page_size = page_size
        self.buckets: Dict[str, Dict[str, StoredObject]] = {}
        self.fail_list = set()
        self.fail_keys = set()
        self.calls = []
        self._lock = threading.Lock()

    def put_object(self, bucket, key, data=b"", last_modified: Optional[datetime] = None):
        self.buckets.setdefault(bucket, {})[key] = StoredObject(
            data, last_modified or datetime.now(timezone.utc)
        )

    def keys(self, bucket):
        return sorted(self.buckets.get(bucket, {}))

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def _check(self, operation, bucket, key):
        if key in self.fail_keys:
            raise ObjectStoreError(f"{operation} failed for {key}", operation=operation, bucket=bucket, key=key)

    def list_objects(self, bucket, prefix, continuation_token=None):
        self._record("list", bucket, prefix, continuation_token)
        if bucket in self.fail_list:
            raise ObjectStoreError(f"Access denied listing {bucket}", operation="list", bucket=bucket)
        keys = [k for k in sorted(self.buckets.get(bucket, {})) if k.startswith(prefix)]
        start = int(continuation_token or 0)
        chunk = keys[start:start + self.page_size]
        next_start = start + self.page_size
        objects = [
            ObjectInfo(key=k, size=len(self.buckets[bucket][k].data),
                       last_modified=self.buckets[bucket][k].last_modified)
            for k in chunk
        ]
        return ListPage(objects=objects, next_token=str(next_start) if next_start < len(keys) else None)

    def download(self, bucket, key, fileobj, options=None):
        self._record("download", bucket, key)
        self._check("download", bucket, key)
        data = self.buckets[bucket][key].data
        fileobj.write(data)
        return len(data)

    def upload(self, bucket, key, fileobj, content_type=None, acl=None, options=None):
        self._record("upload", bucket, key)
        self._check("upload", bucket, key)
        data = fileobj.read()
        with self._lock:
            self.buckets.setdefault(bucket, {})[key] = StoredObject(
                data, datetime.now(timezone.utc), content_type, acl
            )

    def copy(self, bucket, copy_source, key, acl=None):
        self._record("copy", bucket, copy_source["Bucket"], copy_source["Key"], key)
        self._check("copy", bucket, key)
        source = self.buckets[copy_source["Bucket"]][copy_source["Key"]]
        with self._lock:
            self.buckets.setdefault(bucket, {})[key] = StoredObject(
                source.data, datetime.now(timezone.utc), source.content_type, acl
            )

    def delete(self, bucket, key):
        self._record("delete", bucket, key)
        self._check("delete", bucket, key)
        with self._lock:
            del self.buckets[bucket][key]

    def mutating_calls(self):
        return [c for c in self.calls if c[0] != "list"]


def write_file(root, name: str, data: bytes = b"", mtime: Optional[datetime] = None) -> str:
    """Create ``root/name`` (with parents) and optionally set its mtime."""
    path = os.path.join(str(root), *name.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    if mtime is not None:
        ts = mtime.timestamp()
        os.utime(path, (ts, ts))
    return path


def make_entry(name, size=10, last_modified=BASE_TIME, path=None, single_entry=False) -> Entry:
    return Entry(
        name=name,
        path=path or name,
        size=size,
        last_modified=last_modified,
        single_entry=single_entry
    )


async def collect(iterable):
    return [item async for item in iterable]


async def iterate(items):
    for item in items:
        yield item


@pytest.fixture
def store():
    return InMemoryObjectStore()


@pytest.fixture
def later():
    return BASE_TIME + timedelta(seconds=1)
