"""Lazy enumeration of the files under a local or remote root."""

import asyncio
import os
import posixpath
import stat
from typing import AsyncIterator, List, Optional, Pattern, Sequence, Tuple

from .location import LocalLocation, RemoteLocation
from .models import Entry, EnumerationError, EntryResult, from_epoch_ns
from ..storage.base import ObjectStoreClient
from ..utils.logging import get_logger


logger = get_logger(__name__)

# Remote listings are buffered generously so a slow consumer does not
# stall pagination; local walks hand over one entry at a time.
REMOTE_STREAM_BUFFER = 50000
LOCAL_STREAM_BUFFER = 1

_END = object()


def match_name(name: str, patterns: Optional[Sequence[Pattern[str]]]) -> bool:
    """True when no patterns are given or any pattern matches ``name``."""
    if not patterns:
        return True
    return any(pattern.search(name) for pattern in patterns)


def _is_cancelled(cancel: Optional[asyncio.Event]) -> bool:
    return cancel is not None and cancel.is_set()


def _scan_directory(directory: str) -> List[Tuple[str, bool, int, int]]:
    """Blocking scan of one directory, sorted by name.

    Symlinks to files are reported with their target's size and time.
    Broken symlinks and symlinks to directories are skipped.
    """
    children = []
    with os.scandir(directory) as it:
        for child in it:
            if child.is_dir(follow_symlinks=False):
                children.append((child.path, True, 0, 0))
                continue
            try:
                child_stat = child.stat()
            except OSError as e:
                if not child.is_symlink():
                    raise
                logger.warning("Skipping broken symlink", path=child.path, error=str(e))
                continue
            if stat.S_ISDIR(child_stat.st_mode):
                logger.debug("Skipping symlinked directory", path=child.path)
                continue
            children.append((child.path, False, child_stat.st_size, child_stat.st_mtime_ns))
    children.sort()
    return children


def _local_entry(root: str, path: str, size: int, mtime_ns: int, single_entry: bool = False) -> Entry:
    name = os.path.relpath(path, root).replace(os.sep, "/")
    return Entry(
        name=name,
        path=path,
        size=size,
        last_modified=from_epoch_ns(mtime_ns),
        single_entry=single_entry
    )


async def walk_local(
    location: LocalLocation,
    patterns: Optional[Sequence[Pattern[str]]] = None,
    cancel: Optional[asyncio.Event] = None
) -> AsyncIterator[EntryResult]:
    """Yield the files under a local root.

    A missing root yields nothing. A root that is a file yields one
    single-entry result named after the file. Patterns are matched against
    the absolute path of each file, not its relative name.
    """
    loop = asyncio.get_running_loop()
    root = location.path

    try:
        root_stat = await loop.run_in_executor(None, os.stat, root)
    except FileNotFoundError:
        return
    except OSError as e:
        yield EnumerationError(e)
        return

    if not stat.S_ISDIR(root_stat.st_mode):
        if match_name(root, patterns):
            yield _local_entry(
                os.path.dirname(root), root, root_stat.st_size, root_stat.st_mtime_ns, single_entry=True
            )
        return

    stack = [root]
    while stack:
        if _is_cancelled(cancel):
            return
        directory = stack.pop()
        try:
            children = await loop.run_in_executor(None, _scan_directory, directory)
        except OSError as e:
            yield EnumerationError(e)
            return

        subdirectories = []
        for path, is_dir, size, mtime_ns in children:
            if is_dir:
                subdirectories.append(path)
            elif match_name(path, patterns):
                yield _local_entry(root, path, size, mtime_ns)
        # Reversed so directories are visited in name order
        stack.extend(reversed(subdirectories))


def relative_key(prefix: str, key: str) -> str:
    """Name of ``key`` relative to ``prefix``; "." when they are the same object."""
    if not prefix:
        return posixpath.normpath(key)
    return posixpath.relpath(key, prefix)


async def list_remote(
    client: ObjectStoreClient,
    location: RemoteLocation,
    patterns: Optional[Sequence[Pattern[str]]] = None,
    cancel: Optional[asyncio.Event] = None
) -> AsyncIterator[EntryResult]:
    """Yield the objects under a bucket prefix, one listing page at a time.

    Directory markers are skipped. When the prefix names exactly one object
    it is yielded as a single entry named after the key's base name. A
    listing failure is yielded as an error and ends the listing.
    """
    loop = asyncio.get_running_loop()
    token = None

    while True:
        if _is_cancelled(cancel):
            return
        try:
            page = await loop.run_in_executor(
                None, client.list_objects, location.bucket, location.prefix, token
            )
        except Exception as e:
            yield EnumerationError(e)
            return

        for obj in page.objects:
            if obj.key.endswith("/"):
                continue
            name = relative_key(location.prefix, obj.key)
            single_entry = name == "."
            if single_entry:
                name = posixpath.basename(obj.key)
            elif name.startswith("../"):
                # Sibling keys sharing the prefix text but outside the prefix
                logger.debug("Skipping key outside prefix", key=obj.key, prefix=location.prefix)
                continue
            if not match_name(name, patterns):
                continue
            yield Entry(
                name=name,
                path=obj.key,
                size=obj.size,
                last_modified=obj.last_modified,
                single_entry=single_entry
            )

        token = page.next_token
        if not token:
            return


class EntryStream:
    """Runs an enumeration as a background task feeding a bounded queue.

    Iterating the stream yields the enumeration's results in order. The
    producer stops early when ``cancel`` is set or the stream is closed.
    """

    def __init__(
        self,
        source: AsyncIterator[EntryResult],
        maxsize: int = LOCAL_STREAM_BUFFER,
        cancel: Optional[asyncio.Event] = None,
        name: str = "entries"
    ):
        self._source = source
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._cancel = cancel
        self._task: Optional[asyncio.Task] = None
        self._finished = False
        self.name = name

    def start(self) -> "EntryStream":
        if self._task is None:
            self._task = asyncio.create_task(self._produce(), name=f"enumerate-{self.name}")
        return self

    async def _produce(self):
        try:
            async for item in self._source:
                if _is_cancelled(self._cancel):
                    logger.info("Enumeration cancelled", stream=self.name)
                    break
                await self._queue.put(item)
        except Exception as e:
            await self._queue.put(EnumerationError(e))
        finally:
            await self._source.aclose()
        await self._queue.put(_END)

    def __aiter__(self) -> "EntryStream":
        self.start()
        return self

    async def __anext__(self) -> EntryResult:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        return item

    async def aclose(self):
        """Stop the producer and release the underlying enumeration."""
        self._finished = True
        if self._task is None:
            await self._source.aclose()
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass


def open_stream(
    location,
    client: Optional[ObjectStoreClient],
    patterns: Optional[Sequence[Pattern[str]]] = None,
    cancel: Optional[asyncio.Event] = None
) -> EntryStream:
    """Start the enumeration matching the kind of ``location``."""
    if isinstance(location, RemoteLocation):
        source = list_remote(client, location, patterns, cancel)
        return EntryStream(source, REMOTE_STREAM_BUFFER, cancel, name=location.url).start()
    source = walk_local(location, patterns, cancel)
    return EntryStream(source, LOCAL_STREAM_BUFFER, cancel, name=location.path).start()
