"""Synchronization manager dispatching between local disks and buckets."""

import asyncio
import functools
import re
from typing import List, Optional, Pattern, Sequence, Union

from .diff import filter_for_sync
from .enumerator import open_stream
from .location import Location, is_remote, parse_location
from .models import EnumerationError
from .statistics import StatisticsSnapshot, SyncStatistics
from .transfer import TransferExecutor
from .worker_pool import WorkerPool
from ..config.schema import SyncOptions
from ..exceptions import SyncErrors, UnsupportedDirectionError
from ..storage.base import ObjectStoreClient
from ..storage.s3 import S3Client
from ..utils.logging import LoggerMixin, log_async_execution_time


PatternLike = Union[str, Pattern[str]]


class Manager(LoggerMixin):
    """Synchronizes files between local disks and object store buckets.

    Supported directions are local to bucket, bucket to local and bucket
    to bucket. Statistics accumulate over every run of one manager.
    """

    def __init__(
        self,
        client: Optional[ObjectStoreClient] = None,
        options: Optional[SyncOptions] = None,
        **overrides
    ):
        """Initialize the manager.

        Args:
            client: Object store client; an S3 client is built on first use when omitted
            options: Sync options; read from the environment when omitted
            **overrides: Individual SyncOptions fields replacing those in ``options``
        """
        options = options or SyncOptions.from_settings()
        if overrides:
            options = SyncOptions(**{**options.model_dump(), **overrides})
        self.options = options
        self._client = client
        self.statistics = SyncStatistics()

    @property
    def client(self) -> ObjectStoreClient:
        if self._client is None:
            self._client = S3Client()
        return self._client

    def get_statistics(self) -> StatisticsSnapshot:
        """Snapshot of the counters accumulated so far."""
        return self.statistics.snapshot()

    def sync(self, source: str, destination: str, patterns: Optional[Sequence[PatternLike]] = None) -> StatisticsSnapshot:
        """Blocking wrapper around :meth:`synchronize`."""
        return asyncio.run(self.synchronize(source, destination, patterns))

    @log_async_execution_time
    async def synchronize(
        self,
        source: str,
        destination: str,
        patterns: Optional[Sequence[PatternLike]] = None,
        cancel: Optional[asyncio.Event] = None
    ) -> StatisticsSnapshot:
        """Bring ``destination`` in line with ``source``.

        Args:
            source: Local path or ``s3://bucket/prefix`` URL to read from
            destination: Local path or ``s3://bucket/prefix`` URL to write to
            patterns: Regular expressions selecting the files to sync; the
                configured patterns are used when omitted
            cancel: Event that stops enumeration and submission once set

        Returns:
            Snapshot of the manager's statistics after the run

        Raises:
            LocationError: If either location cannot be parsed
            UnsupportedDirectionError: If both locations are local
            SyncErrors: If any listing or transfer failed; every other
                action still ran
        """
        source_location = parse_location(source)
        destination_location = parse_location(destination)
        if not is_remote(source_location) and not is_remote(destination_location):
            raise UnsupportedDirectionError("local to local sync is not supported")

        compiled = self._compile_patterns(patterns)
        cancel = cancel or asyncio.Event()

        self.logger.info(
            "Starting sync",
            source=str(source_location),
            destination=str(destination_location),
            delete=self.options.delete,
            dry_run=self.options.dry_run,
            parallel=self.options.parallel
        )

        errors = await self._run(source_location, destination_location, compiled, cancel)

        snapshot = self.get_statistics()
        if cancel.is_set():
            self.logger.warning("Sync cancelled", **snapshot.to_dict())
        if errors:
            self.logger.error("Sync finished with errors", errors=len(errors), **snapshot.to_dict())
            raise SyncErrors(errors)

        self.logger.info("Sync completed", **snapshot.to_dict())
        return snapshot

    async def _run(
        self,
        source: Location,
        destination: Location,
        patterns: List[Pattern[str]],
        cancel: asyncio.Event
    ) -> List[BaseException]:
        """Diff both roots and execute the resulting actions on the worker pool."""
        errors: List[BaseException] = []
        client = self.client
        executor = TransferExecutor(client, self.statistics, self.options)

        async with WorkerPool(self.options.parallel) as pool:
            source_stream = open_stream(source, client, patterns, cancel)
            destination_stream = open_stream(destination, client, patterns, cancel)
            actions = filter_for_sync(source_stream, destination_stream, self.options.delete)
            try:
                async for item in actions:
                    if isinstance(item, EnumerationError):
                        self.logger.error("Listing failed", error=str(item.error))
                        errors.append(item.error)
                        continue
                    if cancel.is_set():
                        break
                    await pool.submit(functools.partial(executor.execute, item, source, destination))
            finally:
                await actions.aclose()
                await source_stream.aclose()
                await destination_stream.aclose()

        errors.extend(pool.errors)
        return errors

    def _compile_patterns(self, patterns: Optional[Sequence[PatternLike]]) -> List[Pattern[str]]:
        if patterns is None:
            return self.options.compiled_patterns()
        return [p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns]
