"""Side-effecting execution of sync actions."""

import os
from typing import Optional

from .location import Location, LocalLocation, RemoteLocation
from .models import Action, Entry, Operation, to_epoch_ns
from .statistics import SyncStatistics
from ..config.schema import SyncOptions
from ..storage.base import ObjectStoreClient
from ..utils.logging import LoggerMixin
from ..utils.mime import detect_content_type


class TransferExecutor(LoggerMixin):
    """Performs copies, uploads, downloads and deletions for the sync engine.

    Every method blocks and is meant to run on a worker thread. Each one
    logs the intended action first and returns right after when dry-run is
    enabled; successful work is counted in ``statistics``.
    """

    def __init__(
        self,
        client: Optional[ObjectStoreClient],
        statistics: SyncStatistics,
        options: SyncOptions
    ):
        self.client = client
        self.statistics = statistics
        self.options = options

    def execute(self, action: Action, source: Location, destination: Location):
        """Run ``action`` for the given pair of roots."""
        entry = action.entry
        if action.operation is Operation.UPDATE:
            if isinstance(source, RemoteLocation) and isinstance(destination, RemoteLocation):
                self.copy_object_to_object(entry, source, destination)
            elif isinstance(source, RemoteLocation):
                self.download(entry, source, destination)
            else:
                self.upload(entry, source, destination)
        elif action.operation is Operation.DELETE:
            if isinstance(destination, RemoteLocation):
                self.delete_remote(entry, destination)
            else:
                self.delete_local(entry, destination)
        else:
            raise ValueError(f"Unknown operation: {action.operation}")

    def copy_object_to_object(self, entry: Entry, source: RemoteLocation, destination: RemoteLocation):
        copy_source = {"Bucket": source.bucket, "Key": entry.path}
        key = destination.target_key(entry)

        self.logger.info(
            "Copying",
            source=f"{source.bucket}/{entry.path}",
            key=key,
            bucket=destination.bucket,
            dry_run=self.options.dry_run
        )
        if self.options.dry_run:
            return

        self.client.copy(destination.bucket, copy_source, key, acl=self.options.acl)
        self.statistics.record_transfer(entry.size)

    def download(self, entry: Entry, source: RemoteLocation, destination: LocalLocation):
        """Write an object to disk and give the file the object's modification time."""
        target = destination.target_path(entry)

        self.logger.info(
            "Downloading",
            name=entry.name,
            target=target,
            dry_run=self.options.dry_run
        )
        if self.options.dry_run:
            return

        os.makedirs(os.path.dirname(target), exist_ok=True)
        with open(target, "wb") as f:
            written = self.client.download(
                source.bucket, entry.path, f, options=self.options.download_options
            )
        self.statistics.record_transfer(written)

        mtime_ns = to_epoch_ns(entry.last_modified)
        os.utime(target, ns=(mtime_ns, mtime_ns))

    def upload(self, entry: Entry, source: LocalLocation, destination: RemoteLocation):
        key = destination.target_key(entry)

        self.logger.info(
            "Uploading",
            name=entry.name,
            destination=f"{destination.bucket}/{key}",
            dry_run=self.options.dry_run
        )
        if self.options.dry_run:
            return

        content_type = self.options.content_type
        if content_type is None and self.options.guess_mime:
            content_type = detect_content_type(entry.path)

        with open(entry.path, "rb") as f:
            self.client.upload(
                destination.bucket,
                key,
                f,
                content_type=content_type,
                acl=self.options.acl,
                options=self.options.upload_options
            )
        self.statistics.record_transfer(entry.size)

    def delete_local(self, entry: Entry, destination: LocalLocation):
        target = destination.target_path(entry)

        self.logger.info("Deleting", target=target, dry_run=self.options.dry_run)
        if self.options.dry_run:
            return

        os.remove(target)
        self.statistics.record_deletion()

    def delete_remote(self, entry: Entry, destination: RemoteLocation):
        key = destination.target_key(entry)

        self.logger.info(
            "Deleting",
            target=f"{destination.bucket}/{key}",
            dry_run=self.options.dry_run
        )
        if self.options.dry_run:
            return

        self.client.delete(destination.bucket, key)
        self.statistics.record_deletion()
