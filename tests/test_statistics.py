"""Tests for the statistics aggregator."""

import threading

from bucketsync.core.statistics import SyncStatistics, StatisticsSnapshot


class TestSyncStatistics:

    def test_starts_empty(self):
        assert SyncStatistics().snapshot() == StatisticsSnapshot(0, 0, 0)

    def test_records_transfers_and_deletions(self):
        stats = SyncStatistics()
        stats.record_transfer(100)
        stats.record_transfer(23)
        stats.record_deletion()

        snapshot = stats.snapshot()
        assert snapshot.bytes == 123
        assert snapshot.files == 2
        assert snapshot.deleted_files == 1
        assert snapshot.to_dict() == {"bytes": 123, "files": 2, "deleted_files": 1}

    def test_snapshot_is_a_copy(self):
        stats = SyncStatistics()
        before = stats.snapshot()
        stats.record_transfer(5)

        assert before.files == 0
        assert stats.snapshot().files == 1

    def test_concurrent_increments(self):
        stats = SyncStatistics()

        def work():
            for _ in range(1000):
                stats.record_transfer(2)
                stats.record_deletion()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = stats.snapshot()
        assert snapshot.files == 8000
        assert snapshot.bytes == 16000
        assert snapshot.deleted_files == 8000
