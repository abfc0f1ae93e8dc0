"""Tests for the command line entry point."""

import json
from unittest.mock import patch

import pytest

from bucketsync.config import get_settings
from bucketsync.main import EXIT_OK, EXIT_SYNC_FAILED, EXIT_USAGE, build_parser, main

from conftest import InMemoryObjectStore, write_file


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("BUCKETSYNC_CONFIG_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    store = InMemoryObjectStore()
    with patch("bucketsync.core.manager.S3Client", return_value=store):
        yield store


class TestParser:

    def test_defaults_leave_options_unset(self):
        args = build_parser().parse_args(["src", "dst"])

        assert args.delete is None
        assert args.dry_run is None
        assert args.guess_mime is None
        assert args.parallel is None
        assert args.patterns is None

    def test_flags(self):
        args = build_parser().parse_args([
            "src", "dst", "--delete", "--dry-run", "--no-guess-mime",
            "--parallel", "4", "--acl", "private", "--pattern", "a", "--pattern", "b"
        ])

        assert args.delete is True
        assert args.dry_run is True
        assert args.guess_mime is False
        assert args.parallel == 4
        assert args.acl == "private"
        assert args.patterns == ["a", "b"]

    def test_unknown_acl_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["src", "dst", "--acl", "everyone"])


class TestMain:

    def test_upload_run(self, store, tmp_path, capsys):
        write_file(tmp_path, "a.txt", b"abc")

        code = main([str(tmp_path), "s3://bucket/site/", "--parallel", "2"])

        assert code == EXIT_OK
        assert store.keys("bucket") == ["site/a.txt"]
        assert json.loads(capsys.readouterr().out) == {"bytes": 3, "files": 1, "deleted_files": 0}

    def test_dry_run(self, store, tmp_path):
        write_file(tmp_path, "a.txt", b"abc")

        assert main([str(tmp_path), "s3://bucket/", "--dry-run"]) == EXIT_OK
        assert store.keys("bucket") == []

    def test_failed_transfers_exit_nonzero(self, store, tmp_path, capsys):
        write_file(tmp_path, "a.txt", b"abc")
        write_file(tmp_path, "b.txt", b"de")
        store.fail_keys.add("a.txt")

        code = main([str(tmp_path), "s3://bucket"])

        assert code == EXIT_SYNC_FAILED
        assert store.keys("bucket") == ["b.txt"]
        assert json.loads(capsys.readouterr().out)["files"] == 1

    def test_local_to_local_is_usage_error(self, store, tmp_path):
        assert main([str(tmp_path / "a"), str(tmp_path / "b")]) == EXIT_USAGE
        assert store.calls == []

    def test_bad_location_is_usage_error(self, store):
        assert main(["s3://", "/tmp/out"]) == EXIT_USAGE

    def test_invalid_option_is_usage_error(self, store, tmp_path):
        assert main([str(tmp_path), "s3://bucket", "--parallel", "0"]) == EXIT_USAGE

    def test_invalid_environment_default_is_usage_error(self, store, tmp_path, monkeypatch):
        monkeypatch.setenv("BUCKETSYNC_PARALLEL", "0")

        assert main([str(tmp_path), "s3://bucket/"]) == EXIT_USAGE
        assert store.calls == []

    def test_unparsable_environment_is_usage_error(self, store, tmp_path, monkeypatch):
        monkeypatch.setenv("BUCKETSYNC_PARALLEL", "many")

        assert main([str(tmp_path), "s3://bucket/"]) == EXIT_USAGE

    def test_config_file(self, store, tmp_path):
        source = tmp_path / "src"
        write_file(source, "keep.txt", b"1")
        write_file(source, "skip.bin", b"1")
        config = tmp_path / "sync.yaml"
        config.write_text("patterns:\n  - '\\.txt$'\n")

        assert main([str(source), "s3://bucket", "--config", str(config)]) == EXIT_OK
        assert store.keys("bucket") == ["keep.txt"]
