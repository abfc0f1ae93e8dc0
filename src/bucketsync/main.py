"""Command line entry point."""

import argparse
import asyncio
import json
import signal
import sys
from typing import List, Optional

from .config.loader import load_options
from .config.schema import CANNED_ACLS
from .core.manager import Manager
from .exceptions import ConfigurationError, LocationError, SyncErrors, UnsupportedDirectionError
from .utils.logging import setup_logging, get_logger


EXIT_OK = 0
EXIT_SYNC_FAILED = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bucketsync",
        description="Synchronize files between local directories and S3 buckets."
    )
    parser.add_argument("source", help="Local path or s3://bucket/prefix to read from")
    parser.add_argument("destination", help="Local path or s3://bucket/prefix to write to")
    parser.add_argument("--delete", action="store_true", default=None,
                        help="Delete destination files that do not exist in the source")
    parser.add_argument("--dry-run", action="store_true", default=None,
                        help="Only log the operations that would be performed")
    parser.add_argument("--parallel", type=int, help="Number of concurrent transfers")
    parser.add_argument("--acl", choices=CANNED_ACLS, help="Canned ACL for uploaded or copied objects")
    parser.add_argument("--content-type", help="Content-Type applied to every upload")
    parser.add_argument("--no-guess-mime", dest="guess_mime", action="store_false", default=None,
                        help="Do not detect the Content-Type of uploads")
    parser.add_argument("--pattern", dest="patterns", action="append",
                        help="Only sync files matching this regular expression (repeatable)")
    parser.add_argument("--config", help="YAML or JSON file with sync options")
    parser.add_argument("--log-level", help="Logging level")
    parser.add_argument("--log-format", choices=["json", "console"], help="Logging format")
    return parser


class SyncApp:
    """One command line invocation."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.cancel: Optional[asyncio.Event] = None
        self.logger = get_logger("bucketsync")

    def build_manager(self) -> Manager:
        options = load_options(self.args.config)
        overrides = {
            "delete": self.args.delete,
            "dry_run": self.args.dry_run,
            "parallel": self.args.parallel,
            "acl": self.args.acl,
            "content_type": self.args.content_type,
            "guess_mime": self.args.guess_mime,
            "patterns": self.args.patterns,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        try:
            return Manager(options=options, **overrides)
        except ValueError as e:
            raise ConfigurationError(str(e))

    async def run(self) -> int:
        self.cancel = asyncio.Event()
        self._install_signal_handlers()

        manager = self.build_manager()
        try:
            snapshot = await manager.synchronize(
                self.args.source, self.args.destination, cancel=self.cancel
            )
        except SyncErrors as e:
            for error in e.errors:
                self.logger.error("Sync error", error=str(error))
            self._print_statistics(manager)
            return EXIT_SYNC_FAILED

        print(json.dumps(snapshot.to_dict()))
        return EXIT_CANCELLED if self.cancel.is_set() else EXIT_OK

    def _print_statistics(self, manager: Manager):
        print(json.dumps(manager.get_statistics().to_dict()))

    def _install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._handle_signal, signum)
            except NotImplementedError:
                # Not available on Windows event loops
                pass

    def _handle_signal(self, signum):
        self.logger.warning("Received signal, cancelling sync", signal=signum)
        self.cancel.set()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        setup_logging(log_level=args.log_level, log_format=args.log_format)
    except ValueError as e:
        # Settings could not be read from the environment
        print(f"Invalid settings: {e}", file=sys.stderr)
        return EXIT_USAGE

    app = SyncApp(args)
    try:
        return asyncio.run(app.run())
    except (LocationError, UnsupportedDirectionError, ConfigurationError) as e:
        app.logger.error("Cannot start sync", error=str(e))
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
