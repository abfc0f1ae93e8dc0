"""Configuration package for bucketsync."""

from .settings import (
    AWSSettings,
    LoggingSettings,
    SyncDefaults,
    AppSettings,
    get_settings
)

from .schema import (
    SyncOptions,
    CANNED_ACLS,
    DEFAULT_PARALLEL
)

from .loader import (
    ConfigLoader,
    load_options
)

__all__ = [
    "AWSSettings",
    "LoggingSettings",
    "SyncDefaults",
    "AppSettings",
    "get_settings",

    "SyncOptions",
    "CANNED_ACLS",
    "DEFAULT_PARALLEL",

    "ConfigLoader",
    "load_options"
]
