"""Application configuration settings."""

from functools import lru_cache
from typing import Optional, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_PARALLEL = 16


class AWSSettings(BaseSettings):
    """Object store connection configuration."""

    model_config = SettingsConfigDict(env_prefix="AWS_", env_file=".env", extra="ignore")

    profile: Optional[str] = Field(default=None, description="Named credentials profile")
    region: Optional[str] = Field(default=None, description="Region of the buckets")
    endpoint_url: Optional[str] = Field(default=None, description="Custom S3-compatible endpoint")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO")
    format: str = Field(default="console")
    file_path: Optional[str] = Field(default=None)


class SyncDefaults(BaseSettings):
    """Defaults for sync options, overridable from the environment."""

    model_config = SettingsConfigDict(env_prefix="BUCKETSYNC_", env_file=".env", extra="ignore")

    parallel: int = Field(default=DEFAULT_PARALLEL)
    delete: bool = Field(default=False)
    dry_run: bool = Field(default=False)
    acl: Optional[str] = Field(default=None)
    content_type: Optional[str] = Field(default=None)
    guess_mime: bool = Field(default=True)
    patterns: List[str] = Field(default_factory=list)


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    name: str = Field(default="bucketsync")
    version: str = Field(default="1.0.0")

    # Sub-settings
    aws: AWSSettings = Field(default_factory=AWSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    sync: SyncDefaults = Field(default_factory=SyncDefaults)


@lru_cache()
def get_settings() -> AppSettings:
    """Get application settings."""
    return AppSettings()
