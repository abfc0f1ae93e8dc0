"""Validated sync option schema."""

import re
from typing import Dict, Any, List, Optional, Pattern

from pydantic import BaseModel, Field, field_validator

from .settings import DEFAULT_PARALLEL, get_settings


# Canned ACLs accepted by S3 for put and copy requests
CANNED_ACLS = (
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "aws-exec-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
)


class SyncOptions(BaseModel):
    """Options controlling one synchronization manager."""

    parallel: int = Field(default=DEFAULT_PARALLEL, description="Number of concurrent transfers")
    delete: bool = Field(default=False, description="Delete destination files missing from the source")
    dry_run: bool = Field(default=False, description="Log actions without performing them")
    acl: Optional[str] = Field(None, description="Canned ACL applied to uploaded and copied objects")
    content_type: Optional[str] = Field(None, description="Content-Type forced on every upload")
    guess_mime: bool = Field(default=True, description="Detect Content-Type of uploads from the file")
    upload_options: Dict[str, Any] = Field(
        default_factory=dict, description="TransferConfig arguments used for uploads"
    )
    download_options: Dict[str, Any] = Field(
        default_factory=dict, description="TransferConfig arguments used for downloads"
    )
    patterns: List[str] = Field(default_factory=list, description="Regular expressions selecting file names")

    @field_validator("parallel")
    @classmethod
    def validate_parallel(cls, v):
        if v < 1:
            raise ValueError("Must allow at least 1 parallel transfer")
        return v

    @field_validator("acl")
    @classmethod
    def validate_acl(cls, v):
        if v is not None and v not in CANNED_ACLS:
            raise ValueError(f"ACL must be one of: {list(CANNED_ACLS)}")
        return v

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v):
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {pattern!r}: {e}")
        return v

    def compiled_patterns(self) -> List[Pattern[str]]:
        """Compile the configured name patterns."""
        return [re.compile(pattern) for pattern in self.patterns]

    @classmethod
    def from_settings(cls, **overrides) -> "SyncOptions":
        """Build options from environment defaults, then apply overrides."""
        data = get_settings().sync.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
