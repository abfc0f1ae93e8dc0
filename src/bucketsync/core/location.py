"""Parsing of source and destination locations."""

import os
import posixpath
from dataclasses import dataclass
from typing import Union
from urllib.parse import urlparse

from .models import Entry
from ..exceptions import LocationError


S3_SCHEME = "s3"


@dataclass(frozen=True)
class LocalLocation:
    """A filesystem root.

    ``explicit_dir`` is set when the location was written with a trailing
    separator, which forces joining entry names onto it.
    """

    path: str
    explicit_dir: bool = False

    def target_path(self, entry: Entry) -> str:
        """Filesystem path an entry is written to or removed from."""
        if entry.single_entry and not self.explicit_dir and not os.path.isdir(self.path):
            return self.path
        return os.path.join(self.path, *entry.name.split("/"))

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class RemoteLocation:
    """A bucket and key prefix in the object store."""

    bucket: str
    prefix: str = ""

    @property
    def denotes_directory(self) -> bool:
        return self.prefix == "" or self.prefix.endswith("/")

    def join(self, name: str) -> str:
        """Key of ``name`` relative to this prefix."""
        if not self.prefix:
            return posixpath.normpath(name)
        return posixpath.normpath(posixpath.join(self.prefix, name))

    def target_key(self, entry: Entry) -> str:
        """Key an entry is written to or removed from.

        A single-entry source sent to a prefix that names one key is written
        to that key verbatim.
        """
        if entry.single_entry and not self.denotes_directory:
            return self.prefix
        return self.join(entry.name)

    @property
    def url(self) -> str:
        return f"{S3_SCHEME}://{self.bucket}/{self.prefix}"

    def __str__(self) -> str:
        return self.url


Location = Union[LocalLocation, RemoteLocation]


def parse_location(text: str) -> Location:
    """Parse a location string into a local or remote location.

    Raises:
        LocationError: If the string is not a usable location
    """
    if not text:
        raise LocationError("Empty location")

    try:
        parsed = urlparse(text)
    except ValueError as e:
        raise LocationError(f"Malformed location {text!r}: {e}") from e

    if parsed.scheme == S3_SCHEME:
        if not parsed.netloc:
            raise LocationError(f"Missing bucket name in {text!r}")
        return RemoteLocation(bucket=parsed.netloc, prefix=parsed.path.lstrip("/"))

    if parsed.scheme == "file":
        text = parsed.path
    elif parsed.scheme and parsed.netloc:
        raise LocationError(f"Unsupported scheme {parsed.scheme!r} in {text!r}")

    explicit_dir = text.endswith("/") or text.endswith(os.sep)
    return LocalLocation(path=os.path.abspath(text), explicit_dir=explicit_dir)


def is_remote(location: Location) -> bool:
    return isinstance(location, RemoteLocation)
