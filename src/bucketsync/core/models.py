"""Entries and actions exchanged between the sync stages."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Union


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_ns(moment: datetime) -> int:
    """Nanoseconds since the epoch, exact to the microsecond. Naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - EPOCH
    return (delta.days * 86400 + delta.seconds) * 10**9 + delta.microseconds * 1000


def from_epoch_ns(ns: int) -> datetime:
    return EPOCH + timedelta(microseconds=ns // 1000)


@dataclass
class Entry:
    """One file under a synchronized root, local or remote."""

    name: str
    path: str
    size: int
    last_modified: datetime
    single_entry: bool = False
    exists_in_source: bool = False


@dataclass
class EnumerationError:
    """Listing or walk failure carried inside an entry stream."""

    error: BaseException


EntryResult = Union[Entry, EnumerationError]


class Operation(str, Enum):
    """Kinds of work the diff can request."""
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class Action:
    """A decided unit of work for one entry."""

    entry: Entry
    operation: Operation = Operation.UPDATE
