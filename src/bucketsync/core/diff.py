"""Comparison of source and destination entries into sync actions."""

from typing import AsyncIterable, AsyncIterator, Dict, Optional, Union

from .models import Action, Entry, EnumerationError, EntryResult, Operation, to_epoch_ns
from ..utils.logging import get_logger


logger = get_logger(__name__)


def needs_update(source: Entry, destination: Optional[Entry]) -> bool:
    """Whether the destination copy is missing, a different size, or older."""
    if destination is None:
        return True
    if source.size != destination.size:
        return True
    # Naive timestamps count as UTC
    return to_epoch_ns(source.last_modified) > to_epoch_ns(destination.last_modified)


async def build_index(destination: AsyncIterable[EntryResult]) -> Union[Dict[str, Entry], EnumerationError]:
    """Materialize the destination entries by name.

    Returns the first enumeration error instead if the listing failed. A
    later entry with the same name replaces an earlier one.
    """
    index: Dict[str, Entry] = {}
    async for item in destination:
        if isinstance(item, EnumerationError):
            return item
        index[item.name] = item
    return index


async def filter_for_sync(
    source: AsyncIterable[EntryResult],
    destination: AsyncIterable[EntryResult],
    delete: bool = False
) -> AsyncIterator[Union[Action, EnumerationError]]:
    """Yield the actions needed to bring the destination in line with the source.

    The destination is read completely before the first source entry is
    looked at. A destination listing error is yielded alone and ends the
    diff; source errors are yielded in place and the diff carries on.

    Args:
        source: Source entries, consumed as they arrive
        destination: Destination entries
        delete: Also yield deletions for destination entries absent from the source
    """
    index = await build_index(destination)
    if isinstance(index, EnumerationError):
        logger.error("Destination listing failed", error=str(index.error))
        yield index
        return

    # A lone destination file is the counterpart of a lone source file
    # whatever their names are.
    lone_destination = None
    if len(index) == 1:
        candidate = next(iter(index.values()))
        if candidate.single_entry:
            lone_destination = candidate

    async for item in source:
        if isinstance(item, EnumerationError):
            yield item
            continue

        counterpart = index.get(item.name)
        if counterpart is None and item.single_entry:
            counterpart = lone_destination

        if needs_update(item, counterpart):
            yield Action(entry=item, operation=Operation.UPDATE)
        if counterpart is not None:
            counterpart.exists_in_source = True

    if delete:
        for entry in index.values():
            if not entry.exists_in_source:
                yield Action(entry=entry, operation=Operation.DELETE)
