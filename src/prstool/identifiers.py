'''
# Summary
Renumbers the records of one partition's catalog into an identifier range that cannot collide with the
partitions processed before it, and rewrites every playlist reference through the resulting mapping.

Partitions are processed in a fixed sequence. The first one reserves source identifier 1 and numbers its
items from 0; every later one reserves `previous + 1` as its source identifier and numbers its items from
`previous + 2`, where `previous` is the last identifier handed out for the partition before it.
'''

import logging
from dataclasses import dataclass, field

from . import constants
from .catalog import Catalog
from .errors import UnmappedReferenceError

# Data classes
@dataclass
class Allocation:
    '''Result of renumbering one catalog.

    `id_map` maps each record's previous identifier, as stored, to its new identifier.
    '''
    source_id: int
    base: int
    last_id: int
    id_map: dict[str, int] = field(default_factory=dict)

# Primary functions
def reserve(previous_last_id: int | None) -> tuple[int, int]:
    '''Returns the (source_id, base) pair for the next partition in sequence.

    Arguments:
        previous_last_id -- The last identifier of the previous partition, None for the first partition.
    '''
    if previous_last_id is None:
        return constants.FIRST_SOURCE_ID, constants.FIRST_BASE_ID
    return previous_last_id + 1, previous_last_id + 2

def reset_ids(catalog: Catalog, previous_last_id: int | None) -> Allocation:
    '''Assigns consecutive identifiers starting at the partition base.

    Items are numbered first, in their current catalog order, so they occupy `[base, base + len(items))`.
    User playlists and the other identified records follow. The returned `last_id` is the highest
    identifier assigned, and never lower than the reserved source identifier.
    '''
    source_id, base = reserve(previous_last_id)
    id_map: dict[str, int] = {}
    next_id = base

    def assign(old_id: str | None) -> int:
        nonlocal next_id
        new_id = next_id
        if old_id:
            if old_id in id_map:
                logging.warning(f"duplicate identifier '{old_id}' now maps to {new_id}")
            id_map[old_id] = new_id
        next_id += 1
        return new_id

    for item in catalog.items:
        item.id = str(assign(item.id))
    for playlist in catalog.playlists:
        playlist.id = str(assign(playlist.id))
    for record in catalog.records:
        old_id = record.get(constants.ATTR_ID)
        if old_id is not None:
            record.set(constants.ATTR_ID, str(assign(old_id)))

    last_id = max(next_id - 1, source_id)
    logging.info(f"sourceid = {source_id}, lastid = {last_id}")
    return Allocation(source_id=source_id, base=base, last_id=last_id, id_map=id_map)

def assign_missing_ids(catalog: Catalog, previous_last_id: int | None) -> int:
    '''Gives each item without an identifier the next one after the highest in use, keeping all others.
    Returns the highest identifier in use afterwards, never lower than the reserved source identifier.
    '''
    source_id, _ = reserve(previous_last_id)
    highest = catalog.max_identifier()
    last_id = source_id if highest is None else max(highest, source_id)

    assigned = 0
    for item in catalog.items:
        if not item.id:
            last_id += 1
            item.id = str(last_id)
            assigned += 1
    logging.info(f"assigned {assigned} new identifiers, lastid = {last_id}")
    return last_id

def remap_playlists(catalog: Catalog, id_map: dict[str, int]) -> None:
    '''Rewrites each playlist member through `id_map`.

    Raises:
        UnmappedReferenceError: a member identifier has no entry in `id_map`.
    '''
    for playlist in catalog.playlists:
        members: list[str] = []
        for old_id in playlist.members:
            if old_id not in id_map:
                message = f"Not found new ID: {old_id} (playlist '{playlist.title}')"
                logging.error(message)
                raise UnmappedReferenceError(message, details={'playlist': playlist.title, 'id': old_id})
            members.append(str(id_map[old_id]))
        playlist.members = members

def verify_references(catalog: Catalog) -> None:
    '''Raises UnmappedReferenceError if any playlist member is not a live item identifier.'''
    live = catalog.item_ids()
    for playlist in catalog.playlists:
        for member in playlist.members:
            if member not in live:
                message = f"playlist '{playlist.title}' refers to missing item {member}"
                logging.error(message)
                raise UnmappedReferenceError(message, details={'playlist': playlist.title, 'id': member})
