'''
# Summary
Detects which media files were added to or removed from a partition since its catalog was last written,
and keeps the item metadata derived from file names in order.

    - scan_item_changes:  Compares catalogued paths with the scanned paths below the media destination.
    - apply_item_changes: Adds an item per new file and drops the items of missing files.
    - fix_titles:         Sets author and title from '[Author] Title.ext' file names.
    - sort_items:         Orders items by 'author/title', keeping the prior order for ties.
'''

import os
import re
import time
import logging
import posixpath
from dataclasses import dataclass, field

from . import constants
from .catalog import Catalog, Item, Partition
from .errors import UnknownFileTypeError
from .scanner import clean_path, is_child

# Data classes
@dataclass
class ItemChanges:
    '''Paths, relative to the partition root, that differ between catalog and filesystem.'''
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

# Helper functions
def author_and_title(name: str) -> tuple[str, str] | None:
    '''Returns the (author, title) pair of a '[Author] Title' name, or None if it does not match.'''
    match = re.match(constants.PATTERN_AUTHOR_TITLE, name)
    if not match:
        return None
    return match.group(1), match.group(2)

def split_author_title(filename: str) -> tuple[str, str]:
    '''Returns the author and the extension-free title of a file name.
    Names not following the '[Author] Title.ext' convention yield empty strings.

    Example:
        '[Jane Doe] My Book.pdf' -> ('Jane Doe', 'My Book')
    '''
    pair = author_and_title(posixpath.basename(filename))
    if not pair:
        return '', ''
    author, title = pair
    return author, re.sub(constants.PATTERN_TITLE_EXTENSION, '', title)

def mime_type(path: str) -> str:
    '''Returns the MIME type for the file extension of `path`.

    Raises:
        UnknownFileTypeError: the extension is not one the reader catalogs.
    '''
    name = posixpath.basename(path)
    extension = name.rsplit('.', 1)[-1].lower() if '.' in name else ''
    if extension not in constants.MIME_TYPES:
        raise UnknownFileTypeError(f"Unknown file type: '{path}'", details={'path': path, 'extension': extension})
    return constants.MIME_TYPES[extension]

def format_date(epoch: float) -> str:
    '''Formats a timestamp as an RFC-1123 style UTC string, e.g. 'Mon, 02 Jan 2023 10:04:05 UTC'.'''
    t = time.gmtime(epoch)
    return (f"{constants.DAY_NAMES[t.tm_wday]}, {t.tm_mday:02d} {constants.MONTH_NAMES[t.tm_mon - 1]} "
            f"{t.tm_year} {t.tm_hour:02d}:{t.tm_min:02d}:{t.tm_sec:02d} UTC")

def create_item(relative_path: str, real_path: str) -> Item:
    '''Builds a catalog item for a file on the partition. The identifier is assigned later.

    Arguments:
        relative_path -- The path as recorded in the catalog, relative to the partition root.
        real_path     -- The path of the file on the local filesystem.
    '''
    mime = mime_type(relative_path)
    author, title = split_author_title(relative_path)
    stat = os.stat(real_path)
    return Item(id='',
                path=clean_path(relative_path),
                author=author,
                title=title,
                date=format_date(stat.st_mtime),
                mime=mime,
                size=stat.st_size)

# Primary functions
def scan_item_changes(catalog: Catalog, observed: list[str], dest: str) -> ItemChanges:
    '''Compares the catalog's item paths with `observed` paths, both restricted to `dest`.
    Only the cleaned relative path takes part in the comparison.
    '''
    catalogued: list[str] = []
    for item in catalog.items:
        path = clean_path(item.path)
        if is_child(path, dest):
            catalogued.append(path)
    logging.info(f"catalogued items under '{dest}': {len(catalogued)}")

    found = {clean_path(path) for path in observed if is_child(path, dest)}
    known = set(catalogued)

    changes = ItemChanges()
    seen: set[str] = set()
    for path in observed:
        path = clean_path(path)
        if path in found and path not in known and path not in seen:
            changes.added.append(path)
            seen.add(path)
    seen.clear()
    for path in catalogued:
        if path not in found and path not in seen:
            changes.removed.append(path)
            seen.add(path)

    logging.info(f"new files: {len(changes.added)}")
    logging.info(f"removed files: {len(changes.removed)}")
    return changes

def apply_item_changes(catalog: Catalog, changes: ItemChanges, partition: Partition) -> ItemChanges:
    '''Appends an item for each added path and removes every item whose path was removed.'''
    for path in changes.added:
        item = create_item(path, os.path.join(partition.root, path))
        catalog.items.append(item)
        logging.debug(f"add item: '{path}'")

    removed = set(changes.removed)
    kept: list[Item] = []
    for item in catalog.items:
        if clean_path(item.path) in removed:
            logging.debug(f"remove item {item.id}: '{item.path}'")
            continue
        kept.append(item)
    catalog.items[:] = kept
    return changes

def fix_titles(catalog: Catalog) -> int:
    '''Sets author and title of every item whose file name follows '[Author] Title.ext'.
    Returns the number of items updated.
    '''
    count = 0
    for item in catalog.items:
        pair = author_and_title(posixpath.basename(item.path))
        if not pair:
            continue
        author, title = pair
        item.author = author
        item.title = re.sub(constants.PATTERN_TITLE_EXTENSION, '', title)
        count += 1
    logging.info(f"titles fixed: {count}")
    return count

def sort_items(catalog: Catalog) -> None:
    # list.sort is stable, equal keys keep their order
    catalog.items.sort(key=lambda item: item.sort_key())
