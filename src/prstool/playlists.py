'''
# Summary
Builds one playlist per directory below the media destination of a partition.

Generated playlists carry no 'uuid' attribute, which is how they are told apart from playlists created on
the reader. They are dropped and rebuilt on every run, so a removed directory never leaves a stale list behind.

For example, with destination 'books' the items

    books/x.epub, books/y.epub, books/sub/z.epub

produce the playlist '' with members x and y, followed by the playlist 'sub' with member z.
'''

import logging
import posixpath

from .catalog import Catalog, Playlist
from .scanner import clean_path, is_child, relative_to

def remove_auto_playlists(catalog: Catalog) -> int:
    '''Drops every generated playlist. Returns the number removed.'''
    kept = [playlist for playlist in catalog.playlists if not playlist.is_auto]
    removed = len(catalog.playlists) - len(kept)
    catalog.playlists[:] = kept
    logging.debug(f"removed {removed} generated playlists")
    return removed

def group_by_directory(catalog: Catalog, dest: str) -> dict[str, list[str]]:
    '''Returns item identifiers keyed by their directory relative to `dest`, in catalog order.'''
    groups: dict[str, list[str]] = {}
    for item in catalog.items:
        if not item.path or not item.id:
            continue
        parent = posixpath.dirname(clean_path(item.path))
        if not is_child(parent, dest):
            continue
        name = relative_to(parent, dest)
        groups.setdefault(name, []).append(item.id)
    return groups

def make_playlists(catalog: Catalog, dest: str, source_id: int, last_id: int) -> int:
    '''Regenerates the directory playlists and returns the new last identifier.

    Playlists are emitted in code-point order of their names. Each takes the next identifier after `last_id`.

    Arguments:
        catalog   -- The renumbered catalog.
        dest      -- The media destination, relative to the partition root.
        source_id -- The partition's reserved source identifier.
        last_id   -- The highest identifier assigned so far in this partition.
    '''
    remove_auto_playlists(catalog)

    groups = group_by_directory(catalog, dest)
    playlist_id = last_id
    for name in sorted(groups):
        playlist_id += 1
        catalog.playlists.append(Playlist(title=name,
                                          id=str(playlist_id),
                                          source_id=str(source_id),
                                          members=list(groups[name])))
        logging.info(f"playlist '{name}': {len(groups[name])} items")
    return playlist_id
