'''Filesystem traversal of a partition's media tree and the relative-path helpers shared by the catalog phases.'''

import os
import logging
import posixpath

def clean_path(path: str) -> str:
    '''Returns `path` with forward slashes and redundant '.'/'..' segments resolved.
    The empty path and '.' both clean to the empty string.
    '''
    cleaned = posixpath.normpath(path.replace(os.sep, '/')) if path else '.'
    return '' if cleaned == '.' else cleaned

def is_child(path: str, parent: str) -> bool:
    '''True if the cleaned `path` lies at or below the cleaned `parent` directory.'''
    path, parent = clean_path(path), clean_path(parent)
    if not parent:
        return not (path == '..' or path.startswith('../'))
    return path == parent or path.startswith(f"{parent}/")

def relative_to(path: str, parent: str) -> str:
    '''Returns `path` relative to `parent`, or the empty string for `parent` itself.

    Example:
        path: database/media/books/sub/x.epub, parent: database/media/books -> sub/x.epub
    '''
    path, parent = clean_path(path), clean_path(parent)
    if not parent:
        return path
    return clean_path(posixpath.relpath(path, parent))

def scan(root: str, subpath: str = '') -> list[str]:
    '''Returns every regular file below `root/subpath` as a cleaned path relative to `root`.

    Symbolic links are not followed or emitted. Directories and files are visited in name order
    so repeated scans of the same tree produce the same sequence.

    Arguments:
        root    -- The partition root.
        subpath -- The directory to walk, relative to `root`.
    '''
    start = os.path.join(root, clean_path(subpath)) if clean_path(subpath) else root
    if not os.path.isdir(start):
        logging.warning(f"scan directory does not exist: '{start}'")
        return []

    paths: list[str] = []
    for working_dir, dirnames, filenames in os.walk(start):
        dirnames.sort()
        for name in sorted(filenames):
            full_path = os.path.join(working_dir, name)
            if os.path.islink(full_path) or not os.path.isfile(full_path):
                continue
            paths.append(clean_path(os.path.relpath(full_path, root)))
    logging.debug(f"scanned {len(paths)} files under '{start}'")
    return paths
