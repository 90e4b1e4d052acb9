'''
# Summary
Copies media files from a local source tree onto a reader partition before its catalog is reconciled.

The source tree holds one directory per partition ('body', 'ms', 'sd'). Each file below it is copied to the
same relative location below the partition's media destination when the destination file is missing or
its size differs. Files are never deleted from the partition.

    source/ms/Fiction/[Jane Doe] My Book.epub -> <ms root>/<dest>/Fiction/[Jane Doe] My Book.epub
'''

import os
import shutil
import logging
from dataclasses import dataclass, field

from . import common
from .catalog import Partition
from .common import FileMapping
from .scanner import scan

# Data classes
@dataclass
class SyncResult:
    '''Results from copying one source directory onto a partition.'''
    copied: list[FileMapping] = field(default_factory=list)
    skipped: int = 0

# Helper functions
def needs_copy(source_path: str, dest_path: str) -> bool:
    '''True if `dest_path` is missing or its size differs from `source_path`.'''
    if not os.path.isfile(dest_path):
        return True
    return os.path.getsize(source_path) != os.path.getsize(dest_path)

def create_mappings(source: str, partition: Partition) -> list[FileMapping]:
    '''Maps each file of the partition's source directory to its destination on the partition.'''
    source_dir = os.path.join(source, partition.sync_directory)
    if not os.path.isdir(source_dir):
        logging.warning(f"no source directory for {partition.role}: '{source_dir}'")
        return []

    mappings: list[FileMapping] = []
    dest_dir = os.path.join(partition.root, partition.dest) if partition.dest else partition.root
    for relative_path in scan(source_dir):
        mappings.append((os.path.join(source_dir, relative_path), os.path.join(dest_dir, relative_path)))
    return mappings

# Primary functions
def sync_files(source: str, partition: Partition, dry_run: bool = False) -> SyncResult:
    '''Copies new or resized files from `source/<partition directory>` onto the partition.

    Args:
        source: Root of the local source tree
        partition: The partition to copy onto
        dry_run: If True, only log the copies that would happen

    Returns:
        SyncResult with the copied file mappings and the number of files skipped
    '''
    result = SyncResult()
    for source_path, dest_path in create_mappings(source, partition):
        if not needs_copy(source_path, dest_path):
            result.skipped += 1
            continue
        if dry_run:
            common.log_dry_run('copy', f"{source_path} -> {dest_path}")
        else:
            os.makedirs(os.path.dirname(dest_path), exist_ok=True)
            shutil.copy(source_path, dest_path)
            logging.debug(f"copied '{source_path}' to '{dest_path}'")
        result.copied.append((source_path, dest_path))

    logging.info(f"{partition.role}: {len(result.copied)} files synced, {result.skipped} up to date")
    return result
