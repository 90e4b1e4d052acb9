'''
# Summary
Reconciles the reader's three library catalogs with the files on their partitions.

    - reconcile: Runs every selected phase on body, memory-stick and SD in turn and writes the catalogs.
    - preview:   Runs the same phases without copying files or writing catalogs, and reports what would change.

Each partition goes through these phases, in order:
    copy        Copy new or resized files from the sync source onto the partition (needs --sync).
    synchronize Add items for new files below the media root, remove items of missing files.
    title       Set author and title from '[Author] Title.ext' file names.
    sort        Order items by author, then title.
    renumber    Assign identifiers that do not collide with the previous partition, remap playlists.
    playlist    Rebuild one playlist per directory below the media root (needs renumber).
    save        Back up the catalog to '.unk' and write the new one.
Generated playlists are always dropped before renumbering. Without 'renumber', existing identifiers are kept
and new items take the ones after the highest identifier in use.
'''

import sys
import logging
import argparse
from dataclasses import dataclass, field
from enum import StrEnum

from . import common
from . import config
from . import catalog
from . import diff
from . import identifiers
from . import playlists
from . import scanner
from . import sync
from .catalog import Partition, PartitionRole
from .errors import ConfigurationError

# Classes
class Operation(StrEnum):
    COPY        = 'copy'
    SYNCHRONIZE = 'synchronize'
    TITLE       = 'title'
    SORT        = 'sort'
    RENUMBER    = 'renumber'
    PLAYLIST    = 'playlist'
    SAVE        = 'save'

    # partition selectors
    BODY = 'body'
    MS   = 'ms'
    SD   = 'sd'

ALL_OPERATIONS = frozenset(Operation)

# partitions in processing order with the operation that selects each
PARTITION_ORDER = (
    (PartitionRole.BODY, Operation.BODY),
    (PartitionRole.MEMORY_STICK, Operation.MS),
    (PartitionRole.SD, Operation.SD),
)

class Namespace(argparse.Namespace):
    '''Command-line arguments for reconcile module.'''

    # Required
    function: str

    # Optional (alphabetical)
    body: str
    dry_run: bool
    ms: str
    operations: str
    root: str
    sd: str
    sync: str

    # Function constants
    FUNCTION_RECONCILE = 'reconcile'
    FUNCTION_PREVIEW = 'preview'

    FUNCTIONS = {FUNCTION_RECONCILE, FUNCTION_PREVIEW}

# Data classes
@dataclass
class PartitionResult:
    '''Results from processing one partition.'''
    role: PartitionRole
    processed: bool = False
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    titles_fixed: int = 0
    copied: int = 0
    source_id: int | None = None
    last_id: int | None = None
    playlists: int = 0
    saved: bool = False

@dataclass
class ReconcileResult:
    '''Complete results from a run over all partitions.'''
    partitions: list[PartitionResult]
    last_id: int | None

class Reconciler:
    '''Runs the reconciliation phases for one partition.

    Example:
        reconciler = Reconciler(partition, previous_last_id=41)
        result = reconciler.execute(ALL_OPERATIONS)
        result.last_id  # handed to the next partition
    '''

    def __init__(self, partition: Partition, previous_last_id: int | None,
                 sync_from: str | None = None, dry_run: bool = False) -> None:
        self.partition = partition
        self.previous_last_id = previous_last_id
        self.sync_from = sync_from
        self.dry_run = dry_run

    def last_id_from_file(self) -> int:
        '''Returns the highest identifier stored in the partition's catalog file.
        An empty catalog yields the partition's reserved source identifier.
        '''
        found = catalog.max_identifier(self.partition.catalog_path, self.partition.vocabulary)
        if found is None:
            return identifiers.reserve(self.previous_last_id)[0]
        return found

    def execute(self, operations: set[Operation] | frozenset[Operation]) -> PartitionResult:
        partition = self.partition
        result = PartitionResult(role=partition.role)
        selector = dict(PARTITION_ORDER)[partition.role]
        if selector not in operations:
            logging.info(f"skip partition {partition.role}")
            result.last_id = self.last_id_from_file()
            return result

        logging.info(f"start partition {partition.role}: '{partition.catalog_path}'")
        result.processed = True
        document = catalog.load(partition.catalog_path, partition.vocabulary)

        if Operation.COPY in operations and self.sync_from:
            logging.info('phase: copy files')
            result.copied = len(sync.sync_files(self.sync_from, partition, dry_run=self.dry_run).copied)

        if Operation.SYNCHRONIZE in operations:
            logging.info('phase: synchronize items')
            observed = scanner.scan(partition.root, partition.dest)
            changes = diff.scan_item_changes(document, observed, partition.dest)
            if self.dry_run:
                for path in changes.added:
                    common.log_dry_run('add item', path)
                for path in changes.removed:
                    common.log_dry_run('remove item', path)
            diff.apply_item_changes(document, changes, partition)
            result.added, result.removed = changes.added, changes.removed

        if Operation.TITLE in operations:
            logging.info('phase: fix titles and authors')
            result.titles_fixed = diff.fix_titles(document)

        if Operation.SORT in operations:
            logging.info('phase: sort by author/title')
            diff.sort_items(document)

        playlists.remove_auto_playlists(document)

        if Operation.RENUMBER in operations:
            logging.info('phase: renumber')
            allocation = identifiers.reset_ids(document, self.previous_last_id)
            identifiers.remap_playlists(document, allocation.id_map)
            result.source_id = allocation.source_id
            result.last_id = allocation.last_id

            if Operation.PLAYLIST in operations:
                logging.info('phase: make playlists')
                result.last_id = playlists.make_playlists(document, partition.dest, allocation.source_id, allocation.last_id)
                result.playlists = sum(1 for p in document.playlists if p.is_auto)
        else:
            if Operation.PLAYLIST in operations:
                logging.warning(f"{partition.role}: 'playlist' needs 'renumber', generated playlists are dropped and not rebuilt")
            result.last_id = identifiers.assign_missing_ids(document, self.previous_last_id)

        identifiers.verify_references(document)

        if Operation.SAVE in operations:
            logging.info('phase: save')
            catalog.save(document, partition.catalog_path, dry_run=self.dry_run)
            result.saved = not self.dry_run

        logging.info(f"finish partition {partition.role}: last id {result.last_id}")
        return result

# Helper functions
def parse_operations(value: str) -> set[Operation]:
    '''Parses a comma-separated operation list. Raises ValueError on unknown names.'''
    operations: set[Operation] = set()
    for name in value.split(','):
        name = name.strip()
        if name:
            operations.add(Operation(name))
    return operations

def parse_args(valid_functions: set[str], argv: list[str]) -> Namespace:
    '''Parse command line arguments.

    Args:
        valid_functions: Set of valid function names
        argv: Argument list without the program name
    '''
    parser = argparse.ArgumentParser(description='Reconcile the reader library catalogs with the partition files.')

    # Required: function only
    parser.add_argument('function', type=str,
                       help=f"Function to run. One of: {', '.join(sorted(valid_functions))}")

    # Optional: all function parameters (alphabetical)
    parser.add_argument('--body', type=str, default=config.BODY_PATH,
                       help='Root path of the reader internal storage')
    parser.add_argument('--dry-run', '-d', action='store_true',
                       help='Only read; log what would be copied and written')
    parser.add_argument('--ms', type=str, default=config.MS_PATH,
                       help='Root path of the memory stick')
    parser.add_argument('--operations', type=str, default=','.join(sorted(ALL_OPERATIONS)),
                       help=f"Comma-separated operations. Default: all of {', '.join(sorted(ALL_OPERATIONS))}")
    parser.add_argument('--root', type=str, default=config.MEDIA_ROOT,
                       help='Media root, relative to each partition root')
    parser.add_argument('--sd', type=str, default=config.SD_PATH,
                       help='Root path of the SD card')
    parser.add_argument('--sync', type=str, default=config.SYNC_FROM,
                       help='Source tree with body/ms/sd directories to copy onto the partitions')

    # Parse into Namespace
    args = parser.parse_args(argv, namespace=Namespace())

    # Normalize paths (only if not None)
    common.normalize_arg_paths(args, ['body', 'ms', 'sd', 'sync'])

    # Validate function
    if args.function not in valid_functions:
        parser.error(f"invalid function '{args.function}'\n"
                    f"expect one of: {', '.join(sorted(valid_functions))}")

    _validate_function_args(parser, args)

    return args

def _validate_function_args(parser: argparse.ArgumentParser, args: Namespace) -> None:
    '''Validate function-specific required arguments.'''

    # All functions require every partition path and the media root
    for name in ('body', 'ms', 'sd', 'root'):
        if not getattr(args, name):
            parser.error(f"'{args.function}' requires --{name}")
    try:
        parse_operations(args.operations)
    except ValueError as e:
        parser.error(f"invalid --operations: {e}")

def format_summary(result: ReconcileResult) -> str:
    lines: list[str] = []
    for partition in result.partitions:
        if not partition.processed:
            lines.append(f"{partition.role}: skipped, last id {partition.last_id}")
            continue
        lines.append(f"{partition.role}: {len(partition.added)} added, {len(partition.removed)} removed, "
                     f"{partition.copied} copied, {partition.titles_fixed} titles, {partition.playlists} playlists, "
                     f"source id {partition.source_id}, last id {partition.last_id}")
    return '\n'.join(lines)

# Primary functions
def run(body: str | None,
        ms: str | None,
        sd: str | None,
        root: str | None,
        sync_from: str | None = None,
        operations: set[Operation] | frozenset[Operation] = ALL_OPERATIONS,
        dry_run: bool = False) -> ReconcileResult:
    '''Processes body, memory-stick and SD in that order, handing each partition's last identifier to the next.

    Args:
        body: Root path of the internal storage
        ms: Root path of the memory stick
        sd: Root path of the SD card
        root: Media root, relative to each partition root
        sync_from: Optional source tree for the copy phase
        operations: Phases and partitions to run
        dry_run: If True, no file is copied or written

    Returns:
        ReconcileResult with one PartitionResult per partition and the final last identifier
    '''
    roots = {PartitionRole.BODY: body, PartitionRole.MEMORY_STICK: ms, PartitionRole.SD: sd}
    missing = [str(role) for role, path in roots.items() if not path]
    if root is None:
        missing.append('media root')
    if missing:
        raise ConfigurationError(f"missing required paths: {', '.join(missing)}", details={'missing': missing})

    results: list[PartitionResult] = []
    last_id: int | None = None
    for role, _ in PARTITION_ORDER:
        partition = Partition.create(role, str(roots[role]), str(root))
        result = Reconciler(partition, last_id, sync_from=sync_from, dry_run=dry_run).execute(operations)
        results.append(result)
        last_id = result.last_id

    return ReconcileResult(partitions=results, last_id=last_id)

def main(argv: list[str]) -> None:
    common.configure_log_module(__file__, level=logging.DEBUG)
    script_args = parse_args(Namespace.FUNCTIONS, argv[1:])

    logging.info(f"running function '{script_args.function}'")
    dry_run = script_args.dry_run or script_args.function == Namespace.FUNCTION_PREVIEW
    result = run(script_args.body,
                 script_args.ms,
                 script_args.sd,
                 script_args.root,
                 sync_from=script_args.sync,
                 operations=parse_operations(script_args.operations),
                 dry_run=dry_run)

    print(format_summary(result))
    print(result.last_id)

if __name__ == '__main__':
    main(sys.argv)
