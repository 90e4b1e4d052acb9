'''Catalog status of each configured partition, for the console overview.'''
import logging

import pandas as pd

from prstool import catalog
from prstool.catalog import Partition, PartitionRole
from prstool.errors import ParseError
from prstool.ui.utils.config import AppConfig

# Constants
COLUMNS = ['Partition', 'Catalog', 'Items', 'User Playlists', 'Generated Playlists', 'Last ID', 'Status']
STATUS_OK    = 'ok'
STATUS_UNSET = 'not configured'

def partition_roots(app_config: AppConfig) -> dict[PartitionRole, str | None]:
    return {
        PartitionRole.BODY         : app_config.body_path,
        PartitionRole.MEMORY_STICK : app_config.ms_path,
        PartitionRole.SD           : app_config.sd_path,
    }

def catalog_status(app_config: AppConfig) -> pd.DataFrame:
    '''Returns one row per partition with its catalog location, record counts and highest identifier.

    A catalog that cannot be loaded is reported in the 'Status' column instead of its counts.
    '''
    rows = []
    for role, root in partition_roots(app_config).items():
        row: dict[str, object] = {column: None for column in COLUMNS}
        row['Partition'] = str(role)
        row['Status'] = STATUS_UNSET
        if root:
            partition = Partition.create(role, root, app_config.media_root or '')
            row['Catalog'] = partition.catalog_path
            try:
                document = catalog.load(partition.catalog_path, partition.vocabulary)
            except ParseError as e:
                logging.warning(f"status of {role}: {e}")
                row['Status'] = str(e)
            else:
                row['Items'] = len(document.items)
                row['User Playlists'] = sum(1 for p in document.playlists if not p.is_auto)
                row['Generated Playlists'] = sum(1 for p in document.playlists if p.is_auto)
                row['Last ID'] = document.max_identifier()
                row['Status'] = STATUS_OK
        rows.append(row)
    return pd.DataFrame(rows, columns=COLUMNS)
