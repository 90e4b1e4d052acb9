import streamlit as st
import pandas as pd
import logging

from prstool import reconcile
from prstool.errors import PrsToolError
from prstool.ui.utils.config import AppConfig
from prstool.ui.utils.page_base import PageBuilder

# Constants
MODULE = 'reconcile'
FUNCTIONS = [reconcile.Namespace.FUNCTION_PREVIEW, reconcile.Namespace.FUNCTION_RECONCILE]
DESCRIPTIONS = {
    reconcile.Namespace.FUNCTION_PREVIEW   : 'Runs every phase in memory. Nothing is copied or written.',
    reconcile.Namespace.FUNCTION_RECONCILE : 'Runs every phase and writes the catalogs, keeping a .unk backup of each.',
}

def to_dataframe(result: reconcile.ReconcileResult) -> pd.DataFrame:
    '''Returns one row per partition of the run result.'''
    rows = []
    for partition in result.partitions:
        rows.append({
            'Partition' : str(partition.role),
            'Processed' : partition.processed,
            'Added'     : len(partition.added),
            'Removed'   : len(partition.removed),
            'Copied'    : partition.copied,
            'Titles'    : partition.titles_fixed,
            'Playlists' : partition.playlists,
            'Source ID' : partition.source_id,
            'Last ID'   : partition.last_id,
            'Saved'     : partition.saved,
        })
    return pd.DataFrame(rows)

# Page initialization
page = PageBuilder(module_name=MODULE, module_ref=reconcile)
page.initialize_logging()
page.render_header_and_overview()
function = page.render_function_selector(FUNCTIONS, lambda f: DESCRIPTIONS[f])

# Function arguments
page.render_arguments_header()
app_config = AppConfig.load()

body_path = page.render_path_input('Body Path', app_config.body_path)
ms_path = page.render_path_input('Memory Stick Path', app_config.ms_path)
sd_path = page.render_path_input('SD Card Path', app_config.sd_path)
media_root = page.render_path_input('Media Root', app_config.media_root)
sync_path = page.render_path_input('Sync Source Path (optional)', app_config.sync_path)
operations = st.multiselect('Operations',
                            sorted(reconcile.ALL_OPERATIONS),
                            default=sorted(reconcile.ALL_OPERATIONS))

page.render_section_separator()

# Handle Run button
if page.render_run_button():
    if not body_path or not ms_path or not sd_path or not media_root:
        st.error('Body, memory stick, SD card and media root paths are required')
    else:
        try:
            dry_run = function == reconcile.Namespace.FUNCTION_PREVIEW
            with st.spinner('Reconciling catalogs...'):
                result = reconcile.run(body_path, ms_path, sd_path, media_root,
                                       sync_from=sync_path or None,
                                       operations={reconcile.Operation(o) for o in operations},
                                       dry_run=dry_run)

            page.render_results_header()
            st.dataframe(to_dataframe(result), hide_index=True, width='stretch')
            for partition in result.partitions:
                if partition.added or partition.removed:
                    with st.expander(f"{partition.role}: changed files"):
                        st.write(pd.DataFrame(
                            [{'Change': 'added', 'Path': p} for p in partition.added] +
                            [{'Change': 'removed', 'Path': p} for p in partition.removed]))
            st.success(f"Last identifier: {result.last_id}")

            # remember the paths for the next session
            app_config.body_path = body_path
            app_config.ms_path = ms_path
            app_config.sd_path = sd_path
            app_config.media_root = media_root
            app_config.sync_path = sync_path or None
            AppConfig.save(app_config)
        except (PrsToolError, OSError) as e:
            st.error(f'Error running {function}: {e}')
            logging.error(f'Error in {function}: {e}', exc_info=True)
