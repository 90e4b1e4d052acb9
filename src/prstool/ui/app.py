"""Streamlit home page of the prstool console: reader paths and the state of each partition catalog."""
import streamlit as st
import pandas as pd
from prstool.ui.utils.config import AppConfig, Key
from prstool.ui.utils.page_base import PageBuilder
from prstool.ui.utils.status import STATUS_OK, catalog_status

# Constants
LABELS = {
    Key.BODY_PATH  : 'Internal storage root',
    Key.MS_PATH    : 'Memory stick root',
    Key.SD_PATH    : 'SD card root',
    Key.MEDIA_ROOT : 'Media root (relative to each partition)',
    Key.SYNC_PATH  : 'Sync source (body/ms/sd directories)',
}

st.set_page_config(layout="wide")
st.title("prstool")

app_config = AppConfig.load()

# Reader paths
st.write('### Reader')
values = {key: PageBuilder.render_path_input(label, getattr(app_config, key)) for key, label in LABELS.items()}

center = PageBuilder.create_center_context()
with center:
    if st.button('Save Paths', type='primary', width='stretch'):
        try:
            AppConfig.save(AppConfig(values))
            st.success('Paths saved')
            st.rerun()
        except OSError as e:
            st.error(f'Failed to save paths: {e}')

PageBuilder.render_section_separator()

# Catalog state per partition, read only
st.write('### Catalogs')
status = catalog_status(app_config)
st.dataframe(status, hide_index=True, width='stretch')
last_id = status['Last ID'].max()
if not (status['Status'] == STATUS_OK).all():
    st.warning('Some partitions are not configured or their catalog cannot be read.')
elif pd.notna(last_id):
    st.success(f"Highest identifier on the reader: {int(last_id)}")

PageBuilder.render_section_separator()
st.write('#### 👈  Run a preview or reconcile from the left sidebar.')
