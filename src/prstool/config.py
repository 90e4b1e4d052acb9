'''
Runtime configuration loaded from environment variables with defaults.

Import this module instead of constants.py for any configurable value.
To point a run at a mounted reader without passing every path on the command line:

    export PRSTOOL_BODY=/media/reader
    export PRSTOOL_MS=/media/memory-stick
    export PRSTOOL_SD=/media/sd-card
    export PRSTOOL_ROOT=database/media/books
    export PRSTOOL_LOG_DIR=/tmp/prstool/logs
'''

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(os.getenv('PRSTOOL_PROJECT_ROOT', str(Path(__file__).parent.parent.parent)))
LOG_DIR      = Path(os.getenv('PRSTOOL_LOG_DIR', str(PROJECT_ROOT / 'logs')))

# Partition roots
BODY_PATH = os.getenv('PRSTOOL_BODY')
MS_PATH   = os.getenv('PRSTOOL_MS')
SD_PATH   = os.getenv('PRSTOOL_SD')

# Media root shared by all partitions, relative to each partition root
MEDIA_ROOT = os.getenv('PRSTOOL_ROOT')

# Optional source tree for the file copy step
SYNC_FROM = os.getenv('PRSTOOL_SYNC')
