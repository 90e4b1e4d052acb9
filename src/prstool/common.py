'''Shared helpers: log configuration, argument path normalization and dry-run reporting.'''

import os
import logging
import argparse

from . import config

# types
FileMapping = tuple[str, str]

def filename_no_ext(path: str) -> str:
    '''Returns the file name of `path` without its directory or extension.'''
    return os.path.splitext(os.path.basename(path))[0]

def configure_log(path: str, level: int = logging.DEBUG) -> None:
    '''Routes the root logger to '<LOG_DIR>/<name>.log', where name is derived from `path`.

    Arguments:
        path  -- A module path or bare name used to name the log file.
        level -- The minimum level to record.
    '''
    log_dir = str(config.LOG_DIR)
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    # replace any handlers left from a previous configuration
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    logging.basicConfig(filename=f"{log_dir}/{filename_no_ext(path)}.log",
                        level=level,
                        format='%(asctime)s %(levelname)s %(filename)s:%(lineno)d: %(message)s',
                        filemode='w',
                        encoding='utf-8')

def configure_log_module(module_path: str, level: int = logging.DEBUG) -> None:
    '''Configures logging for a module run as a script.'''
    configure_log(module_path, level=level)

def normalize_arg_paths(args: argparse.Namespace, names: list[str]) -> None:
    '''Normalizes each named path argument in place, skipping unset values.'''
    for name in names:
        value = getattr(args, name, None)
        if value:
            setattr(args, name, os.path.normpath(value))

def log_dry_run(operation: str, target: str) -> None:
    logging.info(f"[DRY-RUN] Would {operation}: {target}")
