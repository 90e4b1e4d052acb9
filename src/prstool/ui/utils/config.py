'''Configuration management for UI state.'''
import json
from enum import StrEnum
from pathlib import Path
from typing import Any, Optional

from prstool import config

# Classes
class Key(StrEnum):
    BODY_PATH  = 'body_path'
    MEDIA_ROOT = 'media_root'
    MS_PATH    = 'ms_path'
    SD_PATH    = 'sd_path'
    SYNC_PATH  = 'sync_path'

class AppConfig:
    # Constants
    PATH = Path(__file__).parent.parent / 'config.json'

    def __init__(self, data: dict[str, Any]) -> None:
        self.body_path  : Optional[str] = data.get(Key.BODY_PATH) or None
        self.media_root : Optional[str] = data.get(Key.MEDIA_ROOT) or None
        self.ms_path    : Optional[str] = data.get(Key.MS_PATH) or None
        self.sd_path    : Optional[str] = data.get(Key.SD_PATH) or None
        self.sync_path  : Optional[str] = data.get(Key.SYNC_PATH) or None

    def to_dict(self) -> dict[str, Any]:
        return {
            Key.BODY_PATH  : self.body_path,
            Key.MEDIA_ROOT : self.media_root,
            Key.MS_PATH    : self.ms_path,
            Key.SD_PATH    : self.sd_path,
            Key.SYNC_PATH  : self.sync_path
        }

    @staticmethod
    def template() -> 'AppConfig':
        '''Returns a config seeded from the environment configuration.'''
        return AppConfig({
            Key.BODY_PATH  : config.BODY_PATH,
            Key.MEDIA_ROOT : config.MEDIA_ROOT,
            Key.MS_PATH    : config.MS_PATH,
            Key.SD_PATH    : config.SD_PATH,
            Key.SYNC_PATH  : config.SYNC_FROM
        })

    @staticmethod
    def load() -> 'AppConfig':
        '''Load UI configuration from disk.'''
        if not AppConfig.PATH.exists():
            AppConfig.save(AppConfig.template())

        with open(AppConfig.PATH, encoding='utf-8') as f:
            return AppConfig(json.load(f))

    @staticmethod
    def save(app_config: 'AppConfig') -> None:
        '''Save UI configuration to disk.'''
        AppConfig.PATH.parent.mkdir(parents=True, exist_ok=True)
        with open(AppConfig.PATH, 'w', encoding='utf-8') as file:
            json.dump(app_config.to_dict(), file, indent=2)
