"""Configuration management: TOML loading and config models.

Usage:
    >>> from gudang_backup.config import load_config, AppConfig
"""

from gudang_backup.config.loader import load_config
from gudang_backup.config.models import AppConfig, BackupSettings, DatabaseSettings, StorageSettings

__all__ = ["load_config", "AppConfig", "BackupSettings", "DatabaseSettings", "StorageSettings"]
