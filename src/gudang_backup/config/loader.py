"""Load ``gudang.toml`` into an ``AppConfig``.

Lookup order for the file: explicit ``config_path`` argument, then the
``GUDANG_CONFIG`` environment variable, then ``./gudang.toml``.  A missing
file means defaults.  ``GUDANG_DATABASE_URL`` overrides ``[database] url``.
"""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from gudang_backup.config.models import AppConfig
from gudang_backup.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GUDANG_CONFIG"
DATABASE_URL_ENV_VAR = "GUDANG_DATABASE_URL"
DEFAULT_CONFIG_FILE = "gudang.toml"


def find_config_path(config_path: Path | None = None) -> Path:
    """Resolve which config file to read (it may not exist)."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load application configuration.

    Args:
        config_path: Path to a TOML file (default: see module docstring).

    Returns:
        AppConfig with defaults for anything the file leaves out.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values.
    """
    path = find_config_path(config_path)

    data: dict = {}
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        logger.debug("Loaded configuration from %s", path)
    else:
        logger.debug("No configuration at %s, using defaults", path)

    env_url = os.environ.get(DATABASE_URL_ENV_VAR)
    if env_url:
        data.setdefault("database", {})["url"] = env_url

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
