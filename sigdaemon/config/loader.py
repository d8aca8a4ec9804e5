# sigdaemon/config/loader.py
"""
Configuration loading.

The file lives in the platformdirs user config directory unless a path is
given. A missing file is seeded with the defaults so it can be edited in
place; a file that cannot be parsed or validated raises ConfigError.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path
from pydantic import ValidationError

from sigdaemon.errors import ConfigError

from .schema import DaemonConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    return user_config_path("sigdaemon", ensure_exists=True) / CONFIG_FILENAME


def _write_defaults(config_path: Path) -> DaemonConfig:
    defaults = DaemonConfig()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        yaml.safe_dump(defaults.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )
    logger.info(f"Created default config at {config_path}")
    return defaults


def load_config(path: Path | str | None = None) -> DaemonConfig:
    """
    Load configuration from YAML file.

    Args:
        path: Config file (None = platform default location)

    Returns:
        Validated DaemonConfig

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            fails validation
    """
    config_path = Path(path) if path is not None else get_config_path()
    if not config_path.exists():
        return _write_defaults(config_path)

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"{config_path}: invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping, got {type(data).__name__}")

    try:
        config = DaemonConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{config_path}: {e}") from e

    logger.info(f"Loaded config from {config_path}")
    return config
