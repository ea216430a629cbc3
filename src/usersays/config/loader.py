"""Reads the server's YAML settings file into a Config."""

from pathlib import Path

import yaml

from usersays.config.models import Config


def load_config(config_path: Path | None) -> Config:
    """Build the server, upload and logging settings.

    Without a path the defaults apply (plus any ``USERSAYS_*`` environment
    overrides). An empty file is treated like an empty mapping.

    Args:
        config_path: YAML settings file given with ``--config``, or None.

    Returns:
        Validated Config.

    Raises:
        FileNotFoundError: If config_path is missing.
        ValueError: If the file is not YAML or its top level is not a mapping.
    """
    if config_path is None:
        return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"YAML root must be a mapping, not {type(data).__name__}")

    return Config(**data)
