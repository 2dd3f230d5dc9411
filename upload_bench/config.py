"""Configuration loading for the upload benchmark.

Supports two configuration sources, merged over built-in defaults:
1. Environment variables - take priority
2. A JSON config file (optional, for local development)

Environment Variables:
    ACCESS_KEY=xxx
    SECRET_KEY=xxx
    ENDPOINT=http://localhost:9000
    REGION=us-east-1
    ADDRESSING_STYLE=path

Every setting has a default pointing at a local MinIO server, so a bare
``upload-bench`` run works against ``minio server`` with stock credentials.
"""

import json
import os
from pathlib import Path
from typing import Optional

from upload_bench.models import StorageConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


DEFAULTS = {
    "aws_access_key_id": "minioadmin",
    "aws_secret_access_key": "minioadmin",
    "endpoint_url": "http://localhost:9000",
    "region_name": "us-east-1",
    "addressing_style": "path",
}

# Environment variable name for each setting
ENV_VARS = {
    "aws_access_key_id": "ACCESS_KEY",
    "aws_secret_access_key": "SECRET_KEY",
    "endpoint_url": "ENDPOINT",
    "region_name": "REGION",
    "addressing_style": "ADDRESSING_STYLE",
}

ADDRESSING_STYLES = ("path", "virtual", "auto")


def load_from_json(config_path: str) -> dict[str, str]:
    """Load settings from a JSON file.

    Args:
        config_path: Path to the config file.

    Returns:
        Dictionary of the recognised settings present in the file.

    Raises:
        ConfigError: If the file doesn't exist, contains invalid JSON,
                    or is not a JSON object.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    return {key: str(data[key]) for key in DEFAULTS if key in data}


def load_from_env() -> dict[str, str]:
    """Load settings from environment variables.

    Empty variables are treated as unset.
    """
    settings: dict[str, str] = {}
    for key, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            settings[key] = value
    return settings


def load_config(config_path: Optional[str] = None) -> StorageConfig:
    """Load the storage configuration.

    Priority order:
    1. Environment variables
    2. The JSON config file, if a path is given
    3. Local MinIO defaults

    Args:
        config_path: Optional path to a JSON config file.

    Returns:
        The resolved StorageConfig.

    Raises:
        ConfigError: If the config file is unreadable or the addressing
                    style is not recognised.
    """
    settings = dict(DEFAULTS)

    if config_path is not None:
        settings.update(load_from_json(config_path))

    settings.update(load_from_env())

    if settings["addressing_style"] not in ADDRESSING_STYLES:
        raise ConfigError(
            f"Invalid addressing style '{settings['addressing_style']}'. "
            f"Expected one of: {', '.join(ADDRESSING_STYLES)}"
        )

    return StorageConfig(**settings)
