"""Read and write loka.yaml."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from loka.config.schema import LokaConfig


DEFAULT_CONFIG_PATH = Path.home() / ".loka" / "loka.yaml"


class ConfigError(Exception):
    """loka.yaml could not be read or does not describe a valid configuration."""


def default_config_path() -> Path:
    """Return the config path, honouring the LOKA_CONFIG environment variable."""
    env_path = os.getenv("LOKA_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def _describe(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ()))
        problems.append(f"{field}: {item.get('msg', 'invalid value')}")
    return "; ".join(problems)


def load_config(path: Optional[Path] = None) -> LokaConfig:
    """Load Loka settings, falling back to defaults for anything not set.

    Args:
        path: Config file. Defaults to $LOKA_CONFIG, then ~/.loka/loka.yaml.
              A missing or empty file yields the default configuration.

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file cannot be read, is not YAML, or has invalid settings
    """
    if path is None:
        path = default_config_path()

    if not path.exists():
        return LokaConfig()

    try:
        with open(path, "r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read Loka config {path}: {e}") from e

    if config_data is None:
        return LokaConfig()
    if not isinstance(config_data, dict):
        raise ConfigError(
            f"Loka config {path} must be a mapping of sections, not {type(config_data).__name__}"
        )

    try:
        return LokaConfig.model_validate(config_data)
    except ValidationError as e:
        raise ConfigError(f"Loka config validation failed ({path}): {_describe(e)}") from e


def save_config(config: LokaConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Write settings back to loka.yaml, creating its directory if needed.

    Args:
        config: Configuration to save
        path: Destination; defaults to the same location load_config reads
    """
    if path is None:
        path = default_config_path()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(
            config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
        )
