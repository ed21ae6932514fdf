"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

from thesis_research.errors import ConfigError
from thesis_research.models.config import AppConfig

CONFIG_DIR = Path(__file__).parent


def load_config(name: str = "providers", path: Path | str | None = None) -> dict[str, Any]:
    """Load a YAML configuration file.

    Args:
        name: Config file name without extension (e.g., 'providers'),
            looked up in the config directory
        path: Explicit file path; overrides ``name``

    Returns:
        Parsed configuration dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
    """
    config_path = Path(path) if path is not None else CONFIG_DIR / f"{name}.yaml"
    if not config_path.exists():
        sample_path = CONFIG_DIR / f"{name}.sample.yaml"
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please copy {sample_path} to {config_path} and fill in your values."
        )

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_app_config(path: Path | str | None = None) -> AppConfig:
    """Load and validate the application config.

    Falls back to built-in defaults (keys from the environment) when no
    ``providers.yaml`` exists and no explicit path is given.
    """
    if path is None and not get_config_path("providers").exists():
        return AppConfig()

    data = load_config("providers", path)
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path or get_config_path('providers')}")
    try:
        return AppConfig.from_yaml(data)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def get_config_path(name: str) -> Path:
    """Get the path to a configuration file."""
    return CONFIG_DIR / f"{name}.yaml"
