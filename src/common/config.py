"""Shared configuration utilities."""

import os
from pathlib import Path
from typing import Any

import yaml


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml), a path to a config file,
            or None for default
        config_dir: Directory containing named config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    explicit = Path(config_name)
    if explicit.suffix in (".yaml", ".yml", ".json") or explicit.parent != Path("."):
        if not explicit.is_file():
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return explicit

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> Any:
    """Load YAML (or JSON) file and return its document."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)
