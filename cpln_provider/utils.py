"""cpln-provider - Utility functions"""

from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from dotenv import dotenv_values

from cpln_provider.exceptions import ConfigurationError


def find_env_file() -> Optional[Path]:
    """Smart .env file detection"""
    search_paths = [
        Path.cwd() / ".env",
        Path.home() / ".cpln" / ".env",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def load_env(env_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load .env values with smart detection.

    A missing .env file is not an error; the process environment and the
    config file can still supply every setting.
    """
    env_file = env_file or find_env_file()

    if not env_file:
        return {}

    return {k: v for k, v in dotenv_values(env_file).items() if v is not None}


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML mapping from disk.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or not a mapping
    """
    if not path.exists():
        raise ConfigurationError(
            f"File not found: {path}",
            context="Pass the right path with -f/--file",
        )

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", context=str(e))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {path}",
            context=f"Got: {type(data).__name__}",
        )
    return data
