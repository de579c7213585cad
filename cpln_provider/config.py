"""Provider configuration for cpln-provider"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ValidationError, field_validator

from cpln_provider.constants import (
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
    DEFAULT_LOG_DIR,
    ENV_ORG,
    ENV_ENDPOINT,
    ENV_TOKEN,
    ENV_TIMEOUT,
    ENV_LOG_DIR,
)
from cpln_provider.exceptions import ConfigurationError
from cpln_provider.utils import load_env

ENV_KEYS = {
    "org": ENV_ORG,
    "endpoint": ENV_ENDPOINT,
    "token": ENV_TOKEN,
    "timeout": ENV_TIMEOUT,
    "log_dir": ENV_LOG_DIR,
}


class ProviderConfig(BaseModel):
    """Connection settings for the control-plane API"""

    org: str
    endpoint: str = DEFAULT_ENDPOINT
    token: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    log_dir: Path = Path(DEFAULT_LOG_DIR)

    @field_validator("org")
    @classmethod
    def org_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("org must not be empty")
        return value.strip()

    @field_validator("endpoint")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    def require_token(self) -> str:
        """
        Return the API token.

        Raises:
            ConfigurationError: If no token is configured
        """
        if not self.token:
            raise ConfigurationError(
                "No API token configured",
                context=f"Set {ENV_TOKEN} in the environment or in a .env file",
            )
        return self.token


def load_provider_config(
    file_settings: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> ProviderConfig:
    """
    Merge provider settings from all sources.

    Priority (lowest to highest): .env file, process environment,
    the 'provider' section of the config file.

    Args:
        file_settings: 'provider' section of the YAML config file
        environ: Environment mapping (defaults to os.environ)
        env_file: Explicit .env path (defaults to smart detection)

    Returns:
        Validated ProviderConfig

    Raises:
        ConfigurationError: If the merged settings are invalid
    """
    environ = os.environ if environ is None else environ
    dotenv = load_env(env_file)

    merged: Dict[str, Any] = {}
    for field_name, env_key in ENV_KEYS.items():
        if env_key in dotenv:
            merged[field_name] = dotenv[env_key]
        if env_key in environ:
            merged[field_name] = environ[env_key]

    for key, value in (file_settings or {}).items():
        if value is not None:
            merged[key] = value

    try:
        return ProviderConfig(**merged)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError("Invalid provider configuration", context=errors)
