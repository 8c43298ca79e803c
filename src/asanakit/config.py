"""Client configuration.

Settings are merged from, lowest to highest precedence:
defaults, a YAML config file, ASANA_* environment variables, explicit overrides.
This is the only place where configuration is read.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from asanakit.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, USER_AGENT, AsanaClient
from asanakit.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV_VAR = "ASANA_CONFIG"


class Settings(BaseModel):
    """Resolved client settings."""

    token: str | None = Field(default=None, description="ASANA_TOKEN - Personal access token")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="ASANA_BASE_URL - API root URL")
    user_agent: str = Field(default=USER_AGENT, description="ASANA_USER_AGENT - User-Agent header")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="ASANA_TIMEOUT - Seconds per request")

    @field_validator("base_url")
    @classmethod
    def require_http_url(cls, v: str) -> str:
        """Reject base URLs without an http(s) scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v

    @field_validator("timeout")
    @classmethod
    def require_positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"Settings(token={token!r}, base_url={self.base_url!r}, "
            f"user_agent={self.user_agent!r}, timeout={self.timeout!r})"
        )


# Environment variable names (single source of truth)
ENV_VARS = {
    "token": "ASANA_TOKEN",
    "base_url": "ASANA_BASE_URL",
    "user_agent": "ASANA_USER_AGENT",
    "timeout": "ASANA_TIMEOUT",
}


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read settings from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        Mapping of setting names to values. Unknown keys are dropped.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError("Config file not found", path=str(path)) from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}", path=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file: {e}", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping", path=str(path))

    unknown = set(data) - set(ENV_VARS)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {path}: {', '.join(sorted(unknown))}")
    return {k: v for k, v in data.items() if k in ENV_VARS}


def load_settings(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> Settings:
    """Load and merge settings.

    Args:
        config_path: YAML config file. Falls back to $ASANA_CONFIG when unset.
        environ: Environment mapping (defaults to os.environ).
        **overrides: Explicit values; None values are ignored.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If the config file is unreadable or a value is invalid.
    """
    if environ is None:
        environ = os.environ

    values: dict[str, Any] = {}

    path = config_path or environ.get(CONFIG_PATH_ENV_VAR)
    if path:
        values.update(read_config_file(path))

    for field_name, env_var in ENV_VARS.items():
        value = environ.get(env_var)
        if value:
            values[field_name] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}", path=str(path) if path else None) from e


@contextmanager
def build_client(settings: Settings) -> Iterator[AsanaClient]:
    """Build a client from settings.

    This is a context manager that closes the transport on exit.

    Example:
        with build_client(load_settings()) as client:
            workspaces = client.list_workspaces()
    """
    client = AsanaClient(
        base_url=settings.base_url,
        user_agent=settings.user_agent,
        token=settings.token,
        timeout=settings.timeout,
    )
    logger.debug(f"Built {client!r}")
    try:
        yield client
    finally:
        client.close()
