"""Configuration management for registry-proxy."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

from . import utils
from .errors import ConfigurationError

DEFAULT_REGISTRY_URL = "https://engine-graphql.apollographql.com/api/graphql"


class SchemaMode(str, Enum):
    """How the schema is acquired from the registry and rebuilt."""

    INTROSPECTION = "introspection"
    DOCUMENT = "document"


@dataclass(frozen=True)
class Config:
    """Configuration for registry-proxy."""

    registry_url: str = DEFAULT_REGISTRY_URL
    mode: SchemaMode = SchemaMode.INTROSPECTION
    document_flag: str = "sdl"
    registry_timeout: Optional[float] = None
    registry_headers: Mapping[str, str] = field(default_factory=dict)
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self):
        """Freeze the extra registry headers along with the rest of the config."""
        object.__setattr__(self, "registry_headers", MappingProxyType(dict(self.registry_headers)))


def get_default_config_path() -> str:
    """Get default config file path."""
    return utils.expand_path("~/.registry-proxy/config.yaml")


def parse_mode(value) -> SchemaMode:
    """Coerce a mode name into a SchemaMode."""
    if isinstance(value, SchemaMode):
        return value
    try:
        return SchemaMode(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in SchemaMode)
        raise ConfigurationError(f"Unknown schema mode {value!r} (expected one of: {choices})")


def load(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with defaults for missing values.
    """
    if config_path is None:
        config_path = get_default_config_path()

    # Return defaults if config doesn't exist
    if not utils.exists(config_path):
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    timeout = data.get("registry_timeout")
    return Config(
        registry_url=data.get("registry_url", DEFAULT_REGISTRY_URL),
        mode=parse_mode(data.get("mode", SchemaMode.INTROSPECTION)),
        document_flag=data.get("document_flag", "sdl"),
        registry_timeout=float(timeout) if timeout is not None else None,
        registry_headers={str(k): str(v) for k, v in (data.get("registry_headers") or {}).items()},
        host=data.get("host", "127.0.0.1"),
        port=int(data.get("port", 8000)),
        log_level=str(data.get("log_level", "INFO")).upper(),
    )


def create_example_config(path: Optional[str] = None) -> str:
    """Create an example config file and return its path."""
    if path is None:
        path = get_default_config_path()

    utils.ensure_dir(utils.dirname(path))

    example = {
        "registry_url": DEFAULT_REGISTRY_URL,
        "mode": SchemaMode.INTROSPECTION.value,
        "document_flag": "sdl",
        "registry_timeout": 30,
        "registry_headers": {
            "apollographql-client-name": "registry-proxy",
        },
        "host": "127.0.0.1",
        "port": 8000,
        "log_level": "INFO",
    }

    with open(path, "w") as f:
        yaml.dump(example, f, default_flow_style=False, sort_keys=False)

    return path
