"""Configuration models and loading for hexhost."""

from hexhost.kernel.config.loader import (
    ConfigLoader,
    apply_env_overrides,
    clear_config_cache,
    get_default_config,
    load_config,
)
from hexhost.kernel.config.models import HexHostConfig, LoggingConfig, ShellConfig

__all__ = [
    "ConfigLoader",
    "HexHostConfig",
    "LoggingConfig",
    "ShellConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
