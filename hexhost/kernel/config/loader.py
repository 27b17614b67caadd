"""Configuration loader for hexhost.

Parses configuration into :class:`~hexhost.kernel.config.models.HexHostConfig`.
Supports two config sources:

1. **kind: Config YAML** - loaded via explicit path, the
   ``HEXHOST_CONFIG_PATH`` env var, or ``hexhost.yaml`` in the working
   directory.
2. **pyproject.toml [tool.hexhost]** - auto-discovery fallback.

Environment variables override whatever the file says.
"""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import replace
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from hexhost.kernel.config.models import HexHostConfig, LoggingConfig, ShellConfig
from hexhost.kernel.exceptions import ConfigurationError
from hexhost.kernel.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

_CONFIG_FILENAMES = ("hexhost.yaml", "hexhost.yml", "pyproject.toml")

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = _TRUTHY_VALUES | _FALSY_VALUES
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> HexHostConfig:
    """Cached configuration loader."""
    loader = ConfigLoader()
    return loader._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes hexhost configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> HexHostConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        HexHostConfig
            Parsed configuration; defaults when nothing is found.
        """
        config_path = self._find_config_file(path)
        if config_path is None:
            return apply_env_overrides(get_default_config())
        return apply_env_overrides(_load_and_parse_cached(str(config_path.absolute())))

    def _load_and_parse(self, config_path: Path) -> HexHostConfig:
        """Load and parse configuration file (YAML or TOML)."""
        logger.info("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            return self._load_yaml_config(config_path)
        return self._load_toml_config(config_path)

    def _load_yaml_config(self, config_path: Path) -> HexHostConfig:
        """Load and parse a ``kind: Config`` YAML file.

        Raises
        ------
        ConfigurationError
            If the YAML file is not a valid ``kind: Config`` manifest
        """
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name, f"must use 'kind: Config' manifest format, got 'kind: {kind}'"
            )

        spec = data.get("spec", {})
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' field must be a mapping")

        return self._parse_config(self._substitute_env_vars(spec))

    def _load_toml_config(self, config_path: Path) -> HexHostConfig:
        """Load and parse a TOML config file (pyproject.toml or flat TOML)."""
        with config_path.open("rb") as f:
            data = tomllib.load(f)

        if "tool" in data and "hexhost" in data.get("tool", {}):
            section = data["tool"]["hexhost"]
        elif config_path.name == "pyproject.toml":
            logger.warning("No [tool.hexhost] section found in pyproject.toml, using defaults")
            return get_default_config()
        else:
            section = data

        return self._parse_config(self._substitute_env_vars(section))

    def _find_config_file(self, path: str | Path | None) -> Path | None:
        """Resolve the configuration file using the discovery order."""
        if path is not None:
            explicit = Path(path)
            if not explicit.exists():
                raise ConfigurationError(str(explicit), "configuration file not found")
            return explicit

        env_path = os.getenv("HEXHOST_CONFIG_PATH")
        if env_path:
            candidate = Path(env_path)
            if not candidate.exists():
                raise ConfigurationError(env_path, "HEXHOST_CONFIG_PATH points to a missing file")
            return candidate

        for name in _CONFIG_FILENAMES:
            candidate = Path.cwd() / name
            if candidate.exists():
                return candidate
        return None

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` references with environment values."""
        if isinstance(data, str):
            return self.ENV_VAR_PATTERN.sub(lambda m: os.getenv(m.group(1), m.group(0)), data)
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        return data

    def _parse_config(self, data: dict[str, Any]) -> HexHostConfig:
        """Build a HexHostConfig from a plain mapping."""
        logging_data = data.get("logging", {}) or {}
        shell_data = data.get("shell", {}) or {}
        if not isinstance(logging_data, dict) or not isinstance(shell_data, dict):
            raise ConfigurationError("config", "'logging' and 'shell' must be mappings")

        try:
            logging_config = LoggingConfig(**logging_data)
            shell_config = ShellConfig(**shell_data)
        except TypeError as e:
            raise ConfigurationError("config", str(e)) from e

        return HexHostConfig(
            logging=logging_config,
            shell=shell_config,
            default_platform=data.get("default_platform"),
        )


def apply_env_overrides(config: HexHostConfig) -> HexHostConfig:
    """Return a copy of ``config`` with ``HEXHOST_*`` environment overrides applied."""
    logging_config = config.logging
    shell_config = config.shell

    if level := os.getenv("HEXHOST_LOG_LEVEL"):
        logging_config = replace(logging_config, level=level.upper())  # type: ignore[arg-type]
    if format_type := os.getenv("HEXHOST_LOG_FORMAT"):
        logging_config = replace(
            logging_config, format=format_type.lower()  # type: ignore[arg-type]
        )
    if timeout := os.getenv("HEXHOST_COMMAND_TIMEOUT"):
        shell_config = replace(shell_config, command_timeout=float(timeout))
    if quote := os.getenv("HEXHOST_QUOTE_PATHS"):
        shell_config = replace(shell_config, quote_paths=_parse_bool_env(quote))

    return HexHostConfig(
        logging=logging_config,
        shell=shell_config,
        default_platform=os.getenv("HEXHOST_PLATFORM", config.default_platform),
    )


def get_default_config() -> HexHostConfig:
    """Return the built-in default configuration."""
    return HexHostConfig()


def load_config(path: str | Path | None = None) -> HexHostConfig:
    """Load configuration using the standard discovery order."""
    return ConfigLoader().load_config_file(path)


def clear_config_cache() -> None:
    """Clear the cached parsed configuration files."""
    _load_and_parse_cached.cache_clear()
