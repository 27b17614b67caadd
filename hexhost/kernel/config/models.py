"""Configuration data models for hexhost."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from hexhost.kernel.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for hexhost.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    use_rich : bool, default=False
        Use Rich for console output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.hexhost.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export HEXHOST_LOG_LEVEL=DEBUG
    export HEXHOST_LOG_FORMAT=json
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    use_rich: bool = False


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Settings applied to every command sent through a shell executor.

    Attributes
    ----------
    command_timeout : float, default=30.0
        Seconds a single command may run before ``CommandTimeoutError``.
    quote_paths : bool, default=True
        Quote paths with ``shlex.quote`` before interpolating them into
        command strings. ``False`` reproduces raw interpolation and is only
        meant for shells that cannot cope with quoted arguments.
    poll_interval : float, default=0.1
        How often a running command checks its cancellation token.
    """

    command_timeout: float = 30.0
    quote_paths: bool = True
    poll_interval: float = 0.1

    def __post_init__(self) -> None:
        if self.command_timeout <= 0:
            raise ValidationError("command_timeout", "must be positive", self.command_timeout)
        if self.poll_interval <= 0:
            raise ValidationError("poll_interval", "must be positive", self.poll_interval)


@dataclass(frozen=True, slots=True)
class HexHostConfig:
    """Complete hexhost configuration.

    Attributes
    ----------
    logging : LoggingConfig
        Logging settings
    shell : ShellConfig
        Command execution settings
    default_platform : str | None
        Platform tag used for remote hosts when none is given and detection
        is not wanted (``linux``, ``darwin``, ``freebsd`` ...).
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)
    default_platform: str | None = None
