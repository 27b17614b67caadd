"""Core exception hierarchy for hexhost.

All hexhost exceptions inherit from HexHostError for easy exception handling.
Adapter-level OS and command failures are *not* raised: they travel inside a
:class:`~hexhost.kernel.domain.command_result.Failed` result. The exceptions
below cover programmer errors, configuration problems, transport failures
and explicit unwrapping of failed results.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class HexHostError(Exception):
    """Base exception for all hexhost errors.

    Catch this to handle all hexhost errors.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(HexHostError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("shell", "remote host 'web01' needs a shell executor")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(HexHostError):
    """Raised when data validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("host", "document belongs to another host", value="web01")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


# ============================================================================
# Classification Errors
# ============================================================================


class UnknownResourceKindError(HexHostError):
    """Raised when an explicit resource kind hint does not map to a resource.

    Examples
    --------
    Example usage::

        raise UnknownResourceKindError("fifo")
    """

    def __init__(self, hint: object) -> None:
        self.hint = hint
        super().__init__(f"Resource kind '{hint}' does not exist.")


# ============================================================================
# Shell & Command Errors
# ============================================================================


class ShellError(HexHostError):
    """Base exception for failures of the shell transport itself."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Shell error running '{command}': {reason}")


class CommandTimeoutError(ShellError):
    """Raised when a shell command exceeds its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, f"timed out after {timeout}s")


class CommandCancelledError(ShellError):
    """Raised when a shell command is cancelled through its cancellation token."""

    def __init__(self, command: str) -> None:
        super().__init__(command, "cancelled")


class RemoteCommandError(HexHostError):
    """Failure detail of a shell command that exited non-zero.

    Stored in :class:`~hexhost.kernel.domain.command_result.Failed` by the
    remote adapter; adapters never raise it.
    """

    def __init__(self, command: str, exit_status: int, output: str = "") -> None:
        self.command = command
        self.exit_status = exit_status
        self.output = output
        detail = f": {output.strip()}" if output.strip() else ""
        super().__init__(f"Command '{command}' exited with status {exit_status}{detail}")


class CommandFailedError(HexHostError):
    """Raised by ``CommandResult.unwrap()`` when the result is a failure."""

    def __init__(self, error: object, exit_status: int) -> None:
        self.error = error
        self.exit_status = exit_status
        super().__init__(f"Command failed with exit status {exit_status}: {error}")


# ============================================================================
# Package Errors
# ============================================================================


class PackageManagerError(HexHostError):
    """Raised when no package manager can be selected for a host."""

    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(f"Package manager error for '{host}': {reason}")


__all__ = [
    # Base
    "HexHostError",
    # Configuration & Validation
    "ConfigurationError",
    "ValidationError",
    # Classification
    "UnknownResourceKindError",
    # Shell & Commands
    "ShellError",
    "CommandTimeoutError",
    "CommandCancelledError",
    "RemoteCommandError",
    "CommandFailedError",
    # Packages
    "PackageManagerError",
]
