"""Shell port: the injected "run a command string" capability.

Everything hexhost does on a remote host, and every package operation, is
expressed as a POSIX shell command handed to a :class:`ShellExecutor`.
Connection setup, authentication and session lifecycle belong to whoever
implements the port.

Drivers
-------
- ``LocalShell``: ``/bin/sh -c`` through :mod:`subprocess`.
- Anything else (SSH sessions, container exec) is supplied by the caller.
"""

from __future__ import annotations

import threading
from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class ShellOutput:
    """What a shell reports back for one command."""

    stdout: str
    exit_status: int
    stderr: str = ""


class CancellationToken:
    """Cooperative cancellation flag shared by every command of a session."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@runtime_checkable
class ShellExecutor(Protocol):
    """Port interface for executing shell command strings."""

    @abstractmethod
    def execute(
        self,
        command: str,
        *,
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> ShellOutput:
        """Run ``command`` to completion.

        Args
        ----
            command: Command string for a POSIX shell.
            timeout: Seconds before the command is abandoned.
            cancel: Token checked while the command runs.

        Returns
        -------
            The command's stdout, stderr and exit status.

        Raises
        ------
        CommandTimeoutError
            If the command runs past ``timeout``.
        CommandCancelledError
            If ``cancel`` is triggered while the command runs.
        """
        ...


__all__ = ["CancellationToken", "ShellExecutor", "ShellOutput"]
