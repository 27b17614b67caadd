"""Command runner shared by the shell-backed drivers.

Wraps a :class:`~hexhost.kernel.ports.shell.ShellExecutor` with the
session's timeout and cancellation token, turns exit statuses into
:class:`Ok`/:class:`Failed` results and owns path quoting.

Paths are interpolated through :func:`shlex.quote` unless quoting was
turned off with ``quote_paths=False``, which reproduces the historic
unescaped behaviour for hosts whose scripts rely on shell globbing.
"""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from hexhost.kernel.config.models import ShellConfig
from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.exceptions import RemoteCommandError
from hexhost.kernel.logging import get_host_logger

if TYPE_CHECKING:
    from hexhost.kernel.ports.shell import CancellationToken, ShellExecutor, ShellOutput


class CommandRunner:
    """Run commands for one host and classify their outcome.

    Parameters
    ----------
    shell : ShellExecutor
        The injected executor.
    host : str
        Host name, used for log binding only.
    config : ShellConfig, optional
        Timeout and quoting settings.
    cancel_token : CancellationToken, optional
        Token passed to every command; usually the session's.
    """

    def __init__(
        self,
        shell: ShellExecutor,
        host: str,
        config: ShellConfig | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self.shell = shell
        self.host = host
        self.config = config or ShellConfig()
        self.cancel_token = cancel_token
        self._logger = get_host_logger(host)

    def quote(self, value: object) -> str:
        text = str(value)
        return shlex.quote(text) if self.config.quote_paths else text

    def execute(self, command: str, timeout: float | None = None) -> ShellOutput:
        """Raw execution; timeouts and cancellation propagate."""
        self._logger.debug("Running {command}", command=command)
        return self.shell.execute(
            command,
            timeout=self.config.command_timeout if timeout is None else timeout,
            cancel=self.cancel_token,
        )

    def run(
        self, command: str, timeout: float | None = None, *, strip: bool = True
    ) -> CommandResult:
        """Execute ``command``; Ok(stdout) on exit 0, else Failed.

        Stdout is stripped of surrounding whitespace unless ``strip`` is False.
        """
        output = self.execute(command, timeout)
        if output.exit_status == 0:
            value = output.stdout.strip() if strip else output.stdout
            return Ok(value, rendered=output.stdout)

        error = RemoteCommandError(command, output.exit_status, output.stderr or output.stdout)
        self._logger.debug("{error}", error=error)
        return Failed(error, exit_status=output.exit_status, rendered=output.stdout)

    def test(self, flag: str, path: str) -> bool:
        """``[ -<flag> <path> ]`` and report whether it held."""
        return self.execute(f"[ -{flag} {self.quote(path)} ]").exit_status == 0

    def output(self, command: str) -> str | None:
        """Stripped stdout, or None when the command failed or printed nothing."""
        result = self.run(command)
        if result.failed or not result.value:
            return None
        return str(result.value)


__all__ = ["CommandRunner"]
