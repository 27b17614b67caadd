"""Local shell driver.

Runs command strings through ``/bin/sh -c`` on this machine. The child is
polled rather than waited on so a :class:`CancellationToken` can stop it
mid-flight; on cancellation or timeout the process is killed and reaped
before the error is raised. Output is decoded as UTF-8 with undecodable
bytes kept as surrogates, so binary output never raises.

Example
-------
.. code-block:: python

    shell = LocalShell()
    output = shell.execute("ls -ld /tmp", timeout=5)
    output.stdout, output.exit_status
"""

from __future__ import annotations

import subprocess  # nosec B404
import time

from hexhost.kernel.exceptions import CommandCancelledError, CommandTimeoutError
from hexhost.kernel.logging import get_logger
from hexhost.kernel.ports.shell import CancellationToken, ShellOutput
from hexhost.kernel.text import CONTENT_ENCODING, CONTENT_ERRORS

logger = get_logger(__name__)


class LocalShell:
    """:class:`~hexhost.kernel.ports.shell.ShellExecutor` backed by :mod:`subprocess`.

    Parameters
    ----------
    shell : str, default="/bin/sh"
        Interpreter handed ``-c <command>``.
    poll_interval : float, default=0.1
        Seconds between cancellation checks.
    default_timeout : float, default=30.0
        Timeout used when ``execute`` is called without one.
    """

    def __init__(
        self,
        shell: str = "/bin/sh",
        poll_interval: float = 0.1,
        default_timeout: float = 30.0,
    ) -> None:
        self.shell = shell
        self.poll_interval = poll_interval
        self.default_timeout = default_timeout

    def execute(
        self,
        command: str,
        *,
        timeout: float | None = None,
        cancel: CancellationToken | None = None,
    ) -> ShellOutput:
        limit = self.default_timeout if timeout is None else timeout
        deadline = time.monotonic() + limit
        logger.debug("Executing {command}", command=command)

        if cancel is not None and cancel.cancelled:
            raise CommandCancelledError(command)

        process = subprocess.Popen(  # nosec B603
            [self.shell, "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding=CONTENT_ENCODING,
            errors=CONTENT_ERRORS,
        )
        while True:
            try:
                stdout, stderr = process.communicate(timeout=self.poll_interval)
                break
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.cancelled:
                    self._kill(process)
                    logger.warning("Cancelled {command}", command=command)
                    raise CommandCancelledError(command) from None
                if time.monotonic() >= deadline:
                    self._kill(process)
                    logger.warning(
                        "Timed out after {limit}s: {command}", limit=limit, command=command
                    )
                    raise CommandTimeoutError(command, limit) from None

        logger.trace(
            "Command {command} exited {status}",
            command=command,
            status=process.returncode,
        )
        return ShellOutput(stdout=stdout, exit_status=process.returncode, stderr=stderr)

    @staticmethod
    def _kill(process: subprocess.Popen[str]) -> None:
        process.kill()
        process.communicate()


__all__ = ["LocalShell"]
