"""Stat probes over a shell.

Each predicate is one ``[ -X path ]`` test whose exit status is the
answer. :meth:`RemoteStat.is_zero` reads the exit status the other way
round: ``[ -s path ]`` fails for a zero-length file, so a non-zero status
means "zero". :meth:`RemoteStat.stat` runs the platform's ``stat`` format
and hands the text to :func:`~hexhost.kernel.stat_parser.parse_stat`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hexhost.kernel.domain.command_result import CommandResult, Ok
from hexhost.kernel.ports.file_system import Probe
from hexhost.kernel.stat_parser import layout_for, parse_device_number, parse_stat

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner


def stat_command(path: str, platform: str | None = None, follow: bool = False) -> str:
    """The ``stat`` invocation for ``path`` (already quoted) on ``platform``."""
    return layout_for(platform).command(path, follow)


class RemoteStat:
    """Predicate and stat probes for paths on a shell-reachable host.

    Parameters
    ----------
    runner : CommandRunner
        Runner bound to the host.
    platform : str | None
        Platform tag choosing the stat layout.
    """

    def __init__(self, runner: CommandRunner, platform: str | None = None) -> None:
        self.runner = runner
        self.platform = platform

    def check(self, probe: Probe, path: str) -> bool:
        return self.runner.test(probe.value, path)

    def exists(self, path: str) -> bool:
        return self.check(Probe.EXISTS, path)

    def is_file(self, path: str) -> bool:
        return self.check(Probe.FILE, path)

    def is_directory(self, path: str) -> bool:
        return self.check(Probe.DIRECTORY, path)

    def is_symlink(self, path: str) -> bool:
        return self.check(Probe.SYMBOLIC_LINK, path)

    def is_character_device(self, path: str) -> bool:
        return self.check(Probe.CHARACTER_DEVICE, path)

    def is_block_device(self, path: str) -> bool:
        return self.check(Probe.BLOCK_DEVICE, path)

    def is_pipe(self, path: str) -> bool:
        return self.check(Probe.PIPE, path)

    def is_socket(self, path: str) -> bool:
        return self.check(Probe.SOCKET, path)

    def is_readable(self, path: str) -> bool:
        return self.check(Probe.READABLE, path)

    def is_writable(self, path: str) -> bool:
        return self.check(Probe.WRITABLE, path)

    def is_executable(self, path: str) -> bool:
        return self.check(Probe.EXECUTABLE, path)

    def is_owned(self, path: str) -> bool:
        return self.check(Probe.OWNED, path)

    def is_group_owned(self, path: str) -> bool:
        return self.check(Probe.GROUP_OWNED, path)

    def is_setuid(self, path: str) -> bool:
        return self.check(Probe.SETUID, path)

    def is_setgid(self, path: str) -> bool:
        return self.check(Probe.SETGID, path)

    def is_sticky(self, path: str) -> bool:
        return self.check(Probe.STICKY, path)

    def is_zero(self, path: str) -> bool:
        return not self.check(Probe.NON_EMPTY, path)

    def stat(self, path: str, *, follow: bool = False) -> CommandResult:
        """Ok(StatAttributes) parsed from the platform's stat output, or Failed.

        With ``follow`` a symbolic link reports its target (``stat -L``).
        """
        command = stat_command(self.runner.quote(path), self.platform, follow)
        result = self.runner.run(command)
        if result.failed:
            return result
        return Ok(parse_stat(result.value, self.platform), rendered=result.rendered)

    def dev_major(self, path: str, *, follow: bool = False) -> int | None:
        quoted = self.runner.quote(path)
        output = self.runner.output(layout_for(self.platform).major_command(quoted, follow))
        return None if output is None else parse_device_number(output, self.platform)

    def dev_minor(self, path: str, *, follow: bool = False) -> int | None:
        quoted = self.runner.quote(path)
        output = self.runner.output(layout_for(self.platform).minor_command(quoted, follow))
        return None if output is None else parse_device_number(output, self.platform)


__all__ = ["RemoteStat", "stat_command"]
