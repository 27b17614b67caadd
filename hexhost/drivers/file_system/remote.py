"""Remote file-system backend: POSIX shell commands over an injected shell.

Only exit statuses and stdout are inspected. Paths are quoted through the
:class:`~hexhost.drivers.shell.runner.CommandRunner`, so they reach the
shell as single words unless quoting was switched off in
:class:`~hexhost.kernel.config.models.ShellConfig`.

The session's umask is applied by prefixing creating commands with
``umask NNN &&``; the remote login's own umask is never changed.
"""

from __future__ import annotations

import shlex
from functools import cached_property

from hexhost.drivers.file_system.remote_stat import RemoteStat
from hexhost.drivers.shell.runner import CommandRunner
from hexhost.drivers.user_directory.getent import GetentUserDirectory
from hexhost.kernel.config.models import ShellConfig
from hexhost.kernel.context.session import HostSession
from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.domain.stat import mode_bits
from hexhost.kernel.exceptions import RemoteCommandError, ValidationError
from hexhost.kernel.logging import get_host_logger
from hexhost.kernel.ports.file_system import Probe
from hexhost.kernel.ports.shell import ShellExecutor
from hexhost.kernel.ports.user_directory import UserDirectory
from hexhost.kernel.stat_parser import mode_to_i

_DEFAULT_UMASK = 0o022

_UNAME_PLATFORMS = {
    "linux": "linux",
    "darwin": "darwin",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
}


class RemoteObjectAdapter:
    """Operations shared by every kind, as shell commands.

    Attribute queries follow symbolic links (``ls -ldL``, ``stat -L``), the
    same way ``chmod`` and ``chown`` do; the link adapter reports the link.
    """

    follow_links = True

    def __init__(self, backend: RemoteBackend, path: str) -> None:
        self.backend = backend
        self.path = path

    @property
    def runner(self) -> CommandRunner:
        return self.backend.runner

    @property
    def host_path(self) -> str:
        return self.backend.resolve(self.path)

    @property
    def quoted(self) -> str:
        return self.runner.quote(self.host_path)

    def _listing_column(self, column: int) -> str | None:
        flags = "-ldL" if self.follow_links else "-ld"
        return self.runner.output(f"ls {flags} {self.quoted} | awk '{{print ${column}}}'")

    def probe(self, check: Probe) -> bool:
        return self.backend.probe(check, self.path)

    def exists(self) -> bool:
        return self.probe(Probe.EXISTS)

    def stat(self) -> CommandResult:
        return self.backend.stat_probe.stat(self.host_path, follow=self.follow_links)

    def mode(self) -> int | None:
        letters = self._listing_column(1)
        return None if letters is None else mode_to_i(letters)

    def owner(self) -> str | None:
        return self._listing_column(3)

    def group(self) -> str | None:
        return self._listing_column(4)

    def size(self) -> int | None:
        result = self.stat()
        return result.value.size if result.succeeded else None

    def chmod(self, mode: int) -> CommandResult:
        return self.runner.run(f"chmod {mode_bits(mode):o} {self.quoted}")

    def chown(self, owner: str) -> CommandResult:
        return self.runner.run(f"chown {self.runner.quote(owner)} {self.quoted}")

    def chgrp(self, group: str) -> CommandResult:
        return self.runner.run(f"chgrp {self.runner.quote(group)} {self.quoted}")

    def remove(self) -> CommandResult:
        return self.runner.run(f"rm -rf {self.quoted}")


class RemoteFileAdapter(RemoteObjectAdapter):
    def read(self, length: int | None = None, offset: int = 0) -> CommandResult:
        if length is None and offset == 0:
            return self.runner.run(f"cat {self.quoted}", strip=False)
        command = f"tail -c +{int(offset) + 1} {self.quoted}"
        if length is not None:
            command += f" | head -c {int(length)}"
        return self.runner.run(command, strip=False)

    def readlines(self) -> CommandResult:
        result = self.read()
        if result.failed:
            return result
        return Ok(result.value.splitlines(keepends=True), rendered=result.rendered)

    def write(self, content: str) -> CommandResult:
        command = f"printf '%s' {shlex.quote(content)} > {self.quoted}"
        return self.runner.run(self.backend.with_umask(command))

    def append(self, content: str) -> CommandResult:
        command = f"printf '%s' {shlex.quote(content)} >> {self.quoted}"
        return self.runner.run(self.backend.with_umask(command))

    def create(self) -> CommandResult:
        return self.runner.run(self.backend.with_umask(f"touch {self.quoted}"))

    def copy(self, destination: str) -> CommandResult:
        target = self.runner.quote(self.backend.resolve(destination))
        return self.runner.run(self.backend.with_umask(f"cp {self.quoted} {target}"))

    def link(self, new_path: str) -> CommandResult:
        target = self.runner.quote(self.backend.resolve(new_path))
        return self.runner.run(f"ln {self.quoted} {target}")


class RemoteDirectoryAdapter(RemoteObjectAdapter):
    def entries(self) -> CommandResult:
        result = self.runner.run(f"ls -A {self.quoted}")
        if result.failed:
            return result
        names = sorted(line for line in result.value.splitlines() if line)
        return Ok(names, rendered=result.rendered)

    def create(self) -> CommandResult:
        return self.runner.run(self.backend.with_umask(f"mkdir -p {self.quoted}"))


class RemoteSymbolicLinkAdapter(RemoteObjectAdapter):
    follow_links = False

    def chown(self, owner: str) -> CommandResult:
        return self.runner.run(f"chown -h {self.runner.quote(owner)} {self.quoted}")

    def chgrp(self, group: str) -> CommandResult:
        return self.runner.run(f"chgrp -h {self.runner.quote(group)} {self.quoted}")

    def exists(self) -> bool:
        status = self.runner.execute(f"[ -L {self.quoted} ] || [ -e {self.quoted} ]").exit_status
        return status == 0

    def target(self) -> str | None:
        return self.runner.output(f"readlink {self.quoted}")

    def link_to(self, target: str) -> CommandResult:
        return self.runner.run(f"ln -s {self.runner.quote(target)} {self.quoted}")


class RemoteDeviceAdapter(RemoteObjectAdapter):
    def major(self) -> int | None:
        return self.backend.stat_probe.dev_major(self.host_path, follow=True)

    def minor(self) -> int | None:
        return self.backend.stat_probe.dev_minor(self.host_path, follow=True)


_ADAPTERS: dict[ResourceKind, type[RemoteObjectAdapter]] = {
    ResourceKind.FILE: RemoteFileAdapter,
    ResourceKind.DIRECTORY: RemoteDirectoryAdapter,
    ResourceKind.SYMBOLIC_LINK: RemoteSymbolicLinkAdapter,
    ResourceKind.CHARACTER_DEVICE: RemoteDeviceAdapter,
    ResourceKind.BLOCK_DEVICE: RemoteDeviceAdapter,
    ResourceKind.OBJECT: RemoteObjectAdapter,
}


class RemoteBackend:
    """Backend for a host reachable through a :class:`ShellExecutor`.

    Parameters
    ----------
    host : str
        Host identity.
    shell : ShellExecutor
        Command execution capability for that host.
    session : HostSession, optional
        Session state; a fresh one is created when omitted.
    platform : str, optional
        Platform tag; detected once with ``uname -s`` when omitted.
    config : ShellConfig, optional
        Timeout and quoting settings.
    users : UserDirectory, optional
        Source of account records; ``getent`` on the host when omitted.
    """

    is_local = False

    def __init__(
        self,
        host: str,
        shell: ShellExecutor,
        session: HostSession | None = None,
        platform: str | None = None,
        config: ShellConfig | None = None,
        users: UserDirectory | None = None,
    ) -> None:
        self.host = host
        self.shell = shell
        self.session = session or HostSession(host=host)
        self._platform = platform
        self.runner = CommandRunner(shell, host, config, cancel_token=self.session.cancel_token)
        self.users: UserDirectory = users or GetentUserDirectory(self.runner)
        self._logger = get_host_logger(host)

    @cached_property
    def detected_platform(self) -> str | None:
        kernel = self.runner.output("uname -s")
        if kernel is None:
            return None
        detected = _UNAME_PLATFORMS.get(kernel.strip().lower())
        self._logger.debug(
            "Detected platform {platform} ({kernel})", platform=detected, kernel=kernel
        )
        return detected

    @property
    def platform(self) -> str | None:
        return self._platform or self.detected_platform

    @cached_property
    def stat_probe(self) -> RemoteStat:
        return RemoteStat(self.runner, self.platform)

    def with_umask(self, command: str) -> str:
        if self.session.umask is None:
            return command
        return f"umask {self.session.umask:03o} && {command}"

    def resolve(self, path: str) -> str:
        self.getwd()
        return self.session.host_path(path)

    def probe(self, check: Probe, path: str) -> bool:
        return self.runner.test(check.value, self.resolve(path))

    def bind(self, kind: ResourceKind, path: str) -> RemoteObjectAdapter:
        self.getwd()
        return _ADAPTERS[ResourceKind(kind)](self, self.session.expand(path))

    def chroot(self, new_root: str) -> CommandResult:
        target = self.resolve(new_root)
        command = f"[ -d {self.runner.quote(target)} ]"
        if self.runner.execute(command).exit_status != 0:
            return Failed(RemoteCommandError(command, 1, "Not a directory"), exit_status=1)
        self._logger.debug("chroot to {root}", root=target)
        self.session.root_directory = target
        self.session.working_directory = "/"
        return Ok(target)

    def get_umask(self) -> int:
        if self.session.umask is not None:
            return self.session.umask
        output = self.runner.output("umask")
        try:
            return int(output, 8) if output else _DEFAULT_UMASK
        except ValueError:
            self._logger.warning("Unreadable umask {output!r}; assuming 022", output=output)
            return _DEFAULT_UMASK

    def set_umask(self, mask: int) -> CommandResult:
        if not 0 <= mask <= 0o777:
            return Failed(ValidationError("umask", "must be between 0 and 0o777", mask))
        self.session.umask = mask
        return Ok(mask)

    def getwd(self) -> str:
        if self.session.working_directory is None:
            self.session.working_directory = self.runner.output("pwd") or "/"
        return self.session.working_directory

    def change_directory(self, path: str) -> CommandResult:
        target = self.session.expand(path, self.getwd())
        command = f"[ -d {self.runner.quote(self.session.host_path(target))} ]"
        if self.runner.execute(command).exit_status != 0:
            return Failed(RemoteCommandError(command, 1, "Not a directory"), exit_status=1)
        self.session.working_directory = target
        return Ok(target)

    def home(self) -> str | None:
        return self.runner.output("echo $HOME")


__all__ = [
    "RemoteBackend",
    "RemoteDeviceAdapter",
    "RemoteDirectoryAdapter",
    "RemoteFileAdapter",
    "RemoteObjectAdapter",
    "RemoteSymbolicLinkAdapter",
]
