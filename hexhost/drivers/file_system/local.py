"""Local file-system backend: direct OS calls.

Every adapter method catches :class:`OSError` (and encoding errors) and
returns it inside a
:class:`Failed` result with exit status 1, so callers branch on exit
status the same way they do for the remote backend.

Paths handed to adapters are session paths; the session's logical root is
applied on every call, so ``chroot`` confines a backend without touching
the process.
"""

from __future__ import annotations

import os
import shutil
import stat as stat_module
import sys
from collections.abc import Callable
from typing import Any

from hexhost.drivers.user_directory.local import LocalUserDirectory
from hexhost.kernel.context.session import HostSession
from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.domain.stat import StatAttributes, mode_bits, octal_digits
from hexhost.kernel.exceptions import ValidationError
from hexhost.kernel.logging import get_host_logger
from hexhost.kernel.ports.file_system import Probe
from hexhost.kernel.ports.user_directory import UserDirectory
from hexhost.kernel.text import decode_content, encode_content


def _attempt(operation: Callable[[], Any]) -> CommandResult:
    try:
        return Ok(operation())
    except (OSError, UnicodeError) as exc:
        return Failed(exc, exit_status=1)


def _process_umask() -> int:
    current = os.umask(0)
    os.umask(current)
    return current


def _check(check: Probe, path: str) -> bool:
    match check:
        case Probe.EXISTS:
            return os.path.exists(path)
        case Probe.FILE:
            return os.path.isfile(path)
        case Probe.DIRECTORY:
            return os.path.isdir(path)
        case Probe.SYMBOLIC_LINK:
            return os.path.islink(path)
        case Probe.READABLE:
            return os.access(path, os.R_OK)
        case Probe.WRITABLE:
            return os.access(path, os.W_OK)
        case Probe.EXECUTABLE:
            return os.access(path, os.X_OK)

    try:
        info = os.stat(path)
    except OSError:
        return False

    match check:
        case Probe.CHARACTER_DEVICE:
            return stat_module.S_ISCHR(info.st_mode)
        case Probe.BLOCK_DEVICE:
            return stat_module.S_ISBLK(info.st_mode)
        case Probe.PIPE:
            return stat_module.S_ISFIFO(info.st_mode)
        case Probe.SOCKET:
            return stat_module.S_ISSOCK(info.st_mode)
        case Probe.OWNED:
            return info.st_uid == os.geteuid()
        case Probe.GROUP_OWNED:
            return info.st_gid == os.getegid()
        case Probe.SETUID:
            return bool(info.st_mode & stat_module.S_ISUID)
        case Probe.SETGID:
            return bool(info.st_mode & stat_module.S_ISGID)
        case Probe.STICKY:
            return bool(info.st_mode & stat_module.S_ISVTX)
        case Probe.NON_EMPTY:
            return info.st_size > 0
    return False


class LocalObjectAdapter:
    """Operations shared by every kind, as direct OS calls."""

    follow_links = True

    def __init__(self, backend: LocalBackend, path: str) -> None:
        self.backend = backend
        self.path = path

    @property
    def host_path(self) -> str:
        return self.backend.resolve(self.path)

    def _os_stat(self) -> os.stat_result:
        if self.follow_links:
            return os.stat(self.host_path)
        return os.lstat(self.host_path)

    def _apply_umask(self, base: int) -> None:
        umask = self.backend.session.umask
        if umask is not None:
            os.chmod(self.host_path, base & ~umask)

    def probe(self, check: Probe) -> bool:
        return self.backend.probe(check, self.path)

    def exists(self) -> bool:
        return self.probe(Probe.EXISTS)

    def stat(self) -> CommandResult:
        return _attempt(lambda: StatAttributes.from_os_stat(self._os_stat()))

    def mode(self) -> int | None:
        try:
            return octal_digits(self._os_stat().st_mode)
        except OSError:
            return None

    def owner(self) -> str | None:
        try:
            uid = self._os_stat().st_uid
        except OSError:
            return None
        return self.backend.users.user_name(uid) or str(uid)

    def group(self) -> str | None:
        try:
            gid = self._os_stat().st_gid
        except OSError:
            return None
        return self.backend.users.group_name(gid) or str(gid)

    def size(self) -> int | None:
        try:
            return self._os_stat().st_size
        except OSError:
            return None

    def chmod(self, mode: int) -> CommandResult:
        bits = mode_bits(mode)
        return _attempt(lambda: os.chmod(self.host_path, bits))

    def chown(self, owner: str) -> CommandResult:
        uid = self._resolve_id(owner, self.backend.users.user, "uid")
        if isinstance(uid, Failed):
            return uid
        path, follow = self.host_path, self.follow_links
        return _attempt(lambda: os.chown(path, uid, -1, follow_symlinks=follow))

    def chgrp(self, group: str) -> CommandResult:
        gid = self._resolve_id(group, self.backend.users.group, "gid")
        if isinstance(gid, Failed):
            return gid
        path, follow = self.host_path, self.follow_links
        return _attempt(lambda: os.chown(path, -1, gid, follow_symlinks=follow))

    def remove(self) -> CommandResult:
        path = self.host_path
        if os.path.isdir(path) and not os.path.islink(path):
            return _attempt(lambda: shutil.rmtree(path))
        return _attempt(lambda: os.remove(path))

    @staticmethod
    def _resolve_id(name: str, lookup: Callable[[str], CommandResult], field: str) -> int | Failed:
        if str(name).isdigit():
            return int(name)
        record = lookup(str(name))
        if record.failed:
            return Failed(record.value, exit_status=record.exit_status)
        return int(getattr(record.value, field))


class LocalFileAdapter(LocalObjectAdapter):
    def _read_bytes(self, length: int | None = None, offset: int = 0) -> bytes:
        with open(self.host_path, "rb") as handle:
            handle.seek(offset)
            return handle.read() if length is None else handle.read(length)

    def read(self, length: int | None = None, offset: int = 0) -> CommandResult:
        """Ok(str) of ``length`` bytes starting at byte ``offset``."""
        return _attempt(lambda: decode_content(self._read_bytes(length, offset)))

    def readlines(self) -> CommandResult:
        return _attempt(lambda: decode_content(self._read_bytes()).splitlines(keepends=True))

    def _write(self, content: str, mode: str) -> int:
        created = not os.path.exists(self.host_path)
        with open(self.host_path, mode) as handle:
            written = handle.write(encode_content(content))
        if created:
            self._apply_umask(0o666)
        return written

    def write(self, content: str) -> CommandResult:
        return _attempt(lambda: self._write(content, "wb"))

    def append(self, content: str) -> CommandResult:
        return _attempt(lambda: self._write(content, "ab"))

    def create(self) -> CommandResult:
        return _attempt(lambda: self._write("", "ab"))

    def copy(self, destination: str) -> CommandResult:
        target = self.backend.resolve(destination)
        return _attempt(lambda: shutil.copy2(self.host_path, target))

    def link(self, new_path: str) -> CommandResult:
        target = self.backend.resolve(new_path)
        return _attempt(lambda: os.link(self.host_path, target))


class LocalDirectoryAdapter(LocalObjectAdapter):
    def entries(self) -> CommandResult:
        return _attempt(lambda: sorted(os.listdir(self.host_path)))

    def create(self) -> CommandResult:
        def _mkdir() -> None:
            os.makedirs(self.host_path, exist_ok=True)
            self._apply_umask(0o777)

        return _attempt(_mkdir)


class LocalSymbolicLinkAdapter(LocalObjectAdapter):
    follow_links = False

    def exists(self) -> bool:
        return os.path.lexists(self.host_path)

    def target(self) -> str | None:
        try:
            return os.readlink(self.host_path)
        except OSError:
            return None

    def link_to(self, target: str) -> CommandResult:
        return _attempt(lambda: os.symlink(target, self.host_path))


class LocalDeviceAdapter(LocalObjectAdapter):
    def _rdev(self) -> int | None:
        try:
            return os.stat(self.host_path).st_rdev
        except OSError:
            return None

    def major(self) -> int | None:
        rdev = self._rdev()
        return None if rdev is None else os.major(rdev)

    def minor(self) -> int | None:
        rdev = self._rdev()
        return None if rdev is None else os.minor(rdev)


_ADAPTERS: dict[ResourceKind, type[LocalObjectAdapter]] = {
    ResourceKind.FILE: LocalFileAdapter,
    ResourceKind.DIRECTORY: LocalDirectoryAdapter,
    ResourceKind.SYMBOLIC_LINK: LocalSymbolicLinkAdapter,
    ResourceKind.CHARACTER_DEVICE: LocalDeviceAdapter,
    ResourceKind.BLOCK_DEVICE: LocalDeviceAdapter,
    ResourceKind.OBJECT: LocalObjectAdapter,
}


class LocalBackend:
    """Backend for this machine.

    Parameters
    ----------
    host : str, default="localhost"
        Name the manager was asked for; kept for identity and logging.
    session : HostSession, optional
        Session state; a fresh one rooted at ``/`` with the process's
        current directory is created when omitted.
    platform : str, optional
        Platform tag; defaults to :data:`sys.platform`.
    users : UserDirectory, optional
        Source of owner and group names.
    """

    is_local = True

    def __init__(
        self,
        host: str = "localhost",
        session: HostSession | None = None,
        platform: str | None = None,
        users: UserDirectory | None = None,
    ) -> None:
        self.host = host
        self.session = session or HostSession(host=host)
        if self.session.working_directory is None:
            self.session.working_directory = os.getcwd()
        self._platform = platform
        self.users: UserDirectory = users or LocalUserDirectory()
        self._logger = get_host_logger(host)

    @property
    def platform(self) -> str | None:
        return self._platform or sys.platform

    def resolve(self, path: str) -> str:
        return self.session.host_path(path)

    def probe(self, check: Probe, path: str) -> bool:
        return _check(check, self.resolve(path))

    def bind(self, kind: ResourceKind, path: str) -> LocalObjectAdapter:
        return _ADAPTERS[ResourceKind(kind)](self, self.session.expand(path))

    def chroot(self, new_root: str) -> CommandResult:
        target = self.resolve(new_root)
        if not os.path.isdir(target):
            return Failed(NotADirectoryError(20, "Not a directory", target), exit_status=1)
        self._logger.debug("chroot to {root}", root=target)
        self.session.root_directory = target
        self.session.working_directory = "/"
        return Ok(target)

    def get_umask(self) -> int:
        if self.session.umask is not None:
            return self.session.umask
        return _process_umask()

    def set_umask(self, mask: int) -> CommandResult:
        if not 0 <= mask <= 0o777:
            return Failed(ValidationError("umask", "must be between 0 and 0o777", mask))
        self.session.umask = mask
        return Ok(mask)

    def getwd(self) -> str:
        return self.session.working_directory or "/"

    def change_directory(self, path: str) -> CommandResult:
        target = self.session.expand(path)
        host_path = self.session.host_path(target)
        if not os.path.isdir(host_path):
            return Failed(NotADirectoryError(20, "Not a directory", host_path), exit_status=1)
        self.session.working_directory = target
        return Ok(target)

    def home(self) -> str | None:
        home = os.path.expanduser("~")
        return None if home == "~" else home


__all__ = [
    "LocalBackend",
    "LocalDeviceAdapter",
    "LocalDirectoryAdapter",
    "LocalFileAdapter",
    "LocalObjectAdapter",
    "LocalSymbolicLinkAdapter",
]
