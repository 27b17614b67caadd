"""File-system port: the operation surface every backend implements.

A *backend* is bound to one host and carries that host's session state
(root, working directory, umask). It answers classification probes and
binds ``(kind, path)`` to a per-kind *object adapter*. Both
``LocalBackend`` and ``RemoteBackend`` implement these protocols with the
same result types and success semantics, so resources never branch on
which one they hold.

Queries return plain values (``bool``, ``int``, ``str`` or ``None`` when
indeterminate). Anything that can fail returns a
:class:`~hexhost.kernel.domain.command_result.CommandResult`.
"""

from __future__ import annotations

from abc import abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hexhost.kernel.context.session import HostSession
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.domain.resource import ResourceKind
    from hexhost.kernel.ports.user_directory import UserDirectory


class Probe(StrEnum):
    """Single-predicate checks; values are the matching ``test(1)`` flags."""

    EXISTS = "e"
    FILE = "f"
    DIRECTORY = "d"
    SYMBOLIC_LINK = "L"
    CHARACTER_DEVICE = "c"
    BLOCK_DEVICE = "b"
    PIPE = "p"
    SOCKET = "S"
    READABLE = "r"
    WRITABLE = "w"
    EXECUTABLE = "x"
    OWNED = "O"
    GROUP_OWNED = "G"
    SETUID = "u"
    SETGID = "g"
    STICKY = "k"
    NON_EMPTY = "s"


@runtime_checkable
class ObjectAdapter(Protocol):
    """Operations shared by every resource kind."""

    path: str

    @abstractmethod
    def probe(self, check: Probe) -> bool:
        """Answer a single predicate about the bound path."""
        ...

    @abstractmethod
    def exists(self) -> bool: ...

    @abstractmethod
    def stat(self) -> CommandResult:
        """Ok(StatAttributes) or Failed."""
        ...

    @abstractmethod
    def mode(self) -> int | None:
        """Permission bits as octal digits (``644``)."""
        ...

    @abstractmethod
    def owner(self) -> str | None: ...

    @abstractmethod
    def group(self) -> str | None: ...

    @abstractmethod
    def size(self) -> int | None: ...

    @abstractmethod
    def chmod(self, mode: int) -> CommandResult: ...

    @abstractmethod
    def chown(self, owner: str) -> CommandResult: ...

    @abstractmethod
    def chgrp(self, group: str) -> CommandResult: ...

    @abstractmethod
    def remove(self) -> CommandResult: ...


@runtime_checkable
class FileAdapter(ObjectAdapter, Protocol):
    """Regular-file operations."""

    @abstractmethod
    def read(self, length: int | None = None, offset: int = 0) -> CommandResult:
        """Ok(str) with the whole content, or ``length`` bytes from byte ``offset``.

        Content is UTF-8; undecodable bytes come back as lone surrogates
        (``surrogateescape``) and are written back unchanged.
        """
        ...

    @abstractmethod
    def readlines(self) -> CommandResult: ...

    @abstractmethod
    def write(self, content: str) -> CommandResult: ...

    @abstractmethod
    def append(self, content: str) -> CommandResult: ...

    @abstractmethod
    def create(self) -> CommandResult: ...

    @abstractmethod
    def copy(self, destination: str) -> CommandResult: ...

    @abstractmethod
    def link(self, new_path: str) -> CommandResult:
        """Create a hard link at ``new_path`` pointing at the bound file."""
        ...


@runtime_checkable
class DirectoryAdapter(ObjectAdapter, Protocol):
    """Directory operations."""

    @abstractmethod
    def entries(self) -> CommandResult:
        """Ok(list[str]) of entry names, without ``.`` and ``..``."""
        ...

    @abstractmethod
    def create(self) -> CommandResult: ...


@runtime_checkable
class SymbolicLinkAdapter(ObjectAdapter, Protocol):
    """Symbolic-link operations."""

    @abstractmethod
    def target(self) -> str | None: ...

    @abstractmethod
    def link_to(self, target: str) -> CommandResult:
        """Make the bound path a symbolic link to ``target``."""
        ...


@runtime_checkable
class DeviceAdapter(ObjectAdapter, Protocol):
    """Character and block device operations."""

    @abstractmethod
    def major(self) -> int | None: ...

    @abstractmethod
    def minor(self) -> int | None: ...


@runtime_checkable
class FileSystemBackend(Protocol):
    """A host-bound backend: classification probes, session state, binding."""

    host: str
    session: HostSession
    is_local: bool
    users: UserDirectory

    @property
    @abstractmethod
    def platform(self) -> str | None: ...

    @abstractmethod
    def probe(self, check: Probe, path: str) -> bool: ...

    @abstractmethod
    def bind(self, kind: ResourceKind, path: str) -> ObjectAdapter:
        """Return the object adapter for ``path`` treated as ``kind``."""
        ...

    @abstractmethod
    def chroot(self, new_root: str) -> CommandResult: ...

    @abstractmethod
    def get_umask(self) -> int: ...

    @abstractmethod
    def set_umask(self, mask: int) -> CommandResult: ...

    @abstractmethod
    def getwd(self) -> str: ...

    @abstractmethod
    def change_directory(self, path: str) -> CommandResult: ...

    @abstractmethod
    def home(self) -> str | None: ...


__all__ = [
    "DeviceAdapter",
    "DirectoryAdapter",
    "FileAdapter",
    "FileSystemBackend",
    "ObjectAdapter",
    "Probe",
    "SymbolicLinkAdapter",
]
