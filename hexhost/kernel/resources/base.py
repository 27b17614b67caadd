"""Base resource: identity, lazy adapter, change tracking and notification.

A resource is a typed handle on ``(path, host)``. It owns no backend
state: the backend is threaded in by the manager that built it (or
resolved on first use for the local host), and the per-kind object
adapter is bound lazily and memoised.

Every mutation follows the same shape: :func:`change_if` decides whether
the mutation is needed at all, then :meth:`Notifier.notify_about` runs it
and tells observers about the change if the adapter reported success.

Observed attributes: ``exists``, ``mode``, ``owner``, ``group``.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.resource import ResourceDocument, ResourceKind
from hexhost.kernel.observable import Notifier, ObserverLike
from hexhost.kernel.ports.file_system import Probe

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.ports.file_system import FileSystemBackend, ObjectAdapter

R = TypeVar("R", bound="FileSystemObject")


class FileSystemObject:
    """A path on a host whose kind is unknown or unspecialised.

    Parameters
    ----------
    path : str
        Path of the resource as seen by the host session.
    host : str, default="localhost"
        Host identity.
    backend : FileSystemBackend, optional
        Backend to run operations on; resolved for the local host when
        omitted.
    observers : Iterable, optional
        Observers registered before anything else.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.OBJECT

    def __init__(
        self,
        path: str,
        host: str = "localhost",
        *,
        backend: FileSystemBackend | None = None,
        observers: tuple[ObserverLike, ...] = (),
    ) -> None:
        self.path = path
        self.host = host
        self._backend = backend
        self._notifier = Notifier(subject=self, observers=observers)

    # -- identity ---------------------------------------------------------

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, host={self.host!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileSystemObject):
            return NotImplemented
        return (self.kind, self.path, self.host) == (other.kind, other.path, other.host)

    def __hash__(self) -> int:
        return hash((self.kind, self.path, self.host))

    def to_document(self) -> ResourceDocument:
        """Serialisable identity; carries no adapter or observer state."""
        return ResourceDocument(kind=self.kind, path=self.path, host=self.host)

    # -- wiring -----------------------------------------------------------

    @property
    def backend(self) -> FileSystemBackend:
        if self._backend is None:
            from hexhost.drivers.file_system import select_backend

            self._backend = select_backend(self.host)
        return self._backend

    @cached_property
    def adapter(self) -> ObjectAdapter:
        return self.backend.bind(self.kind, self.path)

    def _sibling(self, cls: type[R], path: str) -> R:
        """Another resource on the same backend, watched by the same observers."""
        return cls(path, self.host, backend=self.backend, observers=self.observers)

    # -- observers --------------------------------------------------------

    @property
    def observers(self) -> tuple[ObserverLike, ...]:
        return self._notifier.observers

    def add_observer(self, observer: ObserverLike) -> None:
        self._notifier.add_observer(observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        self._notifier.remove_observer(observer)

    def notify_about(self, attribute: str, *, old: Any, new: Any, mutation: Any) -> Any:
        return self._notifier.notify_about(self, attribute, old=old, new=new, mutation=mutation)

    # -- queries ----------------------------------------------------------

    def exists(self) -> bool:
        return self.adapter.exists()

    def stat(self) -> CommandResult:
        """Ok(StatAttributes) or Failed."""
        return self.adapter.stat()

    @property
    def mode(self) -> int | None:
        """Permission bits as octal digits, e.g. ``644``."""
        return self.adapter.mode()

    @mode.setter
    def mode(self, value: int) -> None:
        self.chmod(value)

    @property
    def owner(self) -> str | None:
        return self.adapter.owner()

    @owner.setter
    def owner(self, value: str) -> None:
        self.chown(value)

    @property
    def group(self) -> str | None:
        return self.adapter.group()

    @group.setter
    def group(self, value: str) -> None:
        self.chgrp(value)

    @property
    def size(self) -> int | None:
        return self.adapter.size()

    def is_readable(self) -> bool:
        return self.adapter.probe(Probe.READABLE)

    def is_writable(self) -> bool:
        return self.adapter.probe(Probe.WRITABLE)

    def is_executable(self) -> bool:
        return self.adapter.probe(Probe.EXECUTABLE)

    def is_owned(self) -> bool:
        return self.adapter.probe(Probe.OWNED)

    def is_group_owned(self) -> bool:
        return self.adapter.probe(Probe.GROUP_OWNED)

    def is_setuid(self) -> bool:
        return self.adapter.probe(Probe.SETUID)

    def is_setgid(self) -> bool:
        return self.adapter.probe(Probe.SETGID)

    def is_sticky(self) -> bool:
        return self.adapter.probe(Probe.STICKY)

    def is_pipe(self) -> bool:
        return self.adapter.probe(Probe.PIPE)

    def is_socket(self) -> bool:
        return self.adapter.probe(Probe.SOCKET)

    def is_zero(self) -> bool:
        """True when the resource is missing or has zero length."""
        return not self.adapter.probe(Probe.NON_EMPTY)

    # -- mutations --------------------------------------------------------

    def chmod(self, mode: int) -> CommandResult | NoChange:
        """Set permission bits (octal digits, ``644``) if they differ."""
        current = self.mode
        return change_if(
            current != int(mode),
            lambda: self.notify_about(
                "mode",
                old=current,
                new=lambda: self.mode,
                mutation=lambda: self.adapter.chmod(mode),
            ),
        )

    def chown(self, owner: str) -> CommandResult | NoChange:
        current = self.owner
        return change_if(
            current != owner,
            lambda: self.notify_about(
                "owner",
                old=current,
                new=lambda: self.owner,
                mutation=lambda: self.adapter.chown(owner),
            ),
        )

    def chgrp(self, group: str) -> CommandResult | NoChange:
        current = self.group
        return change_if(
            current != group,
            lambda: self.notify_about(
                "group",
                old=current,
                new=lambda: self.group,
                mutation=lambda: self.adapter.chgrp(group),
            ),
        )

    def remove(self) -> CommandResult | NoChange:
        """Delete the resource (recursively for directories) if it exists."""
        return change_if(
            self.exists(),
            lambda: self.notify_about("exists", old=True, new=False, mutation=self.adapter.remove),
        )


__all__ = ["FileSystemObject"]
