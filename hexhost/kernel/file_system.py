"""Resource manager and classifier for one host.

A :class:`FileSystem` is bound to exactly one host identity. It picks the
backend for that host once, classifies paths by probing it, builds the
matching typed resource and registers itself as that resource's observer.
It also owns the host session: logical root, working directory and umask
are fields of the manager's session, never process-wide state.

Example
-------
.. code-block:: python

    fs = FileSystem()                       # this machine
    hosts = fs["/etc/hosts"]                # File
    fs.build("/tmp/new", kind="file")       # File, no I/O
    fs[{"dir": "/var/log"}]                 # Directory

    remote = FileSystem("web01", shell=ssh_shell)
    remote["/etc/passwd"].owner
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import cached_property
from typing import TYPE_CHECKING, Any

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.events import ResourceChanged
from hexhost.kernel.domain.resource import (
    CLASSIFICATION_ORDER,
    KIND_ALIASES,
    ResourceDocument,
    ResourceKind,
)
from hexhost.kernel.exceptions import UnknownResourceKindError, ValidationError
from hexhost.kernel.logging import get_host_logger
from hexhost.kernel.observable import Notifier, ObserverLike
from hexhost.kernel.ports.file_system import Probe
from hexhost.kernel.resources import (
    BlockDevice,
    CharacterDevice,
    Directory,
    File,
    FileSystemObject,
    SymbolicLink,
    resource_class,
)
from hexhost.kernel.serialization import dump_resource, load_document

if TYPE_CHECKING:
    from hexhost.kernel.config.models import HexHostConfig
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.ports.file_system import FileSystemBackend
    from hexhost.kernel.ports.shell import ShellExecutor

KindHint = ResourceKind | str

_KIND_PROBES: dict[ResourceKind, Probe] = {
    ResourceKind.FILE: Probe.FILE,
    ResourceKind.DIRECTORY: Probe.DIRECTORY,
    ResourceKind.SYMBOLIC_LINK: Probe.SYMBOLIC_LINK,
    ResourceKind.CHARACTER_DEVICE: Probe.CHARACTER_DEVICE,
    ResourceKind.BLOCK_DEVICE: Probe.BLOCK_DEVICE,
}


def resolve_kind(hint: KindHint) -> ResourceKind:
    """Turn a kind hint (enum member or alias) into a :class:`ResourceKind`.

    Raises
    ------
    UnknownResourceKindError
        If the hint names no known kind.
    """
    if isinstance(hint, ResourceKind):
        return hint
    if isinstance(hint, str):
        kind = KIND_ALIASES.get(hint.strip().lower())
        if kind is not None:
            return kind
    raise UnknownResourceKindError(hint)


class FileSystem:
    """Classifier, resource factory and session owner for one host.

    Parameters
    ----------
    host : str, default="localhost"
        Host identity.
    shell : ShellExecutor, optional
        Command execution for a remote host.
    platform : str, optional
        Platform tag for stat parsing; detected when omitted.
    config : HexHostConfig, optional
        Settings; loaded from the environment when omitted.
    backend : FileSystemBackend, optional
        A ready backend, bypassing selection.
    remote : bool, optional
        Force the remote backend even for this machine (loopback testing).
    """

    def __init__(
        self,
        host: str = "localhost",
        shell: ShellExecutor | None = None,
        *,
        platform: str | None = None,
        config: HexHostConfig | None = None,
        backend: FileSystemBackend | None = None,
        remote: bool | None = None,
    ) -> None:
        if config is None:
            from hexhost.kernel.config import load_config

            config = load_config()
        self.host = host
        self.shell = shell
        self.config = config
        self._platform = platform or config.default_platform
        self._remote = remote
        if backend is not None:
            self.__dict__["backend"] = backend
        self._notifier = Notifier(subject=self)
        self._logger = get_host_logger(host)

    def __repr__(self) -> str:
        return f"FileSystem(host={self.host!r})"

    @cached_property
    def backend(self) -> FileSystemBackend:
        from hexhost.drivers.file_system import select_backend

        return select_backend(
            self.host,
            self.shell,
            platform=self._platform,
            config=self.config.shell,
            remote=self._remote,
        )

    @property
    def is_local(self) -> bool:
        return self.backend.is_local

    # -- classification and construction ----------------------------------

    def classify(self, path: str) -> ResourceKind:
        """Probe ``path`` in fixed order; the first positive probe wins."""
        for kind in CLASSIFICATION_ORDER:
            if self.backend.probe(_KIND_PROBES[kind], path):
                return kind
        return ResourceKind.OBJECT

    def build(self, path: str, kind: KindHint | None = None) -> FileSystemObject:
        """Build the typed resource for ``path``.

        Args
        ----
            path: Path on the host; relative paths are expanded against the
                session's working directory.
            kind: Optional kind hint; when given no classification (and no
                I/O) happens, so the path need not exist.

        Returns
        -------
            The resource, with this manager registered as an observer.

        Raises
        ------
        UnknownResourceKindError
            If ``kind`` names no known kind.
        """
        resolved = self.classify(path) if kind is None else resolve_kind(kind)
        expanded = self.backend.session.expand(path, self.working_directory)
        resource = resource_class(resolved)(expanded, self.host, backend=self.backend)
        resource.add_observer(self)
        self._logger.debug("Built {kind} for {path}", kind=resolved.value, path=expanded)
        return resource

    def __getitem__(self, key: str | Mapping[KindHint, str]) -> FileSystemObject:
        if isinstance(key, Mapping):
            if len(key) != 1:
                raise ValidationError("key", "expected exactly one {kind: path} pair", dict(key))
            ((kind, path),) = key.items()
            return self.build(path, kind)
        return self.build(key)

    def file(self, path: str) -> File:
        return self.build(path, ResourceKind.FILE)  # type: ignore[return-value]

    def directory(self, path: str) -> Directory:
        return self.build(path, ResourceKind.DIRECTORY)  # type: ignore[return-value]

    def symbolic_link(self, path: str) -> SymbolicLink:
        return self.build(path, ResourceKind.SYMBOLIC_LINK)  # type: ignore[return-value]

    def character_device(self, path: str) -> CharacterDevice:
        return self.build(path, ResourceKind.CHARACTER_DEVICE)  # type: ignore[return-value]

    def block_device(self, path: str) -> BlockDevice:
        return self.build(path, ResourceKind.BLOCK_DEVICE)  # type: ignore[return-value]

    def object(self, path: str) -> FileSystemObject:
        return self.build(path, ResourceKind.OBJECT)

    # -- kind predicates ---------------------------------------------------

    def _is(self, target: str | FileSystemObject, kind: ResourceKind) -> bool:
        if isinstance(target, FileSystemObject):
            if target.kind is kind:
                return True
            target = target.path
        return self.backend.probe(_KIND_PROBES[kind], target)

    def exists(self, target: str | FileSystemObject) -> bool:
        path = target.path if isinstance(target, FileSystemObject) else target
        return self.backend.probe(Probe.EXISTS, path)

    def is_file(self, target: str | FileSystemObject) -> bool:
        return self._is(target, ResourceKind.FILE)

    def is_directory(self, target: str | FileSystemObject) -> bool:
        return self._is(target, ResourceKind.DIRECTORY)

    def is_symbolic_link(self, target: str | FileSystemObject) -> bool:
        return self._is(target, ResourceKind.SYMBOLIC_LINK)

    def is_character_device(self, target: str | FileSystemObject) -> bool:
        return self._is(target, ResourceKind.CHARACTER_DEVICE)

    def is_block_device(self, target: str | FileSystemObject) -> bool:
        return self._is(target, ResourceKind.BLOCK_DEVICE)

    # -- session ------------------------------------------------------------

    @property
    def root_directory(self) -> str:
        return self.backend.session.root_directory

    def chroot(self, new_root: str) -> CommandResult | NoChange:
        """Confine every later path to ``new_root`` (logical, per session)."""
        old = self.root_directory
        return change_if(
            self.backend.session.host_path(new_root) != old,
            lambda: self._notifier.notify_about(
                self,
                "root_directory",
                old=old,
                new=lambda: self.root_directory,
                mutation=lambda: self.backend.chroot(new_root),
            ),
        )

    @property
    def umask(self) -> int:
        return self.backend.get_umask()

    @umask.setter
    def umask(self, mask: int) -> None:
        self.set_umask(mask)

    def set_umask(self, mask: int) -> CommandResult | NoChange:
        old = self.umask
        return change_if(
            old != mask,
            lambda: self._notifier.notify_about(
                self, "umask", old=old, new=mask, mutation=lambda: self.backend.set_umask(mask)
            ),
        )

    @property
    def working_directory(self) -> str:
        return self.backend.getwd()

    def change_directory(self, path: str) -> CommandResult | NoChange:
        old = self.working_directory
        return change_if(
            self.backend.session.expand(path, old) != old,
            lambda: self._notifier.notify_about(
                self,
                "working_directory",
                old=old,
                new=lambda: self.working_directory,
                mutation=lambda: self.backend.change_directory(path),
            ),
        )

    cd = change_directory

    @property
    def home(self) -> str | None:
        return self.backend.home()

    def cancel(self) -> None:
        """Cancel every running and future command of this session."""
        self.backend.session.cancel_token.cancel()

    # -- observation ----------------------------------------------------------

    @property
    def observers(self) -> tuple[ObserverLike, ...]:
        return self._notifier.observers

    def add_observer(self, observer: ObserverLike) -> None:
        self._notifier.add_observer(observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        self._notifier.remove_observer(observer)

    def update(self, event: ResourceChanged) -> None:
        """Observe a built resource: log the change and pass it on."""
        self._logger.info("{message}", message=event.log_message())
        self._notifier.broadcast(event)

    # -- persistence --------------------------------------------------------

    def dump(self, resource: FileSystemObject) -> str:
        return dump_resource(resource)

    def load(self, document: ResourceDocument | str | Mapping[str, Any]) -> FileSystemObject:
        """Rebuild a resource from its document without touching the host.

        Raises
        ------
        ValidationError
            If the document belongs to another host.
        """
        doc = load_document(document)
        if doc.host != self.host:
            msg = f"document belongs to {doc.host!r}, not {self.host!r}"
            raise ValidationError("host", msg, doc.host)
        return self.build(doc.path, doc.kind)


__all__ = ["FileSystem", "KindHint", "resolve_kind"]
