"""Package resources.

:class:`Packages` is the package counterpart of
:class:`~hexhost.kernel.file_system.FileSystem`: bound to one host, it
selects that host's package manager and builds :class:`Package` resources
that it observes. Package mutations follow the same change-tracking and
notification discipline as file-system resources; the observed attribute
is ``version`` (``None`` when not installed).

Example
-------
.. code-block:: python

    packages = Packages()                      # brew on macOS, yum elsewhere
    git = packages["git"]
    git.install()                              # NO_CHANGE if already there
    git.installed_versions
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Any

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.command_result import CommandResult, Ok
from hexhost.kernel.domain.events import ResourceChanged
from hexhost.kernel.exceptions import ConfigurationError
from hexhost.kernel.logging import get_host_logger
from hexhost.kernel.observable import Notifier, ObserverLike
from hexhost.kernel.ports.shell import CancellationToken

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner
    from hexhost.kernel.config.models import HexHostConfig
    from hexhost.kernel.ports.package_manager import PackageManager
    from hexhost.kernel.ports.shell import ShellExecutor


class Package:
    """One named package on a host.

    Parameters
    ----------
    name : str
        Package name as the manager knows it.
    manager : PackageManager
        Driver for the host's package manager.
    host : str, default="localhost"
        Host identity.
    observers : tuple, optional
        Observers registered up front.
    """

    def __init__(
        self,
        name: str,
        manager: PackageManager,
        host: str = "localhost",
        *,
        observers: tuple[ObserverLike, ...] = (),
    ) -> None:
        self.name = name
        self.manager = manager
        self.host = host
        self._notifier = Notifier(subject=self, observers=observers)

    def __repr__(self) -> str:
        return f"Package(name={self.name!r}, host={self.host!r}, manager={self.manager.name!r})"

    @property
    def observers(self) -> tuple[ObserverLike, ...]:
        return self._notifier.observers

    def add_observer(self, observer: ObserverLike) -> None:
        self._notifier.add_observer(observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        self._notifier.remove_observer(observer)

    # -- queries ----------------------------------------------------------

    @property
    def installed(self) -> bool:
        return self.manager.is_installed(self.name)

    def info(self) -> CommandResult:
        return self.manager.info(self.name)

    @property
    def installed_versions(self) -> list[str]:
        return self.manager.installed_versions(self.name)

    @property
    def current_version(self) -> str | None:
        return self.manager.current_version(self.name)

    @property
    def at_latest_version(self) -> bool | None:
        """Whether no newer version is available; None when the manager cannot tell."""
        check = getattr(self.manager, "at_latest_version", None)
        return None if check is None else check(self.name)

    # -- mutations ----------------------------------------------------------

    def _version_change(self, old: str | None, mutation: Any) -> Any:
        return self._notifier.notify_about(
            self, "version", old=old, new=lambda: self.current_version, mutation=mutation
        )

    def install(self, version: str | None = None) -> CommandResult | NoChange:
        """Install (the given ``version`` of) the package unless it is already there."""
        old = self.current_version
        criteria = [lambda: old is None]
        if version is not None:
            criteria.append(lambda: version not in self.installed_versions)
        return change_if(
            criteria,
            lambda: self._version_change(old, lambda: self.manager.install(self.name, version)),
        )

    def remove(self) -> CommandResult | NoChange:
        return change_if(
            [lambda: self.installed],
            lambda: self._version_change(
                self.current_version, lambda: self.manager.remove(self.name)
            ),
        )

    def upgrade(self) -> CommandResult | NoChange:
        """Upgrade an installed package unless it is known to be at the latest version."""
        return change_if(
            [lambda: self.installed and self.at_latest_version is not True],
            lambda: self._version_change(
                self.current_version, lambda: self.manager.upgrade(self.name)
            ),
        )


class Packages:
    """Package resource factory for one host.

    Parameters
    ----------
    host : str, default="localhost"
        Host identity.
    shell : ShellExecutor, optional
        Shell to run package commands with; a :class:`LocalShell` is used
        for this machine when omitted.
    manager : str | PackageManager, optional
        Driver name (``brew``, ``yum``) or a ready driver; chosen from the
        platform when omitted.
    platform : str, optional
        Platform tag; detected with ``uname -s`` when needed and omitted.
    config : HexHostConfig, optional
        Settings; loaded from the environment when omitted.
    """

    def __init__(
        self,
        host: str = "localhost",
        shell: ShellExecutor | None = None,
        *,
        manager: str | PackageManager | None = None,
        platform: str | None = None,
        config: HexHostConfig | None = None,
    ) -> None:
        if config is None:
            from hexhost.kernel.config import load_config

            config = load_config()
        self.host = host
        self.config = config
        self._shell = shell
        self._manager = manager
        self._platform = platform or config.default_platform
        self.cancel_token = CancellationToken()
        self._notifier = Notifier(subject=self)
        self._logger = get_host_logger(host)

    def __repr__(self) -> str:
        return f"Packages(host={self.host!r})"

    @cached_property
    def runner(self) -> CommandRunner:
        from hexhost.drivers.file_system import is_local_host
        from hexhost.drivers.shell import CommandRunner, LocalShell

        shell = self._shell
        if shell is None:
            if not is_local_host(self.host):
                msg = f"host {self.host!r} needs a shell to run commands"
                raise ConfigurationError("packages", msg)
            shell = LocalShell(
                poll_interval=self.config.shell.poll_interval,
                default_timeout=self.config.shell.command_timeout,
            )
        return CommandRunner(shell, self.host, self.config.shell, cancel_token=self.cancel_token)

    @cached_property
    def platform(self) -> str | None:
        if self._platform is not None:
            return self._platform
        kernel = self.runner.output("uname -s")
        return kernel.lower() if kernel else None

    @cached_property
    def manager(self) -> PackageManager:
        from hexhost.drivers.package_managers import default_manager_name, package_manager_for

        if self._manager is not None and not isinstance(self._manager, str):
            return self._manager
        name = self._manager or default_manager_name(self.platform)
        self._logger.debug("Using package manager {name}", name=name)
        return package_manager_for(name, self.runner)

    def cancel(self) -> None:
        """Cancel every running and future package command on this host."""
        self.cancel_token.cancel()

    def __getitem__(self, name: str) -> Package:
        return self.build(name)

    def build(self, name: str) -> Package:
        package = Package(name, self.manager, self.host)
        package.add_observer(self)
        return package

    def list(self) -> CommandResult:
        """Ok(list[Package]) of every installed package."""
        result = self.manager.list_packages()
        if result.failed:
            return result
        return Ok([self.build(name) for name in result.value], rendered=result.rendered)

    @property
    def observers(self) -> tuple[ObserverLike, ...]:
        return self._notifier.observers

    def add_observer(self, observer: ObserverLike) -> None:
        self._notifier.add_observer(observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        self._notifier.remove_observer(observer)

    def update(self, event: ResourceChanged) -> None:
        self._logger.info("{message}", message=event.log_message())
        self._notifier.broadcast(event)


__all__ = ["Package", "Packages"]
