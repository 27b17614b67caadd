"""Package manager port.

Package managers differ only in command templates and in how they parse
their own text output; the contract is the same for all of them.

Drivers
-------
- ``BrewPackageManager``: Homebrew.
- ``YumPackageManager``: Yum + RPM.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult


@runtime_checkable
class PackageManager(Protocol):
    """Port interface for a host's package manager."""

    name: str

    @abstractmethod
    def install(self, package: str, version: str | None = None) -> CommandResult:
        """Install ``package``, at ``version`` when given."""
        ...

    @abstractmethod
    def remove(self, package: str) -> CommandResult: ...

    @abstractmethod
    def upgrade(self, package: str) -> CommandResult: ...

    @abstractmethod
    def is_installed(self, package: str) -> bool: ...

    @abstractmethod
    def info(self, package: str) -> CommandResult:
        """Ok(dict[str, str]) of the manager's description fields."""
        ...

    @abstractmethod
    def installed_versions(self, package: str) -> list[str]:
        """Installed versions, oldest first; empty when not installed."""
        ...

    @abstractmethod
    def current_version(self, package: str) -> str | None: ...

    @abstractmethod
    def list_packages(self) -> CommandResult:
        """Ok(list[str]) of installed package names."""
        ...


__all__ = ["PackageManager"]
