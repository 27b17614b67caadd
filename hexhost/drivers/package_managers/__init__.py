"""Package manager drivers and manager selection by name or platform."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hexhost.drivers.package_managers.brew import BrewPackageManager
from hexhost.drivers.package_managers.yum import YumPackageManager
from hexhost.kernel.exceptions import PackageManagerError

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner
    from hexhost.kernel.ports.package_manager import PackageManager

_MANAGERS: dict[str, type[BrewPackageManager] | type[YumPackageManager]] = {
    "brew": BrewPackageManager,
    "homebrew": BrewPackageManager,
    "yum": YumPackageManager,
    "rpm": YumPackageManager,
}


def default_manager_name(platform: str | None) -> str:
    """``brew`` on macOS, ``yum`` everywhere else."""
    return "brew" if (platform or "").lower() in {"darwin", "macos"} else "yum"


def package_manager_for(name: str, runner: CommandRunner) -> PackageManager:
    """Instantiate the driver called ``name``.

    Raises
    ------
    PackageManagerError
        If no driver has that name.
    """
    try:
        manager_class = _MANAGERS[name.strip().lower()]
    except KeyError:
        raise PackageManagerError(runner.host, f"unknown package manager {name!r}") from None
    return manager_class(runner)


__all__ = [
    "BrewPackageManager",
    "YumPackageManager",
    "default_manager_name",
    "package_manager_for",
]
