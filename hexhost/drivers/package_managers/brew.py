"""Homebrew package manager driver.

``brew info <name>`` output looks like::

    git: stable 1.8.3.4, HEAD
    http://git-scm.com
    /usr/local/Cellar/git/1.8.3.1 (1324 files, 28M)
      Built from source
    /usr/local/Cellar/git/1.8.3.3 (1326 files, 29M) *
    From: https://github.com/.../git.rb

The first line names the package, its spec and version; the second is the
homepage; each ``Cellar`` line is one installed version, and the one marked
``*`` is linked into the prefix (the current version). A package that is
not installed has a ``Not installed`` line instead of Cellar lines.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner

_HEADER = re.compile(r"^(?P<package>[^:\s]+):\s+(?P<spec>\S+)\s+(?P<version>.+?)\s*$")
_CELLAR = re.compile(r"^\S*/Cellar/[^/\s]+/(?P<version>[^/\s]+)\s+\(", re.MULTILINE)
_LINKED = re.compile(r"^\S*/Cellar/[^/\s]+/(?P<version>[^/\s]+)\s+\(.*\)\s*\*\s*$", re.MULTILINE)
_NOT_INSTALLED = re.compile(r"^Not installed\s*$", re.MULTILINE)


def parse_info(output: str) -> dict[str, str]:
    """The header fields and homepage of ``brew info`` output."""
    lines = [line.strip() for line in output.strip().splitlines()]
    if not lines:
        return {}
    match = _HEADER.match(lines[0])
    if match is None:
        return {}
    info = match.groupdict()
    if len(lines) > 1 and lines[1].startswith(("http://", "https://")):
        info["homepage"] = lines[1]
    return info


def parse_installed_versions(output: str) -> list[str]:
    """Installed versions in the order brew lists them; empty when not installed."""
    if _NOT_INSTALLED.search(output):
        return []
    return _CELLAR.findall(output)


def parse_current_version(output: str) -> str | None:
    """The linked version (Cellar line marked ``*``), else the last one listed."""
    versions = parse_installed_versions(output)
    if not versions:
        return None
    linked = _LINKED.search(output)
    return linked.group("version") if linked else versions[-1]


class BrewPackageManager:
    """:class:`~hexhost.kernel.ports.package_manager.PackageManager` for Homebrew."""

    name = "brew"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def _info_output(self, package: str) -> CommandResult:
        return self.runner.run(f"brew info {self.runner.quote(package)}")

    def install(self, package: str, version: str | None = None) -> CommandResult:
        target = package if version is None else f"{package}@{version}"
        return self.runner.run(f"brew install {self.runner.quote(target)}")

    def remove(self, package: str) -> CommandResult:
        return self.runner.run(f"brew remove {self.runner.quote(package)}")

    def upgrade(self, package: str) -> CommandResult:
        return self.runner.run(f"brew upgrade {self.runner.quote(package)}")

    def is_installed(self, package: str) -> bool:
        result = self._info_output(package)
        return result.succeeded and not _NOT_INSTALLED.search(result.value)

    def info(self, package: str) -> CommandResult:
        result = self._info_output(package)
        if result.failed:
            return result
        parsed = parse_info(result.value)
        if not parsed:
            msg = f"unrecognised brew info output for {package!r}"
            return Failed(msg, rendered=result.rendered)
        return Ok(parsed, rendered=result.rendered)

    def installed_versions(self, package: str) -> list[str]:
        result = self._info_output(package)
        return parse_installed_versions(result.value) if result.succeeded else []

    def current_version(self, package: str) -> str | None:
        result = self._info_output(package)
        return parse_current_version(result.value) if result.succeeded else None

    def list_packages(self) -> CommandResult:
        result = self.runner.run("brew list")
        if result.failed:
            return result
        return Ok(result.value.split(), rendered=result.rendered)


__all__ = [
    "BrewPackageManager",
    "parse_current_version",
    "parse_info",
    "parse_installed_versions",
]
