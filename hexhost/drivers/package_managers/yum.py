"""Yum + RPM package manager driver.

``yum info <name>`` prints ``Key : value`` lines; a line with an empty key
continues the previous value (long descriptions wrap this way). Installed
versions come from ``rpm -qa <name>``, whose lines look like
``<name>-<version>-<release>.<arch>``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.exceptions import RemoteCommandError

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner

_INFO_LINE = re.compile(r"^(?P<key>[^:]*?)\s*:\s(?P<value>.*)$")
_UPGRADE_REFUSALS = ("No Packages marked for Update", "available, but not installed")


def _info_key(raw: str) -> str:
    return re.sub(r"\W+", "_", raw.strip().lower()).strip("_")


def parse_info(output: str) -> dict[str, str]:
    """``yum info`` output as a mapping of lower-cased keys to values."""
    info: dict[str, str] = {}
    last_key: str | None = None
    for line in output.splitlines():
        match = _INFO_LINE.match(line)
        if match is None:
            continue
        key, value = match.group("key").strip(), match.group("value").strip()
        if key:
            last_key = _info_key(key)
            info[last_key] = value
        elif last_key is not None:
            info[last_key] = f"{info[last_key]} {value}".strip()
    return info


def parse_rpm_versions(output: str, package: str) -> list[str]:
    """Versions of ``package`` in ``rpm -qa`` output, in listed order."""
    pattern = re.compile(rf"^{re.escape(package)}-(\d\S*)", re.MULTILINE)
    return pattern.findall(output)


class YumPackageManager:
    """:class:`~hexhost.kernel.ports.package_manager.PackageManager` for Yum and RPM."""

    name = "yum"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def install(self, package: str, version: str | None = None) -> CommandResult:
        target = package if version is None else f"{package}-{version}"
        return self.runner.run(f"yum install -y {self.runner.quote(target)}")

    def remove(self, package: str) -> CommandResult:
        return self.runner.run(f"yum remove -y {self.runner.quote(package)}")

    def upgrade(self, package: str) -> CommandResult:
        """``yum upgrade``; a refusal in the output counts as failure even on exit 0."""
        command = f"yum upgrade -y {self.runner.quote(package)}"
        result = self.runner.run(command)
        if result.succeeded and any(refusal in result.value for refusal in _UPGRADE_REFUSALS):
            return Failed(RemoteCommandError(command, 1, result.value), rendered=result.rendered)
        return result

    def is_installed(self, package: str) -> bool:
        return self.runner.execute(f"rpm -q {self.runner.quote(package)}").exit_status == 0

    def info(self, package: str) -> CommandResult:
        result = self.runner.run(f"yum info {self.runner.quote(package)}")
        if result.failed:
            return result
        return Ok(parse_info(result.value), rendered=result.rendered)

    def installed_versions(self, package: str) -> list[str]:
        result = self.runner.run(f"rpm -qa {self.runner.quote(package)}")
        return parse_rpm_versions(result.value, package) if result.succeeded else []

    def current_version(self, package: str) -> str | None:
        versions = self.installed_versions(package)
        return versions[-1] if versions else None

    def at_latest_version(self, package: str) -> bool | None:
        """Whether no update is pending; None when yum cannot tell."""
        quoted = self.runner.quote(package)
        updates = self.runner.execute(f"yum list updates {quoted}").stdout
        if "No matching Packages to list" in updates:
            listing = self.runner.execute(f"yum info {quoted}").stdout
            if "Available Packages" in listing:
                return False
            if "Installed Packages" in listing:
                return True
            return None
        if "updates" in updates:
            return False
        return None

    def list_packages(self) -> CommandResult:
        result = self.runner.run("rpm -qa --qf '%{NAME}\\n'")
        if result.failed:
            return result
        return Ok(sorted(set(result.value.split())), rendered=result.rendered)


__all__ = ["YumPackageManager", "parse_info", "parse_rpm_versions"]
