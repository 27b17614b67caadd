"""User directory read through ``getent`` on a (possibly remote) shell.

``getent passwd`` and ``getent group`` answer from whatever NSS sources
the host is configured with, so this driver also covers hosts whose
accounts live in LDAP or NIS.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.domain.users import GroupRecord, UserRecord
from hexhost.kernel.exceptions import ValidationError

if TYPE_CHECKING:
    from hexhost.drivers.shell.runner import CommandRunner


def parse_passwd_line(line: str) -> UserRecord:
    """Parse ``name:x:uid:gid:gecos:home:shell``."""
    parts = line.strip().split(":")
    if len(parts) < 7:
        raise ValidationError("passwd", "expected 7 colon-separated fields", line)
    name, _, uid, gid, gecos, home, shell = parts[:7]
    return UserRecord(
        name=name,
        uid=int(uid),
        gid=int(gid),
        gecos=gecos or None,
        home=home or None,
        shell=shell or None,
    )


def parse_group_line(line: str) -> GroupRecord:
    """Parse ``name:x:gid:member,member``."""
    parts = line.strip().split(":")
    if len(parts) < 3:
        raise ValidationError("group", "expected 4 colon-separated fields", line)
    members = parts[3] if len(parts) > 3 else ""
    return GroupRecord(
        name=parts[0],
        gid=int(parts[2]),
        members=tuple(member for member in members.split(",") if member),
    )


class GetentUserDirectory:
    """:class:`~hexhost.kernel.ports.user_directory.UserDirectory` over ``getent``."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def user(self, name: str) -> CommandResult:
        result = self.runner.run(f"getent passwd {self.runner.quote(name)}")
        if result.failed:
            return result
        try:
            return Ok(parse_passwd_line(result.value), rendered=result.rendered)
        except (ValidationError, ValueError) as exc:
            return Failed(exc)

    def group(self, name: str) -> CommandResult:
        result = self.runner.run(f"getent group {self.runner.quote(name)}")
        if result.failed:
            return result
        try:
            return Ok(parse_group_line(result.value), rendered=result.rendered)
        except (ValidationError, ValueError) as exc:
            return Failed(exc)

    def user_name(self, uid: int) -> str | None:
        line = self.runner.output(f"getent passwd {int(uid)}")
        return line.split(":", 1)[0] if line else None

    def group_name(self, gid: int) -> str | None:
        line = self.runner.output(f"getent group {int(gid)}")
        return line.split(":", 1)[0] if line else None


__all__ = ["GetentUserDirectory", "parse_group_line", "parse_passwd_line"]
