"""User directory backed by this machine's ``pwd`` and ``grp`` databases."""

from __future__ import annotations

import grp
import pwd

from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.domain.users import GroupRecord, UserRecord


class LocalUserDirectory:
    """:class:`~hexhost.kernel.ports.user_directory.UserDirectory` for localhost."""

    def user(self, name: str) -> CommandResult:
        try:
            entry = pwd.getpwnam(name)
        except KeyError as exc:
            return Failed(exc, exit_status=2)
        return Ok(
            UserRecord(
                name=entry.pw_name,
                uid=entry.pw_uid,
                gid=entry.pw_gid,
                home=entry.pw_dir,
                shell=entry.pw_shell,
                gecos=entry.pw_gecos or None,
            )
        )

    def group(self, name: str) -> CommandResult:
        try:
            entry = grp.getgrnam(name)
        except KeyError as exc:
            return Failed(exc, exit_status=2)
        return Ok(GroupRecord(name=entry.gr_name, gid=entry.gr_gid, members=tuple(entry.gr_mem)))

    def user_name(self, uid: int) -> str | None:
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return None

    def group_name(self, gid: int) -> str | None:
        try:
            return grp.getgrgid(gid).gr_name
        except KeyError:
            return None


__all__ = ["LocalUserDirectory"]
