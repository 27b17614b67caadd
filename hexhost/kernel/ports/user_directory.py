"""User directory port: where user and group records come from.

Only the contract and the two plain Unix drivers (``pwd``/``grp`` locally,
``getent`` over a shell) ship with hexhost. Directory services such as
LDAP or OpenDirectory plug in by implementing this protocol.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult


@runtime_checkable
class UserDirectory(Protocol):
    """Port interface for looking up users and groups."""

    @abstractmethod
    def user(self, name: str) -> CommandResult:
        """Ok(UserRecord) or Failed when the user is unknown."""
        ...

    @abstractmethod
    def group(self, name: str) -> CommandResult:
        """Ok(GroupRecord) or Failed when the group is unknown."""
        ...

    @abstractmethod
    def user_name(self, uid: int) -> str | None:
        """Resolve a numeric user id to a name."""
        ...

    @abstractmethod
    def group_name(self, gid: int) -> str | None:
        """Resolve a numeric group id to a name."""
        ...


__all__ = ["UserDirectory"]
