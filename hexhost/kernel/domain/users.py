"""User and group records returned by user-directory adapters."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """An account as seen by the host's user directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    uid: int
    gid: int
    home: str | None = None
    shell: str | None = None
    gecos: str | None = None


class GroupRecord(BaseModel):
    """A group and its explicit members."""

    model_config = ConfigDict(frozen=True)

    name: str
    gid: int
    members: tuple[str, ...] = Field(default_factory=tuple)


__all__ = ["GroupRecord", "UserRecord"]
