"""Typed stat attributes, normalised from any backend.

A :class:`StatAttributes` is an immutable snapshot. Fields that could not be
determined from the raw source are ``None`` rather than guessed.
"""

from __future__ import annotations

import os
import stat as stat_module
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict

from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.exceptions import ValidationError


def kind_from_mode(mode: int | None) -> ResourceKind:
    """Map the file-type bits of an ``st_mode`` to a :class:`ResourceKind`."""
    if mode is None:
        return ResourceKind.OBJECT
    if stat_module.S_ISREG(mode):
        return ResourceKind.FILE
    if stat_module.S_ISDIR(mode):
        return ResourceKind.DIRECTORY
    if stat_module.S_ISLNK(mode):
        return ResourceKind.SYMBOLIC_LINK
    if stat_module.S_ISCHR(mode):
        return ResourceKind.CHARACTER_DEVICE
    if stat_module.S_ISBLK(mode):
        return ResourceKind.BLOCK_DEVICE
    return ResourceKind.OBJECT


def octal_digits(mode: int) -> int:
    """Render permission bits as their octal digits read in decimal (``0o644 -> 644``)."""
    return int(format(stat_module.S_IMODE(mode), "o"))


def hex_device(number: int) -> str:
    """Render a device number the way system tools do (``0x...``)."""
    return f"0x{number:x}"


def mode_bits(mode: int | str) -> int:
    """Interpret ``755`` (or ``"0755"``) as the permission bits ``0o755``."""
    try:
        bits = int(str(mode), 8)
    except ValueError as exc:
        raise ValidationError("mode", "must be octal digits", mode) from exc
    if not 0 <= bits <= 0o7777:
        raise ValidationError("mode", "must be between 0 and 7777", mode)
    return bits


class StatAttributes(BaseModel):
    """Metadata snapshot of a file-system resource.

    Attributes
    ----------
    kind : ResourceKind
        Kind derived from the file-type bits of ``mode``.
    mode : int | None
        Full ``st_mode`` (type and permission bits).
    inode : int | None
        Inode number.
    owner_id, group_id : int | None
        Numeric owner and group.
    device : str | None
        Device containing the resource, ``0x``-prefixed hexadecimal.
    special_device : str | None
        Device number for character/block devices, ``0x``-prefixed.
    size : int | None
        Size in bytes.
    block_size, block_count : int | None
        Preferred I/O block size and allocated block count.
    link_count : int | None
        Number of hard links.
    access_time, modify_time, change_time : datetime | None
        Timestamps (UTC).
    birth_time : datetime | None
        Creation time; only BSD-family systems report it.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind = ResourceKind.OBJECT
    mode: int | None = None
    inode: int | None = None
    owner_id: int | None = None
    group_id: int | None = None
    device: str | None = None
    special_device: str | None = None
    size: int | None = None
    block_size: int | None = None
    block_count: int | None = None
    link_count: int | None = None
    access_time: datetime | None = None
    modify_time: datetime | None = None
    change_time: datetime | None = None
    birth_time: datetime | None = None

    @property
    def permissions(self) -> int | None:
        """Permission bits as octal digits (``644``), or None when unknown."""
        return None if self.mode is None else octal_digits(self.mode)

    @classmethod
    def from_os_stat(cls, result: os.stat_result) -> StatAttributes:
        """Build attributes from an ``os.stat``/``os.lstat`` result."""
        birth = getattr(result, "st_birthtime", None)
        return cls(
            kind=kind_from_mode(result.st_mode),
            mode=result.st_mode,
            inode=result.st_ino,
            owner_id=result.st_uid,
            group_id=result.st_gid,
            device=hex_device(result.st_dev),
            special_device=hex_device(getattr(result, "st_rdev", 0)),
            size=result.st_size,
            block_size=getattr(result, "st_blksize", None),
            block_count=getattr(result, "st_blocks", None),
            link_count=result.st_nlink,
            access_time=datetime.fromtimestamp(result.st_atime, tz=UTC),
            modify_time=datetime.fromtimestamp(result.st_mtime, tz=UTC),
            change_time=datetime.fromtimestamp(result.st_ctime, tz=UTC),
            birth_time=datetime.fromtimestamp(birth, tz=UTC) if birth is not None else None,
        )


__all__ = ["StatAttributes", "hex_device", "kind_from_mode", "mode_bits", "octal_digits"]
