"""Character and block devices."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.resources.base import FileSystemObject

if TYPE_CHECKING:
    from hexhost.kernel.ports.file_system import DeviceAdapter


class Device(FileSystemObject):
    adapter: DeviceAdapter  # type: ignore[assignment]

    @property
    def major(self) -> int | None:
        return self.adapter.major()

    @property
    def minor(self) -> int | None:
        return self.adapter.minor()


class CharacterDevice(Device):
    kind: ClassVar[ResourceKind] = ResourceKind.CHARACTER_DEVICE


class BlockDevice(Device):
    kind: ClassVar[ResourceKind] = ResourceKind.BLOCK_DEVICE


__all__ = ["BlockDevice", "CharacterDevice", "Device"]
