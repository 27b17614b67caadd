"""Typed resources and the closed kind → class table."""

from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.resources.base import FileSystemObject
from hexhost.kernel.resources.device import BlockDevice, CharacterDevice, Device
from hexhost.kernel.resources.directory import Directory
from hexhost.kernel.resources.file import File
from hexhost.kernel.resources.symbolic_link import SymbolicLink

Resource = File | Directory | SymbolicLink | CharacterDevice | BlockDevice | FileSystemObject


def resource_class(kind: ResourceKind) -> type[FileSystemObject]:
    """The resource class for ``kind``."""
    match kind:
        case ResourceKind.FILE:
            return File
        case ResourceKind.DIRECTORY:
            return Directory
        case ResourceKind.SYMBOLIC_LINK:
            return SymbolicLink
        case ResourceKind.CHARACTER_DEVICE:
            return CharacterDevice
        case ResourceKind.BLOCK_DEVICE:
            return BlockDevice
        case ResourceKind.OBJECT:
            return FileSystemObject
    raise AssertionError(f"unhandled resource kind {kind!r}")


__all__ = [
    "BlockDevice",
    "CharacterDevice",
    "Device",
    "Directory",
    "File",
    "FileSystemObject",
    "Resource",
    "SymbolicLink",
    "resource_class",
]
