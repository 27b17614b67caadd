"""Port interfaces for hexhost.

Ports are Protocols; drivers under :mod:`hexhost.drivers` implement them.
"""

from hexhost.kernel.ports.file_system import (
    DeviceAdapter,
    DirectoryAdapter,
    FileAdapter,
    FileSystemBackend,
    ObjectAdapter,
    Probe,
    SymbolicLinkAdapter,
)
from hexhost.kernel.ports.observer import Observer, ObserverFunc
from hexhost.kernel.ports.package_manager import PackageManager
from hexhost.kernel.ports.shell import CancellationToken, ShellExecutor, ShellOutput
from hexhost.kernel.ports.user_directory import UserDirectory

__all__ = [
    "CancellationToken",
    "DeviceAdapter",
    "DirectoryAdapter",
    "FileAdapter",
    "FileSystemBackend",
    "ObjectAdapter",
    "Observer",
    "ObserverFunc",
    "PackageManager",
    "Probe",
    "ShellExecutor",
    "ShellOutput",
    "SymbolicLinkAdapter",
    "UserDirectory",
]
