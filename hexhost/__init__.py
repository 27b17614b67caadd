"""hexhost: observable resources on local and remote hosts.

Files, directories, links, devices and packages are typed objects whether
they live on this machine or behind a shell on another host. Mutations are
idempotent and notify observers only when state really changed.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("hexhost")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from hexhost.kernel import (
    NO_CHANGE,
    CommandResult,
    Directory,
    Failed,
    File,
    FileSystem,
    FileSystemObject,
    Ok,
    Package,
    Packages,
    ResourceChanged,
    ResourceKind,
    SymbolicLink,
    change_if,
)

__all__ = [
    "NO_CHANGE",
    "CommandResult",
    "Directory",
    "Failed",
    "File",
    "FileSystem",
    "FileSystemObject",
    "Ok",
    "Package",
    "Packages",
    "ResourceChanged",
    "ResourceKind",
    "SymbolicLink",
    "__version__",
    "change_if",
]
