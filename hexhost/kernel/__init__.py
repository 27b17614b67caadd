"""hexhost kernel: the public API.

Callers (``hexhost.cli`` and applications) import from ``hexhost.kernel``;
kernel and driver modules import from the submodules directly.

The exports are grouped by category:
- Managers (file system, packages)
- Resources
- Domain types
- Disciplines (change tracking, notification)
- Stat parsing
- Port protocols
- Configuration
- Exceptions
- Logging
"""

from hexhost.kernel.changeable import NO_CHANGE, NoChange, change_if
from hexhost.kernel.config import (
    HexHostConfig,
    LoggingConfig,
    ShellConfig,
    get_default_config,
    load_config,
)
from hexhost.kernel.context import HostSession
from hexhost.kernel.domain import (
    CommandResult,
    Failed,
    GroupRecord,
    Ok,
    ResourceChanged,
    ResourceDocument,
    ResourceKind,
    StatAttributes,
    UserRecord,
)
from hexhost.kernel.exceptions import (
    CommandCancelledError,
    CommandFailedError,
    CommandTimeoutError,
    ConfigurationError,
    HexHostError,
    PackageManagerError,
    RemoteCommandError,
    ShellError,
    UnknownResourceKindError,
    ValidationError,
)
from hexhost.kernel.file_system import FileSystem, resolve_kind
from hexhost.kernel.logging import configure_logging, get_logger
from hexhost.kernel.observable import Notifier
from hexhost.kernel.packages import Package, Packages
from hexhost.kernel.ports import (
    CancellationToken,
    FileSystemBackend,
    Observer,
    PackageManager,
    Probe,
    ShellExecutor,
    ShellOutput,
    UserDirectory,
)
from hexhost.kernel.resources import (
    BlockDevice,
    CharacterDevice,
    Directory,
    File,
    FileSystemObject,
    Resource,
    SymbolicLink,
)
from hexhost.kernel.serialization import dump_resource, load_document
from hexhost.kernel.stat_parser import layout_for, mode_to_i, parse_stat

__all__ = [
    # Managers
    "FileSystem",
    "Package",
    "Packages",
    "resolve_kind",
    # Resources
    "BlockDevice",
    "CharacterDevice",
    "Directory",
    "File",
    "FileSystemObject",
    "Resource",
    "SymbolicLink",
    # Domain types
    "CommandResult",
    "Failed",
    "GroupRecord",
    "HostSession",
    "Ok",
    "ResourceChanged",
    "ResourceDocument",
    "ResourceKind",
    "StatAttributes",
    "UserRecord",
    # Disciplines
    "NO_CHANGE",
    "NoChange",
    "Notifier",
    "change_if",
    # Stat parsing
    "layout_for",
    "mode_to_i",
    "parse_stat",
    # Persistence
    "dump_resource",
    "load_document",
    # Ports
    "CancellationToken",
    "FileSystemBackend",
    "Observer",
    "PackageManager",
    "Probe",
    "ShellExecutor",
    "ShellOutput",
    "UserDirectory",
    # Configuration
    "HexHostConfig",
    "LoggingConfig",
    "ShellConfig",
    "get_default_config",
    "load_config",
    # Exceptions
    "CommandCancelledError",
    "CommandFailedError",
    "CommandTimeoutError",
    "ConfigurationError",
    "HexHostError",
    "PackageManagerError",
    "RemoteCommandError",
    "ShellError",
    "UnknownResourceKindError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
]
