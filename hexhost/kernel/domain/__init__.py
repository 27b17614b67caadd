"""Domain models for hexhost."""

from hexhost.kernel.domain.command_result import CommandResult, Failed, Ok
from hexhost.kernel.domain.events import ResourceChanged
from hexhost.kernel.domain.resource import (
    CLASSIFICATION_ORDER,
    KIND_ALIASES,
    ResourceDocument,
    ResourceKind,
)
from hexhost.kernel.domain.stat import StatAttributes
from hexhost.kernel.domain.users import GroupRecord, UserRecord

__all__ = [
    "CLASSIFICATION_ORDER",
    "KIND_ALIASES",
    "CommandResult",
    "Failed",
    "GroupRecord",
    "Ok",
    "ResourceChanged",
    "ResourceDocument",
    "ResourceKind",
    "StatAttributes",
    "UserRecord",
]
