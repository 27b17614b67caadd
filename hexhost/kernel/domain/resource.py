"""Resource kinds and the persisted representation of a resource."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ResourceKind(StrEnum):
    """Closed set of resource kinds a path can classify as."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMBOLIC_LINK = "symbolic_link"
    CHARACTER_DEVICE = "character_device"
    BLOCK_DEVICE = "block_device"
    OBJECT = "object"


# Accepted spellings for explicit kind hints
KIND_ALIASES: dict[str, ResourceKind] = {
    "file": ResourceKind.FILE,
    "dir": ResourceKind.DIRECTORY,
    "directory": ResourceKind.DIRECTORY,
    "symbolic_link": ResourceKind.SYMBOLIC_LINK,
    "symlink": ResourceKind.SYMBOLIC_LINK,
    "link": ResourceKind.SYMBOLIC_LINK,
    "character_device": ResourceKind.CHARACTER_DEVICE,
    "chardev": ResourceKind.CHARACTER_DEVICE,
    "block_device": ResourceKind.BLOCK_DEVICE,
    "blockdev": ResourceKind.BLOCK_DEVICE,
    "object": ResourceKind.OBJECT,
}

# Probe order used when classifying a path; first positive probe wins.
CLASSIFICATION_ORDER: tuple[ResourceKind, ...] = (
    ResourceKind.FILE,
    ResourceKind.DIRECTORY,
    ResourceKind.SYMBOLIC_LINK,
    ResourceKind.CHARACTER_DEVICE,
    ResourceKind.BLOCK_DEVICE,
)


class ResourceDocument(BaseModel):
    """Serialized form of a resource.

    Only identity is kept; loading a document performs no I/O.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ResourceKind
    path: str
    host: str


__all__ = ["CLASSIFICATION_ORDER", "KIND_ALIASES", "ResourceDocument", "ResourceKind"]
