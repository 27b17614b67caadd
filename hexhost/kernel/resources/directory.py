"""Directories."""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from typing import TYPE_CHECKING, ClassVar

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.resources.base import FileSystemObject

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.ports.file_system import DirectoryAdapter


class Directory(FileSystemObject):
    """A directory on a host."""

    kind: ClassVar[ResourceKind] = ResourceKind.DIRECTORY

    adapter: DirectoryAdapter  # type: ignore[assignment]

    def entries(self) -> CommandResult:
        """Ok(list[str]) of entry names, without ``.`` and ``..``."""
        return self.adapter.entries()

    def __iter__(self) -> Iterator[str]:
        result = self.entries()
        if result.succeeded:
            for name in result.value:
                yield posixpath.join(self.path, name)

    def create(self) -> CommandResult | NoChange:
        """Create the directory, and missing parents, unless it exists."""
        return change_if(
            not self.exists(),
            lambda: self.notify_about("exists", old=False, new=True, mutation=self.adapter.create),
        )

    mkdir = create


__all__ = ["Directory"]
