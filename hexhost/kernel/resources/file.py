"""Regular files.

Observed attributes (in addition to the base ones): ``contents`` and
``size``. ``copy_to`` and ``hard_link_from`` report ``exists`` on the
resource they create.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, ClassVar

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.resources.base import FileSystemObject

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.ports.file_system import FileAdapter


class File(FileSystemObject):
    """A regular file on a host."""

    kind: ClassVar[ResourceKind] = ResourceKind.FILE

    adapter: FileAdapter  # type: ignore[assignment]

    @property
    def contents(self) -> str | None:
        """Whole content, or None when it cannot be read."""
        result = self.read()
        return result.value if result.succeeded else None

    def read(self, length: int | None = None, offset: int = 0) -> CommandResult:
        return self.adapter.read(length, offset)

    def readlines(self) -> CommandResult:
        return self.adapter.readlines()

    def each_line(self) -> Iterator[str]:
        result = self.readlines()
        if result.succeeded:
            yield from result.value

    def create(self) -> CommandResult | NoChange:
        """Create an empty file unless one is already there."""
        return change_if(
            not self.exists(),
            lambda: self.notify_about("exists", old=False, new=True, mutation=self.adapter.create),
        )

    def write(self, content: str) -> CommandResult | NoChange:
        """Replace the content if it differs from ``content``."""
        old = self.contents
        return change_if(
            [lambda: old is None, lambda: old != content],
            lambda: self.notify_about(
                "contents", old=old, new=content, mutation=lambda: self.adapter.write(content)
            ),
        )

    def append(self, content: str) -> CommandResult | NoChange:
        old_size = self.size
        return change_if(
            bool(content),
            lambda: self.notify_about(
                "size",
                old=old_size,
                new=lambda: self.size,
                mutation=lambda: self.adapter.append(content),
            ),
        )

    def copy_to(self, destination: str) -> CommandResult | NoChange:
        """Copy to ``destination`` unless an identical copy is already there.

        A new copy reports ``exists``; overwriting a different one reports
        ``contents``.
        """
        the_copy = self._sibling(File, destination)
        criteria = [
            lambda: not the_copy.exists(),
            lambda: the_copy.size != self.size,
            lambda: the_copy.contents != self.contents,
        ]

        def mutation() -> CommandResult:
            return self.adapter.copy(the_copy.path)

        def copy() -> CommandResult:
            if not the_copy.exists():
                return the_copy.notify_about("exists", old=False, new=True, mutation=mutation)
            return the_copy.notify_about(
                "contents", old=the_copy.contents, new=lambda: the_copy.contents, mutation=mutation
            )

        return change_if(criteria, copy)

    def hard_link_from(self, new_path: str) -> CommandResult | NoChange:
        """Create a hard link to this file at ``new_path`` if nothing is there."""
        new_link = self._sibling(File, new_path)
        return change_if(
            [lambda: not new_link.exists()],
            lambda: new_link.notify_about(
                "exists", old=False, new=True, mutation=lambda: self.adapter.link(new_link.path)
            ),
        )

    link = hard_link_from


__all__ = ["File"]
