"""Symbolic links.

Observed attribute: ``target``; creating a link from nothing reports
``target`` going from ``None`` to the new target.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from hexhost.kernel.changeable import NoChange, change_if
from hexhost.kernel.domain.resource import ResourceKind
from hexhost.kernel.resources.base import FileSystemObject

if TYPE_CHECKING:
    from hexhost.kernel.domain.command_result import CommandResult
    from hexhost.kernel.ports.file_system import SymbolicLinkAdapter


class SymbolicLink(FileSystemObject):
    """A symbolic link on a host."""

    kind: ClassVar[ResourceKind] = ResourceKind.SYMBOLIC_LINK

    adapter: SymbolicLinkAdapter  # type: ignore[assignment]

    @property
    def target(self) -> str | None:
        return self.adapter.target()

    def link_to(self, target: str) -> CommandResult | NoChange:
        """Point this path at ``target`` unless a link to it is already there.

        An existing link to somewhere else is left alone and reported as a
        failure by the adapter, the same way ``ln -s`` refuses.
        """
        current = self.target
        return change_if(
            [lambda: not self.exists(), lambda: current != target],
            lambda: self.notify_about(
                "target", old=current, new=target, mutation=lambda: self.adapter.link_to(target)
            ),
        )


__all__ = ["SymbolicLink"]
