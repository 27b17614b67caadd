"""Observer port: what resources notify when their state changes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from hexhost.kernel.domain.events import ResourceChanged

# Plain callables are accepted wherever an Observer is
ObserverFunc = Callable[[ResourceChanged], None]


@runtime_checkable
class Observer(Protocol):
    """Protocol for objects that watch resources.

    ``update`` runs synchronously on the thread that performed the change.
    It must not mutate the emitting resource, and any exception it raises
    reaches the caller of the mutating operation.
    """

    def update(self, event: ResourceChanged) -> None:
        """Handle a change event."""
        ...


__all__ = ["Observer", "ObserverFunc"]
