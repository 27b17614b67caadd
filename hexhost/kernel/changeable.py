"""Change-tracking discipline.

:func:`change_if` runs a mutating action only when at least one criterion
says the state would actually change. Criteria are ordered from cheapest to
most expensive and evaluated lazily, so an expensive comparison (reading a
remote file's contents) never runs once a cheap one (the file does not
exist) has already proved a difference.

Examples
--------
>>> change_if(False, lambda: "ran")
NO_CHANGE
>>> change_if([lambda: False, lambda: True], lambda: "ran")
'ran'
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Final, TypeVar

from hexhost.kernel.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Criterion = Callable[[], bool]


class _NoChange(Enum):
    NO_CHANGE = "NO_CHANGE"

    def __repr__(self) -> str:
        return "NO_CHANGE"

    def __bool__(self) -> bool:
        return False


NO_CHANGE: Final = _NoChange.NO_CHANGE
"""Returned by :func:`change_if` when the action was not needed."""

NoChange = _NoChange


def change_needed(criteria: bool | Iterable[Criterion]) -> bool:
    """Evaluate criteria left to right, stopping at the first true one."""
    if isinstance(criteria, bool):
        return criteria
    return any(criterion() for criterion in criteria)


def change_if(criteria: bool | Iterable[Criterion], action: Callable[[], T]) -> T | _NoChange:
    """Run ``action`` only if a change is needed.

    Parameters
    ----------
    criteria : bool | Iterable[Callable[[], bool]]
        A precomputed answer, or zero-argument callables each describing an
        independent reason a change is needed.
    action : Callable[[], T]
        The mutation. Its result is returned untouched.

    Returns
    -------
    T | NoChange
        The action's result, or :data:`NO_CHANGE` when no criterion held.
    """
    if not change_needed(criteria):
        logger.trace(
            "No change needed; skipping {action}", action=getattr(action, "__name__", action)
        )
        return NO_CHANGE
    return action()


__all__ = ["NO_CHANGE", "Criterion", "NoChange", "change_if", "change_needed"]
