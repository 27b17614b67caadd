"""Command results shared by every backend.

Every adapter operation that can fail returns either :class:`Ok` or
:class:`Failed`. Both expose the same read surface (``value``,
``exit_status``, ``rendered``, ``succeeded``) so code above the adapters
never branches on which backend produced the result.

Examples
--------
>>> result = Ok("hello\\n", rendered="hello\\n")
>>> result.succeeded
True
>>> failure = Failed(FileNotFoundError("/nope"), exit_status=1)
>>> failure.value
FileNotFoundError('/nope')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hexhost.kernel.exceptions import CommandFailedError


class CommandResult:
    """Common base of :class:`Ok` and :class:`Failed`."""

    __slots__ = ()

    value: Any
    exit_status: int
    rendered: str | None

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0

    @property
    def failed(self) -> bool:
        return not self.succeeded

    @property
    def is_exception(self) -> bool:
        """Whether the value is a caught exception rather than command output."""
        return isinstance(self.value, BaseException)

    @property
    def text(self) -> str:
        """Textual rendering: the raw output when known, else ``str(value)``."""
        if self.rendered is not None:
            return self.rendered
        return "" if self.value is None else str(self.value)

    def unwrap(self) -> Any:
        """Return the value, raising :class:`CommandFailedError` on failure."""
        if self.failed:
            raise CommandFailedError(self.value, self.exit_status)
        return self.value

    def __bool__(self) -> bool:
        return self.succeeded


@dataclass(frozen=True, slots=True)
class Ok(CommandResult):
    """A successful command; ``exit_status`` is always 0."""

    value: Any = None
    rendered: str | None = None
    executed_at: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def exit_status(self) -> int:  # type: ignore[override]
        return 0


@dataclass(frozen=True, slots=True)
class Failed(CommandResult):
    """A failed command carrying the caught error and a non-zero exit status."""

    error: BaseException | str
    exit_status: int = 1
    rendered: str | None = None
    executed_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self) -> None:
        if self.exit_status == 0:
            raise ValueError("Failed results need a non-zero exit status")

    @property
    def value(self) -> BaseException | str:  # type: ignore[override]
        return self.error


__all__ = ["CommandResult", "Failed", "Ok"]
