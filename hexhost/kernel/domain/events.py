"""Event data classes delivered to resource observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ResourceChanged:
    """A tracked attribute of ``subject`` changed from ``old`` to ``new``.

    Attributes
    ----------
    subject : Any
        The resource (or manager) whose state changed.
    attribute : str
        Name of the changed attribute (``mode``, ``owner``, ``exists`` ...).
    old, new : Any
        Values before and after the change.
    """

    subject: Any
    attribute: str
    old: Any
    new: Any
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def log_message(self) -> str:
        """Get a formatted log message for this event."""
        label = getattr(self.subject, "path", None) or getattr(self.subject, "name", None)
        label = label or type(self.subject).__name__
        return f"{label}: {self.attribute} changed {self.old!r} -> {self.new!r}"


__all__ = ["ResourceChanged"]
