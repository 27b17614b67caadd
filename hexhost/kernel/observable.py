"""Observable notification for resources and managers.

A :class:`Notifier` owns an ordered observer list. Mutating operations go
through :meth:`Notifier.notify_about`, which runs the mutation and tells
observers about it only when it succeeded *and* the tracked value really
changed. Delivery is synchronous, in registration order, on the calling
thread; an observer exception propagates to the caller.

Examples
--------
>>> seen = []
>>> notifier = Notifier(subject="demo")
>>> notifier.add_observer(seen.append)
>>> result = notifier.notify_about("demo", "mode", old=644, new=755, mutation=Ok)
>>> seen[0].attribute
'mode'
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from hexhost.kernel.domain.command_result import CommandResult
from hexhost.kernel.domain.events import ResourceChanged
from hexhost.kernel.logging import get_logger
from hexhost.kernel.ports.observer import Observer, ObserverFunc

logger = get_logger(__name__)

ObserverLike = Observer | ObserverFunc


def _success(result: Any) -> bool:
    if isinstance(result, CommandResult):
        return result.succeeded
    return result is not None and result is not False


def _deliver(observer: ObserverLike, event: ResourceChanged) -> None:
    update = getattr(observer, "update", None)
    if callable(update):
        update(event)
    else:
        observer(event)  # type: ignore[operator]


class Notifier:
    """Observer registry plus the mutate-then-notify discipline.

    Parameters
    ----------
    subject : Any, optional
        Default subject for events when ``notify_about`` is not given one.
    observers : Iterable[Observer | Callable], optional
        Initial observers, in delivery order.
    """

    __slots__ = ("_observers", "subject")

    def __init__(self, subject: Any = None, observers: Iterable[ObserverLike] = ()) -> None:
        self.subject = subject
        self._observers: list[ObserverLike] = []
        for observer in observers:
            self.add_observer(observer)

    @property
    def observers(self) -> tuple[ObserverLike, ...]:
        return tuple(self._observers)

    def add_observer(self, observer: ObserverLike) -> None:
        """Register ``observer``; registering the same one twice is a no-op."""
        if not (isinstance(observer, Observer) or callable(observer)):
            raise TypeError(f"{observer!r} is neither an Observer nor callable")
        if any(existing is observer for existing in self._observers):
            return
        self._observers.append(observer)

    def remove_observer(self, observer: ObserverLike) -> None:
        self._observers = [existing for existing in self._observers if existing is not observer]

    def clear_observers(self) -> None:
        self._observers.clear()

    def changed(self, attribute: str, old: Any, new: Any, subject: Any = None) -> ResourceChanged:
        """Broadcast a change that has already happened."""
        event = ResourceChanged(
            subject=self.subject if subject is None else subject,
            attribute=attribute,
            old=old,
            new=new,
        )
        self.broadcast(event)
        return event

    def broadcast(self, event: ResourceChanged) -> None:
        """Deliver ``event`` to every observer in registration order."""
        logger.debug("{message}", message=event.log_message())
        for observer in tuple(self._observers):
            _deliver(observer, event)

    def notify_about(
        self,
        subject: Any,
        attribute: str,
        *,
        old: Any,
        new: Any,
        mutation: Callable[[], Any],
    ) -> Any:
        """Run ``mutation``; notify observers if it worked and the value moved.

        Args
        ----
            subject: Resource the event is about.
            attribute: Name of the tracked attribute.
            old: Value before the mutation.
            new: Value after it, or a zero-argument callable that reads the
                value once the mutation has run.
            mutation: The state-changing operation. A
                :class:`CommandResult` counts as success when it succeeded;
                any other non-None result counts as success.

        Returns
        -------
            Whatever ``mutation`` returned.
        """
        result = mutation()
        if not _success(result):
            logger.debug(
                "Not notifying about {attribute}: mutation failed ({result})",
                attribute=attribute,
                result=result,
            )
            return result

        current = new() if callable(new) else new
        if old == current:
            return result

        self.changed(attribute, old, current, subject=subject)
        return result


__all__ = ["Notifier", "ObserverLike"]
