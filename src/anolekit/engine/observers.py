"""Observer protocol and EventBus for the lesson runner.

Sections compute and record transcript lines; observers decide what to do
with them (print, log, collect in tests). Delivery is synchronous and in
subscription order. An observer that raises is logged and skipped so one
broken printer cannot abort a lesson.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Protocol, runtime_checkable

from anolekit.engine.events import Event

logger = logging.getLogger(__name__)


@runtime_checkable
class Observer(Protocol):
    """Anything with an ``on_event(event)`` method.

    Example::

        class Collector:
            def __init__(self) -> None:
                self.events = []

            def on_event(self, event: Event) -> None:
                self.events.append(event)
    """

    def on_event(self, event: Event) -> None:
        """Receive a dispatched event."""
        ...


class EventBus:
    """Typed synchronous dispatcher.

    An observer subscribed to an event class receives that class and all of
    its subclasses; subscribing to :class:`Event` receives everything. Each
    observer gets a given event at most once, exact-type subscribers first.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[type[Event], list[Observer]] = defaultdict(list)

    def subscribe(self, event_type: type[Event], observer: Observer) -> None:
        self._subscriptions[event_type].append(observer)

    def unsubscribe(self, event_type: type[Event], observer: Observer) -> None:
        """Remove *observer* from *event_type*; no-op if not subscribed."""
        observers = self._subscriptions.get(event_type)
        if observers and observer in observers:
            observers.remove(observer)

    def _recipients(self, event_type: type[Event]) -> list[Observer]:
        """Observers for *event_type*, nearest subscription first, each once."""
        chain = [
            cls
            for cls in event_type.__mro__
            if isinstance(cls, type) and issubclass(cls, Event)
        ]
        unique: dict[int, Observer] = {}
        for cls in chain:
            for observer in self._subscriptions.get(cls, ()):
                unique.setdefault(id(observer), observer)
        return list(unique.values())

    def emit(self, event: Event) -> None:
        """Deliver *event* to every matching observer."""
        for observer in self._recipients(type(event)):
            try:
                observer.on_event(event)
            except Exception:
                logger.warning(
                    "Observer %r failed on %s; continuing",
                    observer,
                    type(event).__name__,
                    exc_info=True,
                )


__all__ = ["EventBus", "Observer"]
