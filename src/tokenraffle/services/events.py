"""Event log — ordered record of raffle events with subscriber callbacks.

Events are emitted after the operation that produced them has committed.
Subscribers are for observability only; one that raises is logged and
skipped, and the committed operation stands.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from tokenraffle.core.constants import EVENT_NAMES
from tokenraffle.schemas.events import RaffleEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[RaffleEvent], None]


class EventLog:
    def __init__(self) -> None:
        self._events: list[RaffleEvent] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    @property
    def events(self) -> tuple[RaffleEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def of_type(self, name: str) -> list[RaffleEvent]:
        """Return emitted events whose ``name`` matches, in emit order."""
        if name not in EVENT_NAMES:
            raise ValueError(f"Unknown event name: {name}. Allowed: {EVENT_NAMES}")
        return [e for e in self.events if e.name == name]

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def emit(self, event: RaffleEvent) -> None:
        with self._lock:
            self._events.append(event)
            subscribers = list(self._subscribers)

        logger.debug("Event %s emitted: %s", event.name, event.model_dump())

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.warning(
                    "Subscriber %r failed on %s event", callback, event.name, exc_info=True
                )
