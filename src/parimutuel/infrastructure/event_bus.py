"""Synchronous delivery of market events.

``Market`` publishes one ``DomainEvent`` per committed transition.  The bus
hands it to subscribers in-process; ``EventStore`` is the subscriber that keeps
the audit trail the simulator reports on.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence

from parimutuel.domain.events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


# ===================================================================== #
#  Event Bus                                                             #
# ===================================================================== #

class EventBus:
    """Routes each published event to catch-all and per-type subscribers.

    Catch-all subscribers run before typed ones, each group in the order it
    subscribed.  An exception from a subscriber is logged and swallowed: the
    market transition behind the event has already committed.
    """

    def __init__(self) -> None:
        self._by_type: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        self._by_type[event_type].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        self._catch_all.append(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = [*self._catch_all, *self._by_type.get(type(event), ())]
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Subscriber %r failed on %s from %s",
                    handler, type(event).__name__, event.source_id,
                )


# ===================================================================== #
#  Event Store                                                           #
# ===================================================================== #

class EventStore:
    """Append-only audit trail, optionally capped to the newest events.

    Usage::

        store = EventStore()
        bus.subscribe_all(store.append)
    """

    def __init__(self, max_size: int = 0) -> None:
        self._events: list[DomainEvent] = []
        self._max_size = max_size  # 0 keeps everything

    def append(self, event: DomainEvent) -> None:
        self._events.append(event)
        if self._max_size and len(self._events) > self._max_size:
            del self._events[: len(self._events) - self._max_size]

    def query(
        self,
        event_type: type[DomainEvent] | None = None,
        source_id: str | None = None,
        limit: int = 0,
    ) -> Sequence[DomainEvent]:
        """Events matching *event_type* and *source_id*, oldest first.

        A positive *limit* keeps only the newest matches.
        """
        matches = [
            e for e in self._events
            if (event_type is None or isinstance(e, event_type))
            and (source_id is None or e.source_id == source_id)
        ]
        return matches[-limit:] if limit > 0 else matches

    @property
    def latest(self) -> DomainEvent | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)
