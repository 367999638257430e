"""Event bus: routes monitor events to registered handlers.

Handlers are registered per ``EventKind`` or as catch-alls.  Every
published event is fanned out to all matching handlers in registration
order.  A failing handler is logged and does not block the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from delegatewatch.models.events import EventKind, MonitorEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[MonitorEvent], None]


class EventBus:
    """Publishes monitor events to subscribers.

    Usage
    -----
    >>> bus = EventBus()
    >>> bus.register_handler(EventKind.BLOCK_MISSED, alert)
    >>> bus.publish(BlockMissed(public_key="ab12"))
    """

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[EventHandler]] = {
            kind: [] for kind in EventKind
        }
        self._catch_all: list[EventHandler] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_handler(self, kind: EventKind, handler: EventHandler) -> None:
        """Register a handler for a specific event kind."""
        self._handlers[kind].append(handler)
        logger.info("Registered handler %r for %s", handler, kind.value)

    def register_catch_all(self, handler: EventHandler) -> None:
        """Register a handler that receives every event kind."""
        self._catch_all.append(handler)
        logger.info("Registered catch-all handler %r", handler)

    def handlers_for(self, kind: EventKind) -> list[EventHandler]:
        """Return the handlers an event of *kind* is delivered to, in order."""
        return [*self._handlers[kind], *self._catch_all]

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    def publish(self, event: MonitorEvent) -> int:
        """Deliver *event* to every matching handler.

        Returns the number of handlers that accepted the event without
        raising.
        """
        delivered = 0
        for handler in self.handlers_for(event.event_kind):
            try:
                handler(event)
                delivered += 1
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Handler %r failed for %s event %s: %s",
                    handler,
                    event.event_kind.value,
                    event.event_id,
                    exc,
                )
        return delivered
