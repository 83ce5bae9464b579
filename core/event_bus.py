"""
Event bus for service order events.

Synchronous in-process pub/sub. Handlers run immediately in the
publisher's thread. Handler errors are logged and never propagate: by the
time an event is published the change is already persisted.
"""

import logging
from collections.abc import Callable

from core.events import OrderEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class (or its name), publish by event instance.
    Handlers are called in subscription order.
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable]] = {}

    def subscribe(self, event_type: type[OrderEvent] | str, callback: Callable) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Event class or class name (e.g. 'StatusChanged')
            callback: Called with the event instance
        """
        name = event_type if isinstance(event_type, str) else event_type.__name__
        self._subscribers.setdefault(name, []).append(callback)

    def publish(self, event: OrderEvent) -> None:
        """Deliver event to every subscriber of its exact class."""
        event_type = event.__class__.__name__

        for callback in self._subscribers.get(event_type, ()):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event_type,
                    event.event_id,
                )
