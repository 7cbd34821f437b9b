"""Event bus for publish/subscribe of domain events.

Discovery, propagation and the workflow publish here; the logging handler
and the CLI subscribe.
"""

import threading
from typing import Callable, Dict, List, Type

from farmconf.domain.events import DomainEvent
from farmconf.logging_config import get_logger

logger = get_logger(__name__)

EventHandlerFn = Callable[[DomainEvent], None]


class EventBus:
    """
    Event bus with per-type and catch-all subscriptions.

    Handlers are called synchronously in order of subscription. A failing
    handler is logged and does not stop the remaining handlers.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandlerFn]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandlerFn) -> None:
        """
        Subscribe to a specific event type.

        Args:
            event_type: The type of event to subscribe to
            handler: Callable that takes the event as parameter
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

        logger.debug("event_handler_subscribed", event_type=event_type.__name__)

    def subscribe_to_all(self, handler: EventHandlerFn) -> None:
        """Subscribe to every event type."""
        self.subscribe(DomainEvent, handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandlerFn) -> None:
        with self._lock:
            if handler in self._handlers.get(event_type, []):
                self._handlers[event_type].remove(handler)

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all subscribed handlers.

        Args:
            event: The domain event to publish
        """
        with self._lock:
            specific_handlers = list(self._handlers.get(type(event), []))
            all_handlers = list(self._handlers.get(DomainEvent, []))
        handlers = specific_handlers + all_handlers

        # Call handlers outside the lock
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "event_handler_failed",
                    event_type=event.__class__.__name__,
                    error=str(e),
                    exc_info=True,
                )

    def clear(self) -> None:
        """Clear all subscriptions (mainly for testing)."""
        with self._lock:
            self._handlers.clear()
