"""
Message Bus

Central hub for routing domain events to their handlers.
Implements the Mediator pattern for decoupling the booking workflow from
its side effects (push notifications, analytics).
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Message bus for domain events

    Events: Multiple handlers per event (1:N)
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: EventHandler
    ):
        """
        Register an event handler

        Multiple handlers can be registered for the same event type.
        """
        self._event_handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered event handler for {event_type.__name__}")

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._event_handlers.get(event_type, []))

    def publish_events(self, events: Iterable[DomainEvent]) -> int:
        """
        Publish domain events

        All registered handlers for each event type will be called.
        Errors in handlers are logged but don't stop other handlers.
        Returns the number of handler failures.
        """
        failures = 0
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.warning(f"No handlers registered for event {event_type.__name__}")
                continue

            logger.info(f"Publishing event: {event_type.__name__} (ID: {event.event_id})")

            for handler in handlers:
                handler_name = getattr(handler, '__name__', repr(handler))
                try:
                    handler(event)
                    logger.debug(f"Event {event_type.__name__} handled by {handler_name}")
                except Exception as e:
                    failures += 1
                    logger.error(
                        f"Error in event handler {handler_name} "
                        f"for event {event_type.__name__}: {e}",
                        exc_info=True
                    )
                    # Don't raise - other handlers should still run
        return failures
