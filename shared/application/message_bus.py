"""
Message Bus

Routes domain events published after commit to the handlers subscribed to
their type. A handler subscribed to a base event class receives every
subclass as well.
"""

from typing import Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """Event bus with 1:N fan-out per event type"""

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Registered %s for %s", getattr(handler, '__name__', handler), event_type.__name__)

    def unregister_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        matched: List[EventHandler] = []
        for event_type in type(event).__mro__:
            for handler in self._event_handlers.get(event_type, []):
                if handler not in matched:
                    matched.append(handler)
        return matched

    def publish_events(self, events: List[DomainEvent]):
        """
        Publish domain events

        Errors in handlers are logged but don't stop other handlers.
        """
        for event in events:
            event_name = type(event).__name__
            handlers = self.handlers_for(event)

            if not handlers:
                logger.debug("No handlers registered for event %s", event_name)
                continue

            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Error in event handler %s for event %s",
                        getattr(handler, '__name__', handler), event_name,
                    )


message_bus = MessageBus()
