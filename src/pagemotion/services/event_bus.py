"""
Event Bus - lifecycle notification routing

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

Delivery is synchronous so handlers run inside the same frame/observer
callback that produced the event.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from pagemotion.models.events import Event, EventType
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_logger

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Central event bus for engine notifications

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering
    - Middleware pipeline (logging, blocking)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = EventBus()
        bus.subscribe(
            EventType.ELEMENT_TRIGGERED,
            on_reveal,
            filter_fn=lambda e: e.kind == AnimationKind.COUNTER
        )
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._middleware: List[Callable[[Event], Optional[Event]]] = []
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call with the event
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(EventHandler(handler, priority, filter_fn))
        handlers.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]) -> bool:
        """Remove a handler; True if it was registered"""
        handlers = self._handlers.get(event_type, [])
        for entry in handlers:
            if entry.handler == handler:
                handlers.remove(entry)
                return True
        return False

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to the pipeline (runs in registration order)

        Middleware returns the (possibly modified) event, or None to block it.
        """
        self._middleware.append(middleware)

    def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute matching handlers by priority (high → low)
        4. Catch and log handler exceptions
        """
        for middleware in self._middleware:
            processed = middleware(event)
            if processed is None:
                return
            event = processed

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        for entry in list(self._handlers.get(event.type, [])):
            if entry.filter_fn and not entry.filter_fn(event):
                continue
            try:
                entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(entry.handler, '__name__', entry.handler)} "
                    f"for {event.type.name}",
                    exception=e
                )

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()
