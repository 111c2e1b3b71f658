"""Event system for the formstate engine.

Every mutation and every submission attempt emits a typed FormEvent once the
new state snapshot is in place. A reactive view-binding layer subscribes to
these events to know when to re-render.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from .types import EventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single change notification from a form engine.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_01H8...")
        type: Event type from EventType enum
        form_id: ID of the form that emitted the event
        ts: UTC timestamp when the event occurred
        field: Field the event relates to, None for form-wide events
        payload: Optional event-specific data

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = FormEvent(
        ...     event_id="evt_001",
        ...     type=EventType.FIELD_CHANGED,
        ...     form_id="form_001",
        ...     ts=datetime.now(timezone.utc),
        ...     field="email",
        ... )
        >>> event.type.value
        'field.changed'
    """
    event_id: str
    type: EventType
    form_id: str
    ts: datetime
    field: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted. They must not
call back into the engine that emitted the event.
"""


class EventEmitter:
    """Event emitter for managing event listeners and dispatching events.

    Listeners subscribe to one event type or to all of them, and run
    synchronously in registration order. A failing listener is logged and
    the others still run.

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.FORM_RESET, seen.append)
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        if listener in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from the wildcard subscription. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners.

        Listeners are called synchronously in registration order:
        1. Type-specific listeners for this event type
        2. Wildcard listeners (subscribed to all events)

        If a listener raises, the exception is logged and dispatch continues.
        """
        listeners = list(self._listeners.get(event.type, [])) + list(self._any_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Listener %r failed for event %s (%s)",
                    listener, event.type.value, event.event_id,
                )


__all__ = [
    "FormEvent",
    "EventType",
    "EventListener",
    "EventEmitter",
]
