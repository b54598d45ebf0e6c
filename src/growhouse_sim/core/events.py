"""Event system for greenhouse simulation.

A small pub/sub bus that lets collaborators outside the engine (live push,
snapshot persistence, dashboards) follow what happens inside a tick without
the engine knowing about them.

Events are emitted for:
- Simulation lifecycle (start, stop, error, day rollover)
- Crop lifecycle (harvest, replant, heat and over-fertilization deaths)
- Actuator commands and speed changes
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Standard event types for greenhouse simulation."""

    # Simulation lifecycle
    SIMULATION_START = "simulation.start"
    SIMULATION_STOP = "simulation.stop"
    SIMULATION_ERROR = "simulation.error"
    DAY_COMPLETED = "simulation.day_completed"
    SPEED_CHANGED = "simulation.speed_changed"

    # Crop lifecycle
    HARVEST = "table.harvest"
    REPLANT = "table.replant"
    HEAT_DEATH = "table.heat_death"
    OVER_FERTILIZATION_DEATH = "table.over_fertilization_death"

    # Boundary commands
    ACTUATOR_CHANGED = "actuator.changed"

    # Custom events
    CUSTOM = "custom"


def _event_key(event_type: EventType | str) -> str:
    return event_type.value if isinstance(event_type, EventType) else event_type


@dataclass
class Event:
    """An event in the simulation.

    Attributes:
        event_type: Type of event.
        source: Entity that generated the event (e.g. "engine", "G1T3").
        day: Simulated day when the event occurred.
        minute: Simulated minute of day when the event occurred.
        data: Event-specific data payload.
        message: Human-readable description of the event.
        timestamp: Wall-clock time of emission.
    """

    event_type: EventType | str
    source: str = "system"
    day: int | None = None
    minute: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
    message: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        """String representation of the event."""
        when = f"day {self.day} min {self.minute}" if self.day is not None else "-"
        return f"[{when}] {_event_key(self.event_type)} from {self.source}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": _event_key(self.event_type),
            "source": self.source,
            "day": self.day,
            "minute": self.minute,
            "data": self.data,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """Central event bus for pub/sub messaging.

    Handlers run synchronously inside ``emit``; when the engine emits during
    a tick they run inside the runner's execution lane.
    """

    def __init__(self, *, max_history: int = 1000) -> None:
        """Initialize event bus.

        Args:
            max_history: Maximum number of events to keep in history.
        """
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=max_history)

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        """Subscribe to events of a specific type ("*" for all)."""
        key = _event_key(event_type)
        if handler not in self._handlers[key]:
            self._handlers[key].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self.subscribe("*", handler)

    def unsubscribe(self, event_type: EventType | str, handler: EventHandler) -> bool:
        """Unsubscribe from events.

        Returns:
            True if handler was found and removed.
        """
        key = _event_key(event_type)
        if handler in self._handlers[key]:
            self._handlers[key].remove(handler)
            return True
        return False

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers.

        Handler exceptions are logged but do not prevent other handlers from
        being called, and never propagate into the simulation tick.
        """
        self._history.append(event)
        key = _event_key(event.event_type)

        for handler in [*self._handlers[key], *self._handlers["*"]]:
            try:
                handler(event)
            except Exception:
                handler_name = getattr(handler, "__name__", str(handler))
                logger.exception(
                    "Event handler '%s' failed processing %s event from %s",
                    handler_name,
                    key,
                    event.source,
                )

    def emit_simple(
        self,
        event_type: EventType | str,
        source: str,
        message: str = "",
        *,
        day: int | None = None,
        minute: int | None = None,
        **data: Any,
    ) -> Event:
        """Emit an event with simpler syntax.

        Returns:
            The emitted event.
        """
        event = Event(
            event_type=event_type,
            source=source,
            day=day,
            minute=minute,
            message=message,
            data=data,
        )
        self.emit(event)
        return event

    def _iter_history_filtered(
        self,
        event_type: EventType | str | None = None,
        source: str | None = None,
    ) -> Iterator[Event]:
        type_key = _event_key(event_type) if event_type is not None else None
        for event in self._history:
            if type_key is not None and _event_key(event.event_type) != type_key:
                continue
            if source is not None and event.source != source:
                continue
            yield event

    def get_history(
        self,
        event_type: EventType | str | None = None,
        source: str | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        """Get event history with optional filtering.

        Args:
            event_type: Filter by event type.
            source: Filter by source.
            limit: Maximum number of events to return.

        Returns:
            List of events matching filters (most recent last).
        """
        filtered = list(self._iter_history_filtered(event_type, source))
        if limit is not None:
            return filtered[-limit:]
        return filtered

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()

    def clear_handlers(self) -> None:
        """Remove all event handlers."""
        self._handlers.clear()

    def clear(self) -> None:
        """Clear both history and handlers."""
        self.clear_history()
        self.clear_handlers()


# Global event bus instance
_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the global event bus, creating it on first call."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus


def reset_event_bus() -> None:
    """Reset the global event bus.

    Primarily useful for testing.
    """
    global _global_bus
    _global_bus = None
