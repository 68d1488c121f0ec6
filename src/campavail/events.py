"""Lightweight in-process pub/sub event bus."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    DATES_BLOCKED = "dates_blocked"
    DATES_UNBLOCKED = "dates_unblocked"


@dataclass
class Event:
    event_type: EventType
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Type for subscriber callbacks
Subscriber = Callable[[Event], None]


class EventBus:
    """Simple synchronous pub/sub event bus.

    Subscribers run after the write that triggered them has been committed.
    A failing subscriber is logged and never affects the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[EventType, list[Subscriber]] = defaultdict(list)

    def subscribe(self, event_type: EventType, callback: Subscriber) -> None:
        """Register a callback for an event type."""
        self._subscribers[event_type].append(callback)
        logger.debug("Subscribed %s to %s", getattr(callback, "__name__", callback), event_type.value)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers."""
        logger.info("Publishing event: %s", event.event_type.value)
        for callback in self._subscribers.get(event.event_type, []):
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Error in subscriber %s for event %s",
                    getattr(callback, "__name__", callback),
                    event.event_type.value,
                )

    def clear(self) -> None:
        self._subscribers.clear()
