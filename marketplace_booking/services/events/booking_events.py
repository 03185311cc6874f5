# marketplace_booking/services/events/booking_events.py
"""In-process publish/subscribe for booking lifecycle events"""
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger(__name__)

BookingEventHandler = Callable[[str, Dict[str, Any]], None]


class BookingEventBus:
    """Delivers booking events to registered handlers after a commit"""

    # Available event types
    VALID_EVENT_TYPES = [
        "booking.created",
        "booking.confirmed",
        "booking.cancelled",
        "booking.completed"
    ]

    def __init__(self):
        self._handlers: Dict[str, List[BookingEventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: BookingEventHandler) -> None:
        """Register a handler for one event type, or "*" for all of them"""
        if event_type != "*" and event_type not in self.VALID_EVENT_TYPES:
            raise ValueError(f"Invalid event type: {event_type}")
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: BookingEventHandler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def publish(self, event_type: str, event_data: Dict[str, Any]) -> int:
        """
        Send an event to every subscriber.

        The booking is already committed when this runs, so a failing
        handler is logged and skipped rather than raised to the caller.

        Returns:
            Number of handlers that received the event
        """
        if event_type not in self.VALID_EVENT_TYPES:
            raise ValueError(f"Invalid event type: {event_type}")

        payload = {
            "event": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": event_data,
        }

        delivered = 0
        for handler in self._handlers.get(event_type, []) + self._handlers.get("*", []):
            try:
                handler(event_type, payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Booking event handler failed for {event_type}: {e}", exc_info=True)

        logger.info(f"Published {event_type} to {delivered} handler(s)")
        return delivered


booking_events = BookingEventBus()
