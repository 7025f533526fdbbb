"""
Event feed.

Bounded, newest-first log of notable occurrences (price ticks, orders,
fills, system and connection events) for display and audit.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Deque, List, Optional
import logging

from ..utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class FeedKind(Enum):
    """Feed event kind enumeration."""
    PRICE = "price"
    ORDER = "order"
    TRADE = "trade"
    SYSTEM = "system"
    ERROR = "error"


@dataclass(frozen=True)
class FeedEvent:
    """Human-readable record of a state change."""

    kind: FeedKind
    text: str
    timestamp: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'kind': self.kind.value,
            'text': self.text,
            'timestamp': self.timestamp.isoformat(),
        }


class EventFeed:
    """Ring buffer of feed events, newest first.

    Publishing is the only mutation; once ``capacity`` is reached the oldest
    event is dropped.
    """

    def __init__(self, capacity: int = 50, clock: Optional[Clock] = None):
        """
        Initialize event feed.

        Args:
            capacity: Maximum number of retained events.
            clock: Time source used by publish_text.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.clock = clock or utc_now
        self._events: Deque[FeedEvent] = deque(maxlen=capacity)

    def publish(self, event: FeedEvent) -> None:
        """
        Prepend an event, evicting the oldest when full.

        Args:
            event: Event to publish.
        """
        self._events.appendleft(event)
        logger.debug(f"Feed [{event.kind.value}] {event.text}")

    def publish_text(
        self,
        kind: FeedKind,
        text: str,
        timestamp: Optional[datetime] = None,
    ) -> FeedEvent:
        """Build and publish an event stamped with the feed clock."""
        event = FeedEvent(kind=kind, text=text, timestamp=timestamp or self.clock())
        self.publish(event)
        return event

    def snapshot(self) -> List[FeedEvent]:
        """Return the retained events, newest first."""
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)
