"""
Event feed layer.

This module implements:
- FeedKind: Event kind enumeration
- FeedEvent: Single feed record
- EventFeed: Bounded newest-first feed
"""

from .event_feed import EventFeed, FeedEvent, FeedKind

__all__ = [
    "EventFeed",
    "FeedEvent",
    "FeedKind",
]
