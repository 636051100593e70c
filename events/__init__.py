"""
Events Module

Classifies GitHub webhook deliveries into typed events with a stable id,
participants, mentions and an optional notification payload.

Usage:
    from events import create

    event = create("pull_request", payload)
    if event and event.details:
        print(event.details.fallback)
"""

from events.models import (
    CommitRecord,
    Event,
    EventKind,
    MalformedPayloadError,
    NotificationDetails,
)

from events.factory import (
    create,
    supported_event_types,
)

__all__ = [
    # Models
    'CommitRecord',
    'Event',
    'EventKind',
    'MalformedPayloadError',
    'NotificationDetails',
    # Factory
    'create',
    'supported_event_types',
]
