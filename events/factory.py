#!/usr/bin/env python3
"""
Event Factory

Maps a GitHub webhook event type (the ``X-GitHub-Event`` header) and its
payload to a typed ``Event``.

Usage:
    from events.factory import create

    event = create("issues", payload)
    if event is None:
        ...  # not an event type we care about
"""

import logging
from typing import Any, Callable, Dict, Optional

from events.builders import (
    build_comment_event,
    build_commit_comment_event,
    build_issue_event,
    build_push_event,
    build_review_event,
)
from events.models import Event, MalformedPayloadError

logger = logging.getLogger(__name__)

EventBuilder = Callable[[Dict[str, Any]], Event]

# Registry of supported webhook event types
BUILDERS: Dict[str, EventBuilder] = {
    'push': build_push_event,
    'commit_comment': build_commit_comment_event,
    'issues': build_issue_event,
    'pull_request': build_issue_event,
    'issue_comment': build_comment_event,
    'pull_request_review_comment': build_comment_event,
    'pull_request_review': build_review_event,
}


def create(raw_type: str, payload: Dict[str, Any]) -> Optional[Event]:
    """
    Build the event for a webhook delivery.

    Args:
        raw_type: GitHub event type, e.g. "issues" or "pull_request_review"
        payload: Decoded webhook body

    Returns:
        The event, or None for event types that are not tracked

    Raises:
        MalformedPayloadError: If the payload lacks a field the event needs
    """
    builder = BUILDERS.get(raw_type)
    if builder is None:
        logger.debug(f"Ignoring untracked event type: {raw_type}")
        return None

    if not isinstance(payload, dict):
        raise MalformedPayloadError('<root>')

    try:
        return builder(payload)
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedPayloadError(str(e)) from e


def supported_event_types() -> list:
    return sorted(BUILDERS.keys())
