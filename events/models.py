#!/usr/bin/env python3
"""
Event Models

Typed representation of a GitHub webhook delivery. Every event kind is a
plain ``Event`` tagged with an ``EventKind``; kind-specific behavior lives in
``events.builders`` as free functions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple


class EventKind(Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    COMMENT = "comment"
    REVIEW = "review"
    PUSH = "push"
    COMMIT_COMMENT = "commit_comment"


class MalformedPayloadError(ValueError):
    """Raised when a payload lacks a field needed to build its event."""

    def __init__(self, path: str):
        super().__init__(f"Payload is missing required field '{path}'")
        self.path = path


@dataclass(frozen=True)
class NotificationDetails:
    """Human-readable notification payload, present only for notification-worthy actions."""
    pretext: str
    title: str
    title_link: Optional[str] = None
    text: Optional[str] = None

    @property
    def fallback(self) -> str:
        fallback = f"{self.pretext}\n> {self.title}"
        if self.text:
            fallback += f"\n> {self.text}"
        return fallback

    def to_attachment(self) -> Dict[str, Any]:
        """Rich rendering; optional keys are omitted when unset."""
        attachment = {
            'pretext': self.pretext,
            'title': self.title,
        }
        if self.title_link:
            attachment['title_link'] = self.title_link
        if self.text:
            attachment['text'] = self.text
        attachment['fallback'] = self.fallback
        return attachment


@dataclass(frozen=True)
class CommitRecord:
    """One commit of a push, flattened for bookkeeping and display."""
    id: str
    author: str
    title: str
    text: str


@dataclass(frozen=True)
class Event:
    kind: EventKind
    id: str
    repo_id: str
    action: Optional[str]
    sender: str
    participants: FrozenSet[str]
    mentions: FrozenSet[str] = frozenset()
    details: Optional[NotificationDetails] = None
    assignee: Optional[str] = None
    comment: Optional[Dict[str, Any]] = None
    review: Optional[Dict[str, Any]] = None
    commits: Tuple[CommitRecord, ...] = ()
    payload: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_comment(self) -> bool:
        """A review that only carries comments (no approval or change request)."""
        return self.kind == EventKind.REVIEW and (self.review or {}).get('state') == "commented"

    @property
    def review_id(self) -> Optional[Any]:
        if self.kind != EventKind.REVIEW:
            return None
        return (self.review or {}).get('id')

    @property
    def correlated_review_id(self) -> Optional[Any]:
        """Review id a pull request review comment belongs to, if any."""
        if self.comment is None:
            return None
        return self.comment.get('pull_request_review_id')

    @property
    def all_logins(self) -> FrozenSet[str]:
        """Participants and mentions, the logins kept in bookkeeping."""
        return self.participants | self.mentions


def is_pull_request_payload(payload: Dict[str, Any]) -> bool:
    """Pull requests arrive either as `pull_request` or as an issue with a `pull_request` link."""
    issue = payload.get('issue') or {}
    return bool(payload.get('pull_request') or issue.get('pull_request'))
