#!/usr/bin/env python3
"""
Event Builders

One builder per event kind, each turning a raw webhook payload into an
``Event``. Shared pieces (repo id, participants seed, mention scanning,
pretext rendering) are plain functions so the kinds never inherit from each
other.

Participants are always seeded with the repository owner and the sender.
Mentions are computed last, against the final participant set, so a login
is never both a participant and a mention.
"""

import re
from typing import Any, Dict, Iterable, Optional, Set

from events.models import (
    CommitRecord,
    Event,
    EventKind,
    MalformedPayloadError,
    NotificationDetails,
    is_pull_request_payload,
)

MENTION_PATTERN = re.compile(r'@([\w-]+)')

SHORT_SHA_LENGTH = 7

COMMENT_TITLES = {
    'created': "Comment",
    'edited': "Comment edited",
    'deleted': "Comment deleted",
}

REVIEW_TITLES = {
    'approved': "Approved",
    'changes_requested': "Changes requested",
    'commented': "Reviewed",
}


# ============ Shared helpers ============

def require(payload: Dict[str, Any], path: str) -> Any:
    """Walk a dotted path through nested dicts, failing fast when a field is absent."""
    value: Any = payload
    for part in path.split('.'):
        if not isinstance(value, dict) or value.get(part) is None:
            raise MalformedPayloadError(path)
        value = value[part]
    return value


def build_repo_id(payload: Dict[str, Any]) -> str:
    return require(payload, 'repository.full_name').lower()


def seed_participants(payload: Dict[str, Any]) -> Set[str]:
    return {
        require(payload, 'repository.owner.login'),
        require(payload, 'sender.login'),
    }


def scan_mentions(participants: Iterable[str], *sources: Optional[str]) -> Set[str]:
    """Collect ``@login`` mentions from free text, skipping existing participants."""
    participants = set(participants)
    mentions = set()
    for source in sources:
        if not source:
            continue
        for login in MENTION_PATTERN.findall(source):
            if login not in participants:
                mentions.add(login)
    return mentions


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LENGTH]


def repo_link(repo: Dict[str, Any]) -> str:
    return f"[<{repo['html_url']}|{repo['full_name']}>]"


def issue_pretext(subject: str, repo: Dict[str, Any], info: Dict[str, Any]) -> str:
    return f"{repo_link(repo)} {subject} <{info['html_url']}|#{info['number']}: {info['title']}>"


def commit_pretext(repo: Dict[str, Any], sha: str, title: Optional[str]) -> str:
    title = title.split("\n", 1)[0] if title else "No title"
    return f"{repo_link(repo)} Commit <{repo['html_url']}/commit/{sha}|{short_sha(sha)}: {title}>"


def push_pretext(repo: Dict[str, Any], branch: str, compare_url: str, commit_count: int) -> str:
    return f"{repo_link(repo)} Branch '{branch}': <{compare_url}|{commit_count} Commits>"


def _subject_info(payload: Dict[str, Any]) -> Dict[str, Any]:
    """The issue or pull request an event is about."""
    info = payload.get('pull_request') or payload.get('issue')
    if not isinstance(info, dict):
        raise MalformedPayloadError('issue')
    return info


def _comment_details(
    action: Optional[str],
    pretext: str,
    sender: str,
    comment: Dict[str, Any]
) -> Optional[NotificationDetails]:
    # Commit comment payloads have historically carried no action
    title = COMMENT_TITLES.get(action or 'created')
    if title is None:
        return None
    return NotificationDetails(
        pretext=pretext,
        title=f"{title} by {sender}",
        title_link=comment.get('html_url'),
        text=comment.get('body'),
    )


# ============ Issues and pull requests ============

def build_issue_event(payload: Dict[str, Any]) -> Event:
    repo = require(payload, 'repository')
    info = _subject_info(payload)
    is_pull_request = is_pull_request_payload(payload)

    repo_id = build_repo_id(payload)
    sender = require(payload, 'sender.login')
    action = payload.get('action')
    subject = "Pull Request" if is_pull_request else "Issue"

    participants = seed_participants(payload)
    participants.add(require(info, 'user.login'))

    assignee = None
    details = None
    mention_sources = []

    if action == 'opened':
        details = (f"Opened by {sender}", info.get('body'))
        mention_sources = [info.get('title'), info.get('body')]
    elif action == 'reopened':
        details = (f"Reopened by {sender}", None)
    elif action in ('assigned', 'unassigned'):
        assignee = require(payload, 'assignee.login')
        participants.add(assignee)
        if action == 'assigned':
            details = (f"Assigned to {assignee} by {sender}", None)
        else:
            details = (f"Unassigned from {assignee} by {sender}", None)
    elif action == 'closed':
        close_action = "Merged" if is_pull_request and info.get('merged') else "Closed"
        details = (f"{close_action} by {sender}", None)
    elif action == 'synchronize' and is_pull_request:
        details = (f"Commits added by {sender}", None)

    notification = None
    if details:
        title, text = details
        notification = NotificationDetails(
            pretext=issue_pretext(subject, repo, info),
            title=title,
            text=text,
        )

    return Event(
        kind=EventKind.PULL_REQUEST if is_pull_request else EventKind.ISSUE,
        id=f"{repo_id}#{info['number']}",
        repo_id=repo_id,
        action=action,
        sender=sender,
        participants=frozenset(participants),
        mentions=frozenset(scan_mentions(participants, *mention_sources)),
        details=notification,
        assignee=assignee,
        payload=payload,
    )


# ============ Comments ============

def build_comment_event(payload: Dict[str, Any]) -> Event:
    """Issue comments and pull request review comments."""
    repo = require(payload, 'repository')
    info = _subject_info(payload)
    comment = require(payload, 'comment')

    repo_id = build_repo_id(payload)
    sender = require(payload, 'sender.login')
    action = payload.get('action')
    subject = "Pull Request" if is_pull_request_payload(payload) else "Issue"

    participants = seed_participants(payload)
    participants.add(require(info, 'user.login'))
    participants.add(require(comment, 'user.login'))

    return Event(
        kind=EventKind.COMMENT,
        id=f"{repo_id}#{info['number']}",
        repo_id=repo_id,
        action=action,
        sender=sender,
        participants=frozenset(participants),
        mentions=frozenset(scan_mentions(participants, comment.get('body'))),
        details=_comment_details(action, issue_pretext(subject, repo, info), sender, comment),
        comment=comment,
        payload=payload,
    )


# ============ Reviews ============

def build_review_event(payload: Dict[str, Any]) -> Event:
    repo = require(payload, 'repository')
    info = require(payload, 'pull_request')
    review = require(payload, 'review')

    repo_id = build_repo_id(payload)
    sender = require(payload, 'sender.login')

    participants = seed_participants(payload)
    participants.add(require(info, 'user.login'))
    participants.add(require(review, 'user.login'))

    title = REVIEW_TITLES.get(review.get('state'), "Reviewed")
    details = NotificationDetails(
        pretext=issue_pretext("Pull Request", repo, info),
        title=f"{title} by {sender}",
        title_link=review.get('html_url'),
        text=review.get('body'),
    )

    return Event(
        kind=EventKind.REVIEW,
        id=f"{repo_id}#{info['number']}",
        repo_id=repo_id,
        action=payload.get('action'),
        sender=sender,
        participants=frozenset(participants),
        mentions=frozenset(scan_mentions(participants, review.get('body'))),
        details=details,
        review=review,
        payload=payload,
    )


# ============ Pushes ============

def build_commit_record(repo_id: str, commit: Dict[str, Any]) -> CommitRecord:
    sha = require(commit, 'id')
    author = commit.get('author') or {}
    login = author.get('username') or author.get('name')
    if not login:
        raise MalformedPayloadError('commits.author.username')

    message = commit.get('message') or ""
    first_line = message.split("\n", 1)[0]

    return CommitRecord(
        id=f"{repo_id}/{sha}",
        author=login,
        title=message,
        text=f"[{login}: <{commit.get('url')}|{short_sha(sha)}>] {first_line}",
    )


def build_push_event(payload: Dict[str, Any]) -> Event:
    repo = require(payload, 'repository')
    repo_id = build_repo_id(payload)
    sender = require(payload, 'sender.login')

    before = require(payload, 'before')
    after = require(payload, 'after')
    branch = require(payload, 'ref').split("/")[-1]

    commits = tuple(build_commit_record(repo_id, commit) for commit in payload.get('commits') or [])

    details = NotificationDetails(
        pretext=push_pretext(repo, branch, payload.get('compare'), len(commits)),
        title=f"Pushed by {sender}",
        text="\n".join(commit.text for commit in commits),
    )

    return Event(
        kind=EventKind.PUSH,
        id=f"{repo_id}/{short_sha(before)}...{short_sha(after)}",
        repo_id=repo_id,
        action=payload.get('action'),
        sender=sender,
        participants=frozenset(seed_participants(payload)),
        details=details,
        commits=commits,
        payload=payload,
    )


# ============ Commit comments ============

def build_commit_comment_event(payload: Dict[str, Any]) -> Event:
    """
    Build a commit comment event.

    GitHub does not send the commit message with a commit comment, so the
    title is read from ``comment.title``, which the notification engine fills
    in from the message stored when the commit was pushed.
    """
    repo = require(payload, 'repository')
    comment = require(payload, 'comment')
    sha = require(comment, 'commit_id')

    repo_id = build_repo_id(payload)
    sender = require(payload, 'sender.login')
    action = payload.get('action')

    participants = seed_participants(payload)
    author = (comment.get('user') or {}).get('login')
    if author:
        participants.add(author)

    return Event(
        kind=EventKind.COMMIT_COMMENT,
        id=f"{repo_id}/{sha}",
        repo_id=repo_id,
        action=action,
        sender=sender,
        participants=frozenset(participants),
        mentions=frozenset(scan_mentions(participants, comment.get('body'))),
        details=_comment_details(action, commit_pretext(repo, sha, comment.get('title')), sender, comment),
        comment=comment,
        payload=payload,
    )
