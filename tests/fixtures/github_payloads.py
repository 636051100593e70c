"""
GitHub webhook payload fixtures.

Trimmed to the fields the event builders read. Each helper returns a fresh
dict so tests can mutate it freely.
"""
from typing import Any, Dict, List, Optional

REPO = {
    'full_name': "Foo/Bar",
    'html_url': "https://github.com/Foo/Bar",
    'owner': {'login': "foo"},
}


def repository() -> Dict[str, Any]:
    return {
        'full_name': REPO['full_name'],
        'html_url': REPO['html_url'],
        'owner': dict(REPO['owner']),
    }


def issue_payload(
    action: str = "opened",
    sender: str = "alice",
    author: str = "alice",
    number: int = 37,
    title: str = "Crash on start",
    body: Optional[str] = "It breaks, cc @carol",
    assignee: Optional[str] = None,
) -> Dict[str, Any]:
    payload = {
        'action': action,
        'issue': {
            'number': number,
            'title': title,
            'body': body,
            'html_url': f"https://github.com/Foo/Bar/issues/{number}",
            'user': {'login': author},
        },
        'repository': repository(),
        'sender': {'login': sender},
    }
    if assignee:
        payload['assignee'] = {'login': assignee}
    return payload


def pull_request_payload(
    action: str = "opened",
    sender: str = "alice",
    author: str = "alice",
    number: int = 5,
    title: str = "Add retries",
    body: Optional[str] = "Implements retries",
    merged: bool = False,
    assignee: Optional[str] = None,
) -> Dict[str, Any]:
    payload = {
        'action': action,
        'number': number,
        'pull_request': {
            'number': number,
            'title': title,
            'body': body,
            'merged': merged,
            'html_url': f"https://github.com/Foo/Bar/pull/{number}",
            'user': {'login': author},
        },
        'repository': repository(),
        'sender': {'login': sender},
    }
    if assignee:
        payload['assignee'] = {'login': assignee}
    return payload


def issue_comment_payload(
    action: Optional[str] = "created",
    sender: str = "bob",
    issue_author: str = "alice",
    number: int = 37,
    body: str = "Looks good @dave",
    on_pull_request: bool = False,
) -> Dict[str, Any]:
    payload = issue_payload(author=issue_author, number=number, sender=sender)
    if action is None:
        payload.pop('action')
    else:
        payload['action'] = action
    if on_pull_request:
        payload['issue']['pull_request'] = {'url': f"https://api.github.com/repos/Foo/Bar/pulls/{number}"}
    payload['comment'] = {
        'body': body,
        'html_url': f"https://github.com/Foo/Bar/issues/{number}#issuecomment-1",
        'user': {'login': sender},
    }
    return payload


def review_comment_payload(
    review_id: int = 900,
    sender: str = "bob",
    pr_author: str = "alice",
    number: int = 5,
    body: str = "nit: rename this",
) -> Dict[str, Any]:
    payload = pull_request_payload(action="created", author=pr_author, number=number, sender=sender)
    payload['comment'] = {
        'body': body,
        'html_url': f"https://github.com/Foo/Bar/pull/{number}#discussion_r1",
        'pull_request_review_id': review_id,
        'user': {'login': sender},
    }
    return payload


def review_payload(
    state: str = "approved",
    review_id: int = 900,
    sender: str = "bob",
    pr_author: str = "alice",
    number: int = 5,
    body: Optional[str] = "Ship it",
) -> Dict[str, Any]:
    payload = pull_request_payload(action="submitted", author=pr_author, number=number, sender=sender)
    payload['review'] = {
        'id': review_id,
        'state': state,
        'body': body,
        'html_url': f"https://github.com/Foo/Bar/pull/{number}#pullrequestreview-{review_id}",
        'user': {'login': sender},
    }
    return payload


def commit(sha: str, author: str = "alice", message: str = "Fix bug\n\nLonger description") -> Dict[str, Any]:
    return {
        'id': sha,
        'message': message,
        'url': f"https://github.com/Foo/Bar/commit/{sha}",
        'author': {'name': author.title(), 'username': author},
    }


def push_payload(
    commits: Optional[List[Dict[str, Any]]] = None,
    sender: str = "alice",
    ref: str = "refs/heads/main",
    before: str = "1111111aaaaaaa",
    after: str = "2222222bbbbbbb",
) -> Dict[str, Any]:
    return {
        'ref': ref,
        'before': before,
        'after': after,
        'compare': "https://github.com/Foo/Bar/compare/1111111...2222222",
        'commits': commits if commits is not None else [commit("abcdef1234567")],
        'repository': repository(),
        'sender': {'login': sender},
    }


def commit_comment_payload(
    sha: str = "abcdef1234567",
    sender: str = "bob",
    body: str = "Why this change? @erin",
    action: Optional[str] = "created",
    title: Optional[str] = None,
) -> Dict[str, Any]:
    payload = {
        'comment': {
            'commit_id': sha,
            'body': body,
            'html_url': f"https://github.com/Foo/Bar/commit/{sha}#commitcomment-1",
            'user': {'login': sender},
        },
        'repository': repository(),
        'sender': {'login': sender},
    }
    if action is not None:
        payload['action'] = action
    if title is not None:
        payload['comment']['title'] = title
    return payload
