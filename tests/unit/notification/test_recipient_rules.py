"""
Recipient rules that hold for every notification-worthy event kind.

Uses the shared engine fixtures from tests/conftest.py.
"""

import pytest

from watch import WatchType
from tests.fixtures import github_payloads as payloads

ALL_KINDS = [
    ("issues", lambda: payloads.issue_payload(action="opened", sender="bob", author="alice")),
    ("pull_request", lambda: payloads.pull_request_payload(action="closed", sender="bob", author="alice")),
    ("issue_comment", lambda: payloads.issue_comment_payload(sender="bob", issue_author="alice")),
    ("pull_request_review_comment", lambda: payloads.review_comment_payload(sender="bob", pr_author="alice")),
    ("pull_request_review", lambda: payloads.review_payload(state="approved", sender="bob", pr_author="alice")),
]


def delivered_to(channel):
    return [args[0] for args, _ in channel.deliver.call_args_list]


@pytest.mark.parametrize("event_type, make_payload", ALL_KINDS)
def test_sender_never_receives_own_event(engine, registry, recording_channel, event_type, make_payload):
    registry.set_alias("U_BOB", "bob")
    registry.set_alias("U_ALICE", "alice")
    payload = make_payload()
    issue = f"foo/bar#{(payload.get('issue') or payload.get('pull_request'))['number']}"
    registry.add_watcher(WatchType.ISSUE, "U_BOB", issue)
    registry.add_watcher(WatchType.REPO, "U_BOB", "foo/bar")

    engine.handle(event_type, payload)

    assert delivered_to(recording_channel) == ["U_ALICE"]


@pytest.mark.parametrize("event_type, make_payload", ALL_KINDS)
def test_watcher_and_participant_notified_once(engine, registry, recording_channel, event_type, make_payload):
    registry.set_alias("U_ALICE", "alice")
    payload = make_payload()
    issue = f"foo/bar#{(payload.get('issue') or payload.get('pull_request'))['number']}"
    registry.add_watcher(WatchType.ISSUE, "U_ALICE", issue)

    engine.handle(event_type, payload)

    assert delivered_to(recording_channel) == ["U_ALICE"]


def test_unwatched_repo_hears_nothing(engine, registry, recording_channel):
    registry.add_watcher(WatchType.REPO, "U_OTHER", "other/repo")

    engine.handle("issues", payloads.issue_payload(sender="bob", author="bob", body="no mentions"))

    recording_channel.deliver.assert_not_called()
