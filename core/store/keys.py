"""Redis key layout shared by the watch registry and the notification engine."""

USERS_HASH = "users"
LOGINS_HASH = "logins"


def watchers_key(watch_type: str, name: str) -> str:
    """Set of user ids watching a repo or issue, e.g. ``issue:foo/bar#37``."""
    return f"{watch_type}:{name}"


def user_watches_key(watch_type: str, user_id: str) -> str:
    """Set of names a user watches, e.g. ``user:U123:repo``."""
    return f"user:{user_id}:{watch_type}"


def participants_key(event_id: str) -> str:
    return f"participants:{event_id}"


def title_key(commit_id: str) -> str:
    # commit_id is already "<repoId>/<sha>"
    return f"title:{commit_id}"
