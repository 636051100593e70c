#!/usr/bin/env python3
"""
Watch Registry - repo/issue subscriptions and GitHub login aliases

Every subscription is stored twice, as reverse indexes:

    repo:<owner/name>       -> {user ids}
    user:<user id>:repo     -> {owner/name}

and the alias mapping as two inverse hashes:

    users   user id          -> login
    logins  lower(login)     -> user id

Both halves of a pair are always written in one MULTI/EXEC so a reader never
sees a half-updated pair. Alias changes additionally read the current holders,
so they run as a WATCH-based optimistic transaction.

Usage:
    from watch.registry import WatchRegistry, WatchType

    registry = WatchRegistry(redis)
    registry.add_watcher(WatchType.REPO, "U123", "Foo/Bar")
    registry.list_for("U123", WatchType.REPO)   # ["foo/bar"]
"""

import logging
from enum import Enum
from typing import List, Optional

from redis import Redis, RedisError
from redis.client import Pipeline

from core.store import keys

logger = logging.getLogger(__name__)


class WatchType(Enum):
    REPO = "repo"
    ISSUE = "issue"


def canonical_name(name: str) -> str:
    """Watch names are case-insensitive; store them case-folded."""
    return name.strip().lower()


class WatchRegistry:
    """Per-user watch sets and the chat user <-> GitHub login mapping."""

    def __init__(self, redis: Redis):
        self._redis = redis

    # ============ Watches ============

    def add_watcher(self, watch_type: WatchType, user_id: str, name: str) -> bool:
        """
        Subscribe a user to a repo or issue.

        Returns:
            True if the transaction committed, False on a store error
        """
        name = canonical_name(name)
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.sadd(keys.watchers_key(watch_type.value, name), user_id)
            pipe.sadd(keys.user_watches_key(watch_type.value, user_id), name)
            pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to add {watch_type.value} watch {name} for {user_id}: {e}")
            return False

        logger.info(f"User {user_id} is watching {watch_type.value} {name}")
        return True

    def remove_watcher(self, watch_type: WatchType, user_id: str, name: str) -> bool:
        """
        Unsubscribe a user from a repo or issue.

        For issues the user's alias is also dropped from the issue's
        participants, so unwatching stops notifications the user would
        otherwise keep getting as a past participant.

        Returns:
            True if the user was watching and the transaction committed
        """
        name = canonical_name(name)
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.srem(keys.watchers_key(watch_type.value, name), user_id)
            pipe.srem(keys.user_watches_key(watch_type.value, user_id), name)
            _, removed = pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to remove {watch_type.value} watch {name} for {user_id}: {e}")
            return False

        if watch_type == WatchType.ISSUE:
            self._forget_participant(user_id, name)

        return bool(removed)

    def list_for(self, user_id: str, watch_type: WatchType) -> List[str]:
        """Names the user watches, sorted case-insensitively for display."""
        watched = self._redis.smembers(keys.user_watches_key(watch_type.value, user_id))
        return sorted(watched, key=str.lower)

    def watchers_of(self, watch_type: WatchType, name: str) -> List[str]:
        return sorted(self._redis.smembers(keys.watchers_key(watch_type.value, canonical_name(name))))

    def _forget_participant(self, user_id: str, issue: str) -> None:
        """
        Best-effort; runs outside the watch transaction.

        Participant sets hold logins as GitHub spells them, so every member
        matching the alias case-insensitively is removed.
        """
        try:
            login = self.alias_for(user_id)
            if not login:
                return
            participants_key = keys.participants_key(issue)
            matches = [member for member in self._redis.smembers(participants_key)
                       if member.lower() == login.lower()]
            if matches:
                self._redis.srem(participants_key, *matches)
        except RedisError as e:
            logger.warning(f"Could not remove {user_id} from participants of {issue}: {e}")

    # ============ Aliases ============

    def set_alias(self, user_id: str, login: Optional[str]) -> bool:
        """
        Map a chat user to a GitHub login, or clear the mapping when login is None.

        A login belongs to at most one user: assigning it evicts the previous
        holder, and a user's earlier login stops resolving to them.
        """
        def swap(pipe: Pipeline) -> None:
            previous_login = pipe.hget(keys.USERS_HASH, user_id)

            if login:
                login_id = login.lower()
                previous_holder = pipe.hget(keys.LOGINS_HASH, login_id)

                pipe.multi()
                if previous_holder and previous_holder != user_id:
                    pipe.hdel(keys.USERS_HASH, previous_holder)
                if previous_login and previous_login.lower() != login_id:
                    pipe.hdel(keys.LOGINS_HASH, previous_login.lower())
                pipe.hset(keys.LOGINS_HASH, login_id, user_id)
                pipe.hset(keys.USERS_HASH, user_id, login)
            else:
                pipe.multi()
                pipe.hdel(keys.USERS_HASH, user_id)
                if previous_login:
                    pipe.hdel(keys.LOGINS_HASH, previous_login.lower())

        try:
            self._redis.transaction(swap, keys.USERS_HASH, keys.LOGINS_HASH)
        except RedisError as e:
            logger.error(f"Failed to set alias for {user_id}: {e}")
            return False

        if login:
            logger.info(f"User {user_id} is now aliased to {login}")
        else:
            logger.info(f"User {user_id} removed their alias")
        return True

    def alias_for(self, user_id: str) -> Optional[str]:
        return self._redis.hget(keys.USERS_HASH, user_id)

    def user_for_login(self, login: str) -> Optional[str]:
        return self._redis.hget(keys.LOGINS_HASH, login.lower())
