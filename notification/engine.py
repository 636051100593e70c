#!/usr/bin/env python3
"""
Notification Engine

Consumes GitHub webhook deliveries and fans notifications out to chat users.

For every delivery the engine:
1. Builds the typed event (unknown event types are ignored)
2. Records the event's participants and mentions in ``participants:<id>``
3. Stops there unless the event is notification-worthy
4. Collects issue (and, for "opened", repo) watchers plus the recorded
   participants in one round trip
5. Resolves participant logins to chat users through the alias table,
   drops the sender, and delivers the rendered payload to everyone left

Pushes only feed bookkeeping: each commit's author and message are stored so
a later commit comment can notify the author and show the commit title.

Usage:
    from notification.engine import NotificationEngine

    engine = NotificationEngine(redis, channel)
    engine.handle("issues", payload)
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from redis import Redis, RedisError

from core.store import keys
from core.store.connection import PARTICIPANTS_TTL_SECONDS
from events import factory
from events.models import Event, EventKind, MalformedPayloadError
from notification.channels import DeliveryChannel
from notification.message_builder import NotificationMessageBuilder
from notification.suppression import (
    RecentReviewWindow,
    Scheduler,
    ThreadingScheduler,
)

logger = logging.getLogger(__name__)

REVIEW_SUPPRESSION_DELAY_SECONDS = 1.0


class NotificationEngine:
    """
    Turns webhook deliveries into chat notifications.

    The review window and scheduler are injected so the review/comment race
    can be driven by a fake clock in tests.
    """

    def __init__(
        self,
        redis: Redis,
        channel: DeliveryChannel,
        scheduler: Optional[Scheduler] = None,
        review_window: Optional[RecentReviewWindow] = None,
        participants_ttl_seconds: int = PARTICIPANTS_TTL_SECONDS,
        review_delay_seconds: float = REVIEW_SUPPRESSION_DELAY_SECONDS
    ):
        self._redis = redis
        self.channel = channel
        self.scheduler = scheduler or ThreadingScheduler()
        self.review_window = review_window or RecentReviewWindow()
        self.participants_ttl_seconds = participants_ttl_seconds
        self.review_delay_seconds = review_delay_seconds

    def handle(self, event_type: str, payload: Dict[str, Any]) -> None:
        """
        Entry point for the webhook listener; never raises.

        Malformed payloads and store errors abandon this delivery only. They
        are not retried: the next event for the same issue redoes the
        bookkeeping from scratch.
        """
        try:
            self.process_event(event_type, payload)
        except MalformedPayloadError as e:
            logger.warning(f"Dropping malformed {event_type} event: {e}")
        except RedisError as e:
            logger.error(f"Store error while processing {event_type} event: {e}", exc_info=True)

    def process_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        event = factory.create(event_type, payload)
        if event is None:
            return

        if event.kind == EventKind.PUSH:
            self._record_commits(event)
            return

        if event.kind == EventKind.COMMIT_COMMENT:
            event = self._with_commit_title(event_type, event)

        # without details there is nothing to announce, only bookkeeping
        if event.details is None:
            self._record_participants(event)
            return

        if event.correlated_review_id is not None:
            self.review_window.record(event.correlated_review_id)

        watcher_ids, participant_logins = self._record_and_fetch(event)

        if event.kind == EventKind.REVIEW and event.is_comment:
            logger.debug(f"Delaying review notification for {event.id} (review {event.review_id})")
            self.scheduler.call_later(
                self.review_delay_seconds,
                self._notify_review,
                watcher_ids,
                participant_logins,
                event
            )
            return

        self.notify(watcher_ids, participant_logins, event)

    # ============ Bookkeeping ============

    def _record_commits(self, event: Event) -> None:
        """Remember each pushed commit's author and message for later commit comments."""
        if not event.commits:
            return

        ttl = self.participants_ttl_seconds
        pipe = self._redis.pipeline(transaction=True)
        for commit in event.commits:
            participants_key = keys.participants_key(commit.id)
            pipe.sadd(participants_key, commit.author)
            pipe.expire(participants_key, ttl)
            pipe.set(keys.title_key(commit.id), commit.title, ex=ttl)
        pipe.execute()

        logger.debug(f"Recorded {len(event.commits)} commit(s) for push {event.id}")

    def _with_commit_title(self, event_type: str, event: Event) -> Event:
        """Rebuild a commit comment event with the title stored at push time."""
        title_key = keys.title_key(event.id)

        pipe = self._redis.pipeline(transaction=True)
        pipe.get(title_key)
        pipe.expire(title_key, self.participants_ttl_seconds)
        title, _ = pipe.execute()

        payload = copy.deepcopy(event.payload)
        payload['comment']['title'] = title
        return factory.create(event_type, payload)

    def _record_participants(self, event: Event) -> None:
        pipe = self._redis.pipeline(transaction=False)
        self._queue_participants(pipe, event)
        pipe.execute()

    def _record_and_fetch(self, event: Event) -> Tuple[Set[str], Set[str]]:
        """
        Record participants, then read watchers and all known participants.

        Returns:
            (watcher user ids, participant logins)
        """
        # Participant sets are only refreshed here. An issue whose set expired
        # starts over with whoever appears in the next event.
        pipe = self._redis.pipeline(transaction=False)
        self._queue_participants(pipe, event)
        pipe.sunion(self.watcher_keys(event))
        pipe.smembers(keys.participants_key(event.id))
        results = pipe.execute()

        return set(results[2]), set(results[3])

    def _queue_participants(self, pipe, event: Event) -> None:
        participants_key = keys.participants_key(event.id)
        pipe.sadd(participants_key, *sorted(event.all_logins))
        pipe.expire(participants_key, self.participants_ttl_seconds)

    @staticmethod
    def watcher_keys(event: Event) -> List[str]:
        """Issue watchers always; repo watchers only when something is opened."""
        watcher_keys = [keys.watchers_key("issue", event.id)]
        if event.action == "opened":
            watcher_keys.append(keys.watchers_key("repo", event.repo_id))
        return watcher_keys

    # ============ Delivery ============

    def _notify_review(self, watcher_ids, participant_logins, event: Event) -> None:
        """Fires after the review delay; a paired review comment wins the race."""
        if event.review_id in self.review_window:
            logger.info(f"Suppressing review {event.review_id} on {event.id}: "
                        f"its review comment already notified")
            return

        try:
            self.notify(watcher_ids, participant_logins, event)
        except RedisError as e:
            logger.error(f"Store error while notifying review {event.review_id}: {e}", exc_info=True)

    def notify(
        self,
        watcher_ids: Iterable[str],
        participant_logins: Iterable[str],
        event: Event
    ) -> List[str]:
        """
        Deliver an event to its watchers and aliased participants, except the sender.

        Returns:
            User ids the notification was delivered to
        """
        participant_ids = [login.lower() for login in participant_logins]

        pipe = self._redis.pipeline(transaction=True)
        if participant_ids:
            pipe.hmget(keys.LOGINS_HASH, participant_ids)
        pipe.hget(keys.LOGINS_HASH, event.sender.lower())
        results = pipe.execute()

        resolved_ids = results[0] if participant_ids else []
        sender_id = results[-1]

        recipients = set(watcher_ids)
        recipients.update(user_id for user_id in resolved_ids if user_id)

        if sender_id in recipients:
            recipients.discard(sender_id)
            logger.info(f"Skipping {event.sender}: {event.details.fallback}")

        if not recipients:
            logger.debug(f"No recipients for {event.id}")
            return []

        payload = NotificationMessageBuilder.build_payload(
            event.details,
            rich=self.channel.supports_attachments
        )

        delivered = []
        for user_id in sorted(recipients):
            try:
                success = self.channel.deliver(user_id, payload)
            except Exception as e:
                logger.error(f"Delivery to {user_id} raised: {e}", exc_info=True)
                success = False

            if success:
                delivered.append(user_id)
                logger.info(f"Delivered {event.id} ({event.kind.value} {event.action}) to {user_id}")
            else:
                logger.warning(f"Delivery failed for {user_id}: {event.id}")

        return delivered
