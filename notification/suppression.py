#!/usr/bin/env python3
"""
Review/comment race suppression

GitHub sends two webhooks when a reviewer leaves line comments: a
``pull_request_review`` with state "commented" and one
``pull_request_review_comment`` per line comment. Both would notify the same
people, so the review notification waits briefly and is dropped if a comment
belonging to that review was seen in the meantime.

This is a best-effort, single-process heuristic. State lives in memory and
scheduled callbacks are never cancelled; each decides at fire time.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Callable, Deque, Hashable

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 100


class RecentReviewWindow:
    """
    Bounded recency set of review ids seen on review comments.

    Holds at most ``capacity`` ids; adding to a full window evicts the oldest.
    """

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._ids: Deque[Hashable] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(self, review_id: Hashable) -> None:
        with self._lock:
            self._ids.append(review_id)

    def __contains__(self, review_id: Hashable) -> bool:
        with self._lock:
            return review_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)


class ScheduledCall(ABC):
    """Handle for a pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running if it has not started yet."""
        pass


class Scheduler(ABC):
    """Runs a callback after a delay."""

    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        pass


class TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer):
        self.timer = timer

    def cancel(self) -> None:
        self.timer.cancel()


class ThreadingScheduler(Scheduler):
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def call_later(self, delay_seconds: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        timer = threading.Timer(delay_seconds, self._run, args=(callback, args))
        timer.daemon = True
        timer.start()
        return TimerCall(timer)

    @staticmethod
    def _run(callback: Callable[..., Any], args: tuple) -> None:
        # Nothing above a timer thread would log this
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Scheduled callback failed: {e}", exc_info=True)
