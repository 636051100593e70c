#!/usr/bin/env python3
"""
Tests for the recent review window and schedulers.
"""

import threading

import pytest

from notification.suppression import RecentReviewWindow, ThreadingScheduler
from tests.mocks.scheduler_mocks import ManualScheduler


class TestRecentReviewWindow:

    def test_records_ids(self):
        window = RecentReviewWindow()
        window.record(900)

        assert 900 in window
        assert 901 not in window
        assert len(window) == 1

    def test_evicts_oldest_when_full(self):
        window = RecentReviewWindow(capacity=3)
        for review_id in range(5):
            window.record(review_id)

        assert len(window) == 3
        assert 0 not in window
        assert 1 not in window
        assert all(review_id in window for review_id in (2, 3, 4))

    def test_default_capacity(self):
        window = RecentReviewWindow()
        for review_id in range(150):
            window.record(review_id)

        assert len(window) == 100
        assert 49 not in window
        assert 50 in window

    def test_rejects_empty_capacity(self):
        with pytest.raises(ValueError):
            RecentReviewWindow(capacity=0)

    def test_concurrent_records(self):
        window = RecentReviewWindow(capacity=1000)

        def record(offset):
            for review_id in range(offset, offset + 100):
                window.record(review_id)

        threads = [threading.Thread(target=record, args=(offset,)) for offset in range(0, 500, 100)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(window) == 500


class TestThreadingScheduler:

    def test_runs_callback_with_args(self):
        fired = threading.Event()
        received = []

        def callback(*args):
            received.extend(args)
            fired.set()

        ThreadingScheduler().call_later(0.01, callback, "a", 1)

        assert fired.wait(timeout=5)
        assert received == ["a", 1]

    def test_cancel_prevents_callback(self):
        fired = threading.Event()

        handle = ThreadingScheduler().call_later(0.5, fired.set)
        handle.cancel()
        handle.timer.join(timeout=5)

        assert not fired.is_set()

    def test_callback_errors_are_logged(self, caplog):
        done = threading.Event()

        def callback():
            done.set()
            raise RuntimeError("boom")

        handle = ThreadingScheduler().call_later(0.01, callback)
        assert done.wait(timeout=5)
        handle.timer.join(timeout=5)

        assert "Scheduled callback failed: boom" in caplog.text


class TestManualScheduler:

    def test_fires_only_when_due(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1.0, fired.append, "late")
        scheduler.call_later(0.5, fired.append, "early")

        assert scheduler.advance(0.25) == 0
        assert scheduler.advance(1.0) == 2
        assert fired == ["early", "late"]
        assert scheduler.pending == 0

    def test_cancelled_calls_do_not_fire(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1.0, fired.append, "x").cancel()

        assert scheduler.pending == 0
        assert scheduler.advance(1.0) == 0
        assert fired == []
