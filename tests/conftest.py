"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest
from unittest.mock import Mock

from notification import DeliveryChannel, NotificationEngine, RecentReviewWindow
from watch import WatchRegistry
from tests.mocks.redis_mocks import InMemoryRedis
from tests.mocks.scheduler_mocks import ManualScheduler


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "redis: marks tests as requiring a real Redis (deselect with '-m \"not redis\"')"
    )


@pytest.fixture
def memory_redis():
    """Fresh in-memory Redis double."""
    return InMemoryRedis()


@pytest.fixture
def registry(memory_redis):
    return WatchRegistry(memory_redis)


@pytest.fixture
def recording_channel():
    """Plain-text channel mock whose deliveries always succeed."""
    channel = Mock(spec=DeliveryChannel)
    channel.supports_attachments = False
    channel.deliver.return_value = True
    return channel


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(memory_redis, recording_channel, manual_scheduler):
    """Notification engine on the in-memory store with a manual clock."""
    return NotificationEngine(
        memory_redis,
        recording_channel,
        scheduler=manual_scheduler,
        review_window=RecentReviewWindow(),
    )
