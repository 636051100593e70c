"""
Notification Module

Fans GitHub events out to watching and participating chat users.

Usage:
    from notification import NotificationEngine, DeliveryChannelFactory

    channel = DeliveryChannelFactory.get_channel('log')
    engine = NotificationEngine(redis, channel)
    engine.handle('issues', payload)
"""

from notification.channels import (
    DeliveryChannel,
    SlackChannel,
    LogChannel,
    DeliveryChannelFactory,
    RateLimitException,
)

from notification.suppression import (
    RecentReviewWindow,
    ScheduledCall,
    Scheduler,
    ThreadingScheduler,
)

from notification.message_builder import (
    NotificationMessageBuilder,
    format_new_lines,
)

from notification.engine import (
    NotificationEngine,
)

__all__ = [
    # Channels
    'DeliveryChannel',
    'SlackChannel',
    'LogChannel',
    'DeliveryChannelFactory',
    'RateLimitException',
    # Suppression
    'RecentReviewWindow',
    'ScheduledCall',
    'Scheduler',
    'ThreadingScheduler',
    # Rendering
    'NotificationMessageBuilder',
    'format_new_lines',
    # Engine
    'NotificationEngine',
]
