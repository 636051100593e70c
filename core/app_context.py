from dataclasses import dataclass
from typing import Any, Dict

from redis import Redis

from chat.commands import ChatCommandHandler
from core.config_loader import AppConfig
from core.store.connection import create_redis
from notification.channels import DeliveryChannel, DeliveryChannelFactory
from notification.engine import NotificationEngine
from notification.suppression import RecentReviewWindow, ThreadingScheduler
from watch.registry import WatchRegistry


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Built once per process; the web app and the entry point share it.
    """
    config: AppConfig
    redis: Redis
    registry: WatchRegistry
    engine: NotificationEngine
    commands: ChatCommandHandler

    @classmethod
    def build(cls, config: AppConfig, redis: Redis = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            redis: Existing client to use instead of connecting from config

        Returns:
            Fully wired AppContext instance
        """
        if redis is None:
            redis = create_redis(
                config.redis.url,
                password=config.redis.password,
                socket_timeout=config.redis.socket_timeout_seconds
            )

        registry = WatchRegistry(redis)
        engine = cls._build_engine(config, redis)

        return cls(
            config=config,
            redis=redis,
            registry=registry,
            engine=engine,
            commands=ChatCommandHandler(registry)
        )

    @classmethod
    def _build_engine(cls, config: AppConfig, redis: Redis) -> NotificationEngine:
        notification_config = config.notifications

        return NotificationEngine(
            redis=redis,
            channel=cls._build_channel(config),
            scheduler=ThreadingScheduler(),
            review_window=RecentReviewWindow(notification_config.review_window_size),
            participants_ttl_seconds=notification_config.participants_ttl_seconds,
            review_delay_seconds=notification_config.review_suppression_delay_seconds
        )

    @staticmethod
    def _build_channel(config: AppConfig) -> DeliveryChannel:
        """Build the delivery channel selected in configuration."""
        channel_type = config.notifications.channel
        options: Dict[str, Any] = {}

        if channel_type == 'slack':
            slack = config.slack
            options = {
                'bot_token': slack.bot_token,
                'api_url': slack.api_url,
                'request_timeout_seconds': slack.request_timeout_seconds,
                'rate_limit_max_wait_seconds': slack.rate_limit_max_wait_seconds,
                'max_retries': slack.max_retries,
            }

        return DeliveryChannelFactory.get_channel(channel_type, **options)
