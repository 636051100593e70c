#!/usr/bin/env python3
"""
Delivery Channels

Each channel delivers one rendered notification to one chat user. The
engine asks a channel once, per notification, whether it renders rich
attachments and builds the payload accordingly.

Usage:
    from notification.channels import DeliveryChannelFactory

    channel = DeliveryChannelFactory.get_channel('slack', bot_token='xoxb-...')
    channel.deliver('U123', payload)
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional
import logging
import time

import requests
from tenacity import (
    Retrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from notification.message_builder import Payload

logger = logging.getLogger(__name__)


class RateLimitException(Exception):
    """Raised when a chat API rate limits a delivery."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DeliveryChannel(ABC):
    """
    Abstract base class for all delivery channels.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the channel type identifier."""
        pass

    @property
    def supports_attachments(self) -> bool:
        """Whether payloads should be rendered as rich attachments."""
        return False

    @abstractmethod
    def deliver(self, user_id: str, payload: Payload) -> bool:
        """
        Deliver a notification to a chat user.

        Args:
            user_id: Chat user id of the recipient
            payload: Attachment dict when supports_attachments, else plain text

        Returns:
            True if delivered, False otherwise
        """
        pass

    def validate_config(self) -> bool:
        return True


class SlackChannel(DeliveryChannel):
    """Direct messages through the Slack Web API (chat.postMessage)."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        api_url: str = "https://slack.com/api",
        request_timeout_seconds: int = 30,
        rate_limit_max_wait_seconds: int = 60,
        max_retries: int = 3,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.bot_token = bot_token
        self.api_url = api_url.rstrip('/')
        self.request_timeout_seconds = request_timeout_seconds
        self.rate_limit_max_wait_seconds = rate_limit_max_wait_seconds
        self.max_retries = max(1, max_retries)
        self._sleep = sleep

    @property
    def channel_type(self) -> str:
        return 'slack'

    @property
    def supports_attachments(self) -> bool:
        return True

    def validate_config(self) -> bool:
        return bool(self.bot_token)

    def deliver(self, user_id: str, payload: Payload) -> bool:
        if not self.validate_config():
            logger.error("Slack bot token not configured - SLACK_BOT_TOKEN not set")
            return False

        message: Dict[str, Any] = {'channel': user_id}
        if isinstance(payload, dict):
            message['attachments'] = [payload]
            message['text'] = payload.get('fallback', '')
        else:
            message['text'] = payload

        retrying = Retrying(
            retry=retry_if_exception_type(RateLimitException),
            stop=stop_after_attempt(self.max_retries),
            wait=self._rate_limit_wait,
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )

        try:
            for attempt in retrying:
                with attempt:
                    return self._post_message(message)
        except RateLimitException as e:
            logger.error(f"Slack rate limit persisted after {self.max_retries} attempts for {user_id}: {e}")
            return False
        except requests.RequestException as e:
            logger.error(f"Failed to send Slack message to {user_id}: {e}")
            return False
        return False

    def _post_message(self, message: Dict[str, Any]) -> bool:
        response = requests.post(
            f"{self.api_url}/chat.postMessage",
            json=message,
            headers={'Authorization': f"Bearer {self.bot_token}"},
            timeout=self.request_timeout_seconds
        )

        if response.status_code == 429:
            retry_after = response.headers.get('Retry-After')
            raise RateLimitException(
                "Slack rate limit hit",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        response.raise_for_status()

        body = response.json()
        if not body.get('ok'):
            logger.error(f"Slack rejected message to {message['channel']}: {body.get('error')}")
            return False

        logger.debug(f"Slack message sent to {message['channel']}")
        return True

    def _rate_limit_wait(self, retry_state: RetryCallState) -> float:
        """Honor Retry-After, capped to the configured maximum."""
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        retry_after = getattr(exc, 'retry_after', None) or 1
        return min(retry_after, self.rate_limit_max_wait_seconds)


class LogChannel(DeliveryChannel):
    """Writes plain-text notifications to the log instead of a chat service."""

    @property
    def channel_type(self) -> str:
        return 'log'

    def deliver(self, user_id: str, payload: Payload) -> bool:
        logger.info(f"[LOG] To {user_id}: {payload}")
        return True


class DeliveryChannelFactory:
    """
    Factory for creating delivery channels.

    New transports can be added with register_channel without modifying the
    engine.
    """

    # Registry of available channels
    _channels: Dict[str, type] = {
        'slack': SlackChannel,
        'log': LogChannel,
    }

    @classmethod
    def get_channel(cls, channel_type: str, **options: Any) -> DeliveryChannel:
        """
        Get a delivery channel instance by type.

        Args:
            channel_type: Type of channel (slack, log, ...)
            options: Constructor arguments for the channel

        Raises:
            ValueError: If channel type is not registered
        """
        channel_class = cls._channels.get(channel_type.lower())
        if not channel_class:
            raise ValueError(f"Unknown channel type: {channel_type}. "
                             f"Available: {', '.join(cls._channels.keys())}")

        return channel_class(**options)

    @classmethod
    def register_channel(cls, channel_type: str, channel_class: type):
        if not issubclass(channel_class, DeliveryChannel):
            raise ValueError("Channel class must extend DeliveryChannel")

        cls._channels[channel_type.lower()] = channel_class
        logger.info(f"Registered new channel type: {channel_type}")

    @classmethod
    def list_channels(cls) -> list:
        return list(cls._channels.keys())
