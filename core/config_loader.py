import yaml
import os
from typing import Optional, Literal
from pydantic import BaseModel, Field

from core.store.connection import PARTICIPANTS_TTL_SECONDS

DEFAULT_CONFIG_PATH = "config.yaml"


class RedisConfig(BaseModel):
    url: str = "redis://localhost:6379/0"
    password: Optional[str] = None
    socket_timeout_seconds: float = 5.0


class NotificationConfig(BaseModel):
    """
    Configuration for the notification engine.

    Controls bookkeeping lifetimes and the review/comment race window.
    """
    # Delivery channel used for every recipient ("slack" or "log")
    channel: Literal["slack", "log"] = "slack"

    # Lifetime of participants:<id> and title:<commit> keys, refreshed on every event
    participants_ttl_seconds: int = PARTICIPANTS_TTL_SECONDS

    # How long a "commented" review waits for its paired review comment
    review_suppression_delay_seconds: float = 1.0

    # Number of recent review-comment review ids remembered
    review_window_size: int = 100


class SlackConfig(BaseModel):
    bot_token: Optional[str] = None
    api_url: str = "https://slack.com/api"
    request_timeout_seconds: int = 30
    rate_limit_max_wait_seconds: int = 60
    max_retries: int = 3


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    webhook_path: str = Field(default="/github-spy")


class AppConfig(BaseModel):
    redis: RedisConfig = Field(default_factory=RedisConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    config_path = config_path or os.environ.get("GITHUB_SPY_CONFIG", DEFAULT_CONFIG_PATH)

    # If not found at relative path (e.g. running from another directory), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", os.path.basename(config_path))

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        data.setdefault('redis', {})
        data['redis']['url'] = env_redis_url

    # Allow env var override for the Slack token so it stays out of config files
    env_slack_token = os.environ.get("SLACK_BOT_TOKEN")
    if env_slack_token:
        data.setdefault('slack', {})
        data['slack']['bot_token'] = env_slack_token

    env_channel = os.environ.get("GITHUB_SPY_CHANNEL")
    if env_channel:
        data.setdefault('notifications', {})
        data['notifications']['channel'] = env_channel

    return AppConfig(**data)
