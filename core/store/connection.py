"""Redis connection helpers."""
import logging
from typing import Optional
from urllib.parse import urlparse

from redis import Redis

logger = logging.getLogger(__name__)

# 4 weeks in seconds
PARTICIPANTS_TTL_SECONDS = 4 * 7 * 24 * 60 * 60  # 2419200 seconds


def sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except ValueError:
        return url


def create_redis(
    redis_url: str = "redis://localhost:6379/0",
    password: Optional[str] = None,
    socket_timeout: float = 5
) -> Redis:
    """
    Create a Redis client with decoded (str) responses.

    The connection is validated with a ping so misconfiguration surfaces at
    startup instead of on the first webhook.
    """
    client = Redis.from_url(
        redis_url,
        password=password,
        decode_responses=True,
        socket_connect_timeout=socket_timeout,
        socket_timeout=socket_timeout
    )
    client.ping()
    logger.info(f"Connected to Redis at {sanitize_url(redis_url)}")
    return client


def is_connected(client: Redis) -> bool:
    """Check whether the Redis connection is alive."""
    try:
        return bool(client.ping())
    except Exception:
        return False
