"""Store Module - Redis connection and key layout."""
from core.store.connection import (
    create_redis,
    is_connected,
    sanitize_url,
    PARTICIPANTS_TTL_SECONDS
)
from core.store import keys

__all__ = [
    'create_redis',
    'is_connected',
    'sanitize_url',
    'PARTICIPANTS_TTL_SECONDS',
    'keys'
]
