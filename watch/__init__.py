"""Watch Module - subscriptions and login aliases."""
from watch.registry import (
    WatchRegistry,
    WatchType,
    canonical_name
)

__all__ = [
    'WatchRegistry',
    'WatchType',
    'canonical_name'
]
