#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests (unit + real Redis if available)
    uv run python -m pytest tests/ -v

    # Run only unit tests (no Redis required)
    uv run python -m pytest tests/ -v -m "not redis"

    # Using unittest
    uv run python -m unittest discover tests -v

Redis Setup:
    Unit tests run against the in-memory double in tests/mocks/redis_mocks.py.
    Integration tests use REDIS_URL when set, otherwise a throwaway Docker
    container (see tests/conftest_docker.py), and are skipped if neither works:

    export REDIS_URL="redis://localhost:6379/1"
"""

import os
from typing import Optional

from redis import Redis, RedisError

# Redis configuration
TEST_REDIS_URL = os.environ.get("REDIS_URL")

# Check if we should force skip Redis tests
SKIP_REDIS_TESTS = os.environ.get("SKIP_REDIS_TESTS", "false").lower() == "true"


def is_redis_available(url: Optional[str] = None) -> bool:
    """
    Check if a Redis server answers at the given URL (default REDIS_URL).
    """
    url = url or TEST_REDIS_URL
    if SKIP_REDIS_TESTS or not url:
        return False

    try:
        return bool(Redis.from_url(url, socket_connect_timeout=2).ping())
    except RedisError:
        return False
