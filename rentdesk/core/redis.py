"""
Redis/Valkey client configuration.

Rules:
- All configuration from centralized settings (config.py)
- Never use os.getenv directly
"""
from __future__ import annotations
from functools import lru_cache
import redis
from .config import settings


@lru_cache(maxsize=1)
def get_redis() -> redis.Redis | None:
    """Shared client for the settings cache, or None when REDIS_URL is unset."""
    if not settings.REDIS_URL:
        return None
    return redis.Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_keepalive=True,
    )
