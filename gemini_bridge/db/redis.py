"""
Redis client for the "redis" KV store backend.
"""

import logging
from typing import Optional

from redis.asyncio import Redis

from gemini_bridge.common.errors import ServiceError
from gemini_bridge.config import get_settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


async def init_redis() -> Redis:
    """Connect to REDIS_URL and check the connection; called from the app lifespan."""
    global _client
    if _client is None:
        # Values are stored as text, see RedisKVStoreRepository
        _client = Redis.from_url(get_settings().REDIS_URL, decode_responses=True)
        await _client.ping()
        logger.info("Redis KV backend connected")
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> Redis:
    if _client is None:
        raise ServiceError(message="Redis KV backend is not connected", code="redis_not_initialized")
    return _client
