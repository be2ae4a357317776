"""
Redis Repository Implementations
"""

from gemini_bridge.repositories.redis.kv_store_repo import RedisKVStoreRepository

__all__ = ["RedisKVStoreRepository"]
