"""
Key-Value Store Repository Redis Implementation

Provides concrete Redis operation implementation for KV Store.
Keys are stored as `<namespace>:<key>` and listed with SCAN.
"""

import re
from typing import Any, Optional

from redis.asyncio import Redis

from gemini_bridge.domain.kv_store import KVKey, KVListResult
from gemini_bridge.repositories.kv_store_repo import KVStoreRepository, ValueType

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


class RedisKVStoreRepository(KVStoreRepository):
    """
    Key-Value Store Repository Redis Implementation

    Values are stored as plain strings; the client must use decode_responses=True.
    """

    def __init__(self, client: Redis, namespace: str):
        """
        Initialize Repository

        Args:
            client: Async Redis client instance
            namespace: Namespace isolating this store's keys
        """
        super().__init__(namespace)
        self.client = client

    def _full_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str, value_type: ValueType = "text") -> Any:
        """Get value by key, returns None if not found"""
        raw = await self.client.get(self._full_key(key))
        return self._decode(raw, value_type)

    async def put(self, key: str, value: Any) -> None:
        """Set a key-value pair"""
        await self.client.set(self._full_key(key), self._serialize(value))

    async def delete(self, key: str) -> bool:
        """Delete a key"""
        deleted_count = await self.client.delete(self._full_key(key))
        return deleted_count > 0

    async def list(
        self,
        prefix: Optional[str] = None,
        limit: int = 1000,
        cursor: Optional[str] = None,
    ) -> KVListResult:
        """
        List keys with SCAN

        `limit` is passed as the SCAN COUNT hint, so a page may hold more or fewer keys.
        """
        pattern = self._full_key(_GLOB_SPECIAL.sub(r"\\\1", prefix or "")) + "*"
        next_cursor, raw_keys = await self.client.scan(
            cursor=int(cursor or 0), match=pattern, count=limit
        )

        strip = len(self.namespace) + 1
        keys = [KVKey(name=raw[strip:]) for raw in raw_keys]
        list_complete = int(next_cursor) == 0
        return KVListResult(
            keys=keys,
            list_complete=list_complete,
            cursor=None if list_complete else str(next_cursor),
        )
