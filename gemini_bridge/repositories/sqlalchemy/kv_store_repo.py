"""
Key-Value Store Repository SQLAlchemy Implementation

Provides concrete database operation implementation for KV Store.
"""

from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_bridge.common.time import utc_now_naive
from gemini_bridge.db.models import KeyValueEntry
from gemini_bridge.domain.kv_store import KVKey, KVListResult
from gemini_bridge.repositories.kv_store_repo import KVStoreRepository, ValueType


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyKVStoreRepository(KVStoreRepository):
    """
    Key-Value Store Repository SQLAlchemy Implementation

    Uses SQLAlchemy ORM to implement database operations for KV Store.
    """

    def __init__(self, session: AsyncSession, namespace: str):
        """
        Initialize Repository

        Args:
            session: Async database session
            namespace: Namespace isolating this store's keys
        """
        super().__init__(namespace)
        self.session = session

    async def _get_entity(self, key: str) -> Optional[KeyValueEntry]:
        result = await self.session.execute(
            select(KeyValueEntry).where(
                KeyValueEntry.namespace == self.namespace,
                KeyValueEntry.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, key: str, value_type: ValueType = "text") -> Any:
        """Get value by key, returns None if not found"""
        entity = await self._get_entity(key)
        return self._decode(entity.value if entity else None, value_type)

    async def put(self, key: str, value: Any) -> None:
        """Set a key-value pair"""
        serialized = self._serialize(value)
        entity = await self._get_entity(key)

        if entity:
            # Update existing
            entity.value = serialized
            entity.updated_at = utc_now_naive()
        else:
            # Create new
            now = utc_now_naive()
            self.session.add(
                KeyValueEntry(
                    namespace=self.namespace,
                    key=key,
                    value=serialized,
                    created_at=now,
                    updated_at=now,
                )
            )

        await self.session.commit()

    async def delete(self, key: str) -> bool:
        """Delete a key"""
        result = await self.session.execute(
            delete(KeyValueEntry).where(
                KeyValueEntry.namespace == self.namespace,
                KeyValueEntry.key == key,
            )
        )
        await self.session.commit()
        return result.rowcount > 0

    async def list(
        self,
        prefix: Optional[str] = None,
        limit: int = 1000,
        cursor: Optional[str] = None,
    ) -> KVListResult:
        """List keys ordered by name; the cursor is the last key of the previous page"""
        query = select(KeyValueEntry.key).where(KeyValueEntry.namespace == self.namespace)
        if prefix:
            query = query.where(KeyValueEntry.key.like(f"{_escape_like(prefix)}%", escape="\\"))
        if cursor:
            query = query.where(KeyValueEntry.key > cursor)
        # Fetch one extra row to know whether another page exists
        query = query.order_by(KeyValueEntry.key).limit(limit + 1)

        result = await self.session.execute(query)
        names = list(result.scalars().all())

        list_complete = len(names) <= limit
        names = names[:limit]
        return KVListResult(
            keys=[KVKey(name=name) for name in names],
            list_complete=list_complete,
            cursor=None if list_complete else names[-1],
        )
