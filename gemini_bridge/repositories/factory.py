"""
KV Store Factory

Selects the KV store backend from KV_STORE_TYPE.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gemini_bridge.common.errors import ServiceError
from gemini_bridge.config import get_settings
from gemini_bridge.db.redis import get_redis
from gemini_bridge.repositories.kv_store_repo import KVStoreRepository
from gemini_bridge.repositories.redis import RedisKVStoreRepository
from gemini_bridge.repositories.sqlalchemy import SQLAlchemyKVStoreRepository


def create_kv_store(
    session: Optional[AsyncSession] = None,
    namespace: Optional[str] = None,
) -> KVStoreRepository:
    """
    Create a KV store for the configured backend

    Args:
        session: Database session (required for the "database" backend)
        namespace: Overrides KV_NAMESPACE

    Returns:
        KVStoreRepository: A freshly constructed, stateless store adapter
    """
    settings = get_settings()
    namespace = namespace or settings.KV_NAMESPACE

    if settings.KV_STORE_TYPE == "redis":
        return RedisKVStoreRepository(get_redis(), namespace)

    if session is None:
        raise ServiceError(
            message="A database session is required for the 'database' KV store",
            code="kv_store_unavailable",
        )
    return SQLAlchemyKVStoreRepository(session, namespace)
