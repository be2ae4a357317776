"""
API Dependency Injection Module

Provides the dependencies required by FastAPI routes.
"""

from functools import lru_cache
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gemini_bridge.config import get_settings
from gemini_bridge.providers.gemini_client import GeminiClient
from gemini_bridge.repositories.factory import create_kv_store
from gemini_bridge.repositories.kv_store_repo import KVStoreRepository
from gemini_bridge.services.chat_service import ChatService


async def get_db() -> AsyncGenerator[Optional[AsyncSession], None]:
    """
    Get database session dependency

    Yields None when the KV store is not database-backed, so no engine is touched.
    """
    if get_settings().KV_STORE_TYPE != "database":
        yield None
        return

    from gemini_bridge.db.session import get_db as _get_db

    async for session in _get_db():
        yield session


DbSession = Annotated[Optional[AsyncSession], Depends(get_db)]


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Upstream client built from settings; it holds no per-request state."""
    return GeminiClient()


GeminiClientDep = Annotated[GeminiClient, Depends(get_gemini_client)]


def get_chat_service(client: GeminiClientDep) -> ChatService:
    """Get chat completion service"""
    return ChatService(client)


ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


def get_kv_store(db: DbSession) -> KVStoreRepository:
    """Get KV store for the configured backend"""
    return create_kv_store(session=db)


KVStoreDep = Annotated[KVStoreRepository, Depends(get_kv_store)]
