"""
SQLAlchemy Repository Implementations
"""

from gemini_bridge.repositories.sqlalchemy.kv_store_repo import SQLAlchemyKVStoreRepository

__all__ = ["SQLAlchemyKVStoreRepository"]
