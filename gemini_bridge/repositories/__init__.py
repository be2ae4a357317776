"""
Data access layer
"""

from gemini_bridge.repositories.kv_store_repo import KVStoreRepository

__all__ = ["KVStoreRepository"]
