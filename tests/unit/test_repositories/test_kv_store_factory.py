"""
Test KV Store Factory
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from gemini_bridge.common.errors import ServiceError
from gemini_bridge.repositories.factory import create_kv_store
from gemini_bridge.repositories.redis import RedisKVStoreRepository
from gemini_bridge.repositories.sqlalchemy import SQLAlchemyKVStoreRepository


def _settings(store_type):
    return SimpleNamespace(KV_STORE_TYPE=store_type, KV_NAMESPACE="default_ns")


def test_database_backend():
    with patch("gemini_bridge.repositories.factory.get_settings", return_value=_settings("database")):
        store = create_kv_store(session=MagicMock())

    assert isinstance(store, SQLAlchemyKVStoreRepository)
    assert store.namespace == "default_ns"


def test_database_backend_requires_session():
    with patch("gemini_bridge.repositories.factory.get_settings", return_value=_settings("database")):
        with pytest.raises(ServiceError):
            create_kv_store()


def test_redis_backend():
    client = MagicMock()
    with patch("gemini_bridge.repositories.factory.get_settings", return_value=_settings("redis")), patch(
        "gemini_bridge.repositories.factory.get_redis", return_value=client
    ):
        store = create_kv_store(namespace="custom")

    assert isinstance(store, RedisKVStoreRepository)
    assert store.client is client
    assert store.namespace == "custom"
