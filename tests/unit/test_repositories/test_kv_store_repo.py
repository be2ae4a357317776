"""
Test Key-Value Store Repository
"""

import pytest

from gemini_bridge.common.errors import ValidationError
from gemini_bridge.repositories.sqlalchemy.kv_store_repo import SQLAlchemyKVStoreRepository


@pytest.mark.asyncio
async def test_put_and_get(db_session):
    """Test setting and getting a key-value pair"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")

    await repo.put("greeting", "hello")

    assert await repo.get("greeting") == "hello"


@pytest.mark.asyncio
async def test_get_nonexistent_key(db_session):
    """Test getting a non-existent key"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")

    assert await repo.get("missing") is None
    assert await repo.get("missing", "json") is None


@pytest.mark.asyncio
async def test_put_overwrites(db_session):
    """Test that put replaces an existing value"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")

    await repo.put("k", "v1")
    await repo.put("k", "v2")

    assert await repo.get("k") == "v2"


@pytest.mark.asyncio
async def test_json_values(db_session):
    """Test storing structured values and reading them as JSON"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")

    await repo.put("config", {"enabled": True, "models": ["gemini-2.0-flash"]})

    assert await repo.get("config", "json") == {"enabled": True, "models": ["gemini-2.0-flash"]}
    assert await repo.get("config") == '{"enabled": true, "models": ["gemini-2.0-flash"]}'
    assert await repo.get("config", "bytes") == b'{"enabled": true, "models": ["gemini-2.0-flash"]}'


@pytest.mark.asyncio
async def test_invalid_json_value(db_session):
    """Test reading a plain string as JSON"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")
    await repo.put("plain", "not json")

    with pytest.raises(ValidationError) as exc_info:
        await repo.get("plain", "json")
    assert exc_info.value.code == "invalid_json_value"


@pytest.mark.asyncio
async def test_unsupported_value_type(db_session):
    """Test that unknown value types are rejected"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")

    with pytest.raises(ValidationError) as exc_info:
        await repo.get("k", "stream")
    assert exc_info.value.code == "unsupported_value_type"


@pytest.mark.asyncio
async def test_delete(db_session):
    """Test deleting a key"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")
    await repo.put("k", "v")

    assert await repo.delete("k") is True
    assert await repo.get("k") is None
    assert await repo.delete("k") is False


@pytest.mark.asyncio
async def test_namespaces_are_isolated(db_session):
    """Test that the same key in different namespaces does not collide"""
    repo_a = SQLAlchemyKVStoreRepository(db_session, "a")
    repo_b = SQLAlchemyKVStoreRepository(db_session, "b")

    await repo_a.put("shared", "from-a")
    await repo_b.put("shared", "from-b")

    assert await repo_a.get("shared") == "from-a"
    assert await repo_b.get("shared") == "from-b"
    assert [k.name for k in (await repo_a.list()).keys] == ["shared"]


@pytest.mark.asyncio
async def test_list_with_prefix(db_session):
    """Test listing keys filtered by prefix"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")
    for key in ("user:2", "user:1", "session:1", "user_x"):
        await repo.put(key, "v")

    result = await repo.list(prefix="user:")

    assert [k.name for k in result.keys] == ["user:1", "user:2"]
    assert result.list_complete is True
    assert result.cursor is None


@pytest.mark.asyncio
async def test_list_prefix_escapes_wildcards(db_session):
    """Test that LIKE wildcards in the prefix match literally"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")
    await repo.put("a_b", "v")
    await repo.put("axb", "v")

    result = await repo.list(prefix="a_")

    assert [k.name for k in result.keys] == ["a_b"]


@pytest.mark.asyncio
async def test_list_pagination(db_session):
    """Test paging through keys with a cursor"""
    repo = SQLAlchemyKVStoreRepository(db_session, "test")
    for i in range(5):
        await repo.put(f"k{i}", str(i))

    first = await repo.list(limit=2)
    assert [k.name for k in first.keys] == ["k0", "k1"]
    assert first.list_complete is False
    assert first.cursor == "k1"

    second = await repo.list(limit=2, cursor=first.cursor)
    assert [k.name for k in second.keys] == ["k2", "k3"]

    third = await repo.list(limit=2, cursor=second.cursor)
    assert [k.name for k in third.keys] == ["k4"]
    assert third.list_complete is True
    assert third.cursor is None
