"""
KV Store Admin API

Direct get/put/delete/list access to the configured KV namespace.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Query, status

from gemini_bridge.api.deps import KVStoreDep
from gemini_bridge.common.errors import AppError
from gemini_bridge.domain.kv_store import KVListResult

router = APIRouter(prefix="/kv", tags=["KV Store"])


class KeyNotFoundError(AppError):
    """Raised when a requested key does not exist."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Key '{key}' not found",
            error_type="not_found_error",
            code="key_not_found",
            status_code=404,
        )


@router.get("", response_model=KVListResult)
async def list_keys(
    store: KVStoreDep,
    prefix: Optional[str] = Query(None, description="Key prefix filter"),
    limit: int = Query(1000, ge=1, le=1000, description="Page size"),
    cursor: Optional[str] = Query(None, description="Cursor from the previous page"),
):
    """List keys in the namespace"""
    return await store.list(prefix=prefix, limit=limit, cursor=cursor)


@router.get("/{key:path}")
async def get_value(
    key: str,
    store: KVStoreDep,
    value_type: str = Query("text", alias="type", pattern="^(text|json)$", description="Decode stored value as text or JSON"),
):
    """Get a value"""
    value = await store.get(key, value_type)
    if value is None:
        raise KeyNotFoundError(key)
    return {"key": key, "value": value}


@router.put("/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
async def put_value(key: str, store: KVStoreDep, value: Any = Body(..., embed=True)):
    """Set a value (strings stored as-is, other values as JSON)"""
    await store.put(key, value)


@router.delete("/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_value(key: str, store: KVStoreDep):
    """Delete a key"""
    if not await store.delete(key):
        raise KeyNotFoundError(key)
