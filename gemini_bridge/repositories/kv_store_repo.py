"""
Key-Value Store Repository Interface

A stateless adapter over a durable, externally managed namespace. Every call
reads or writes the backing store directly; nothing is cached locally.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Literal, Optional

from gemini_bridge.common.errors import ValidationError
from gemini_bridge.domain.kv_store import KVListResult

ValueType = Literal["text", "json", "bytes"]
_VALUE_TYPES = ("text", "json", "bytes")


class KVStoreRepository(ABC):
    """Key-Value Store Repository Interface"""

    def __init__(self, namespace: str):
        self.namespace = namespace

    @staticmethod
    def _serialize(value: Any) -> str:
        """Strings are stored as-is, anything else as JSON."""
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)

    @staticmethod
    def _decode(raw: Optional[str], value_type: str) -> Any:
        if value_type not in _VALUE_TYPES:
            raise ValidationError(
                message=f"Unsupported KV value type '{value_type}'",
                code="unsupported_value_type",
                details={"supported": list(_VALUE_TYPES)},
            )
        if raw is None:
            return None
        if value_type == "json":
            try:
                return json.loads(raw)
            except ValueError as e:
                raise ValidationError(
                    message="Stored value is not valid JSON",
                    code="invalid_json_value",
                ) from e
        if value_type == "bytes":
            return raw.encode("utf-8")
        return raw

    @abstractmethod
    async def get(self, key: str, value_type: ValueType = "text") -> Any:
        """
        Get value by key

        Args:
            key: The key to look up
            value_type: "text" (raw string), "json" (parsed) or "bytes"

        Returns:
            The decoded value, or None if the key doesn't exist
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """
        Set a key-value pair, overwriting any existing value

        Args:
            key: The key to set
            value: A string, or any JSON-serializable value
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def list(
        self,
        prefix: Optional[str] = None,
        limit: int = 1000,
        cursor: Optional[str] = None,
    ) -> KVListResult:
        """
        List keys in the namespace

        Args:
            prefix: Only return keys starting with this prefix
            limit: Maximum number of keys per page
            cursor: Cursor returned by the previous page

        Returns:
            KVListResult: One page of keys and the cursor for the next page
        """
        pass
