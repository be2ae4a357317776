"""
Key-Value Store Domain Model

Defines KV Store related Data Transfer Objects (DTOs).
"""

from typing import Optional

from pydantic import BaseModel, Field


class KVKey(BaseModel):
    """A listed key (namespace prefix removed)"""

    name: str = Field(..., description="Key")


class KVListResult(BaseModel):
    """One page of a key listing"""

    keys: list[KVKey] = Field(default_factory=list, description="Keys in this page")
    list_complete: bool = Field(True, description="Whether no further pages exist")
    cursor: Optional[str] = Field(None, description="Cursor for the next page")
