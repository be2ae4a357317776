"""
Domain Models Module

Pydantic models shared by the API layer and repositories.
"""

from gemini_bridge.domain.chat import ChatCompletionRequest
from gemini_bridge.domain.kv_store import KVKey, KVListResult

__all__ = [
    "ChatCompletionRequest",
    "KVKey",
    "KVListResult",
]
