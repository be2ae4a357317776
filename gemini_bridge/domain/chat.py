"""
Chat Completion Request Model

Validates only the envelope of an inbound OpenAI request. Individual messages
stay as raw dicts so the translator can skip malformed ones instead of
rejecting the whole request.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatCompletionRequest(BaseModel):
    """OpenAI-compatible chat completion request envelope"""

    model: str = Field(..., min_length=1, description="Requested model id")
    messages: list[Any] = Field(default_factory=list, description="OpenAI messages")
    tools: Optional[list[Any]] = Field(None, description="OpenAI tool definitions")
    stream: bool = Field(False, description="Whether to stream SSE chunks")
    is_safety_enabled: Optional[bool] = Field(
        None, alias="isSafetyEnabled", description="Overrides SAFETY_ENABLED_DEFAULT"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)
