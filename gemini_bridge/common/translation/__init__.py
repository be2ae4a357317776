"""
OpenAI <-> Gemini Protocol Translation

Example usage:
    from gemini_bridge.common.translation import (
        openai_to_gemini_request,
        gemini_chunk_to_openai_sse,
        gemini_response_to_openai,
    )

    gemini_request = openai_to_gemini_request(body, requested_model_id="gemini-2.0-flash")
    upstream_body = gemini_request.to_dict()

    # Streaming: once per decoded upstream event
    sse_text = gemini_chunk_to_openai_sse(event, "gemini-2.0-flash")

    # Non-streaming: once per complete response
    json_text = gemini_response_to_openai(response, "gemini-2.0-flash")
"""

from .base import (
    SkipReason,
    SkipRecord,
    make_tool_call_id,
    map_finish_reason,
    parse_tool_call_id,
)
from .request import (
    GeminiRequest,
    openai_generation_config,
    openai_to_gemini_request,
    safety_settings,
)
from .response import gemini_response_to_openai
from .stream import gemini_chunk_to_openai_sse

__all__ = [
    "GeminiRequest",
    "SkipReason",
    "SkipRecord",
    "gemini_chunk_to_openai_sse",
    "gemini_response_to_openai",
    "make_tool_call_id",
    "map_finish_reason",
    "openai_generation_config",
    "openai_to_gemini_request",
    "parse_tool_call_id",
    "safety_settings",
]
