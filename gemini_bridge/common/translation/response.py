"""
Gemini Response -> OpenAI Chat Completion Translation

Converts a complete (non-streaming) `generateContent` response into a
serialized `chat.completion` object. Thought parts are surfaced through the
`x_gemini_thought_process` extension field.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from gemini_bridge.common.time import now_ms, now_seconds
from gemini_bridge.common.translation.base import (
    make_completion_id,
    make_error_completion_id,
    make_tool_call_id,
    map_finish_reason,
    split_candidate_parts,
)

logger = logging.getLogger(__name__)

SAFETY_PLACEHOLDER = "[Content blocked due to safety settings]"
THOUGHT_PROCESS_FIELD = "x_gemini_thought_process"


def _error_response(model_id: str, message: str, finish_reason: str) -> str:
    return json.dumps(
        {
            "id": make_error_completion_id(),
            "object": "chat.completion",
            "created": now_seconds(),
            "model": model_id,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": message},
                    "finish_reason": finish_reason,
                    "logprobs": None,
                }
            ],
            "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
        },
        ensure_ascii=False,
    )


def _usage(response: Dict[str, Any]) -> Dict[str, int]:
    usage = response.get("usageMetadata") or {}
    return {
        "prompt_tokens": usage.get("promptTokenCount") or 0,
        "completion_tokens": usage.get("candidatesTokenCount") or 0,
        "total_tokens": usage.get("totalTokenCount") or 0,
    }


def gemini_response_to_openai(response: Any, model_id: str) -> str:
    """
    Translate a complete Gemini response into an OpenAI chat completion.

    Args:
        response: Decoded Gemini `generateContent` response
        model_id: Model id echoed in the OpenAI response

    Returns:
        str: JSON text of the OpenAI `chat.completion` object. Blocked or
        malformed responses produce an error completion instead of raising.
    """
    try:
        candidates = response.get("candidates")
        if not candidates:
            block_reason = (response.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                logger.warning(
                    "Gemini request blocked: %s %s", block_reason, json.dumps(response.get("promptFeedback"))
                )
                return _error_response(
                    model_id, f"Request blocked by Gemini: {block_reason}.", "content_filter"
                )
            logger.error("Invalid Gemini response structure: %r", response)
            return _error_response(model_id, "Gemini response missing candidates.", "error")

        candidate = candidates[0]
        parts = split_candidate_parts(candidate)

        timestamp = now_ms()
        tool_calls: List[Dict[str, Any]] = [
            {
                "id": make_tool_call_id(fc["name"], i, timestamp),
                "type": "function",
                "function": {
                    "name": fc["name"],
                    "arguments": json.dumps(fc.get("args") or {}, ensure_ascii=False),
                },
            }
            for i, fc in enumerate(parts.function_calls)
        ]

        raw_reason = candidate.get("finishReason")
        finish_reason = map_finish_reason(raw_reason, bool(tool_calls))
        content: Optional[str] = parts.text

        if content is None and not tool_calls and raw_reason == "SAFETY":
            logger.warning("Gemini response finished due to SAFETY, content might be missing.")
            content = SAFETY_PLACEHOLDER
            finish_reason = "content_filter"
        elif raw_reason == "RECITATION":
            logger.warning("Gemini response finished due to RECITATION.")
            finish_reason = "content_filter"

        message: Dict[str, Any] = {"role": "assistant"}
        if tool_calls:
            message["tool_calls"] = tool_calls
        message["content"] = content

        openai_response: Dict[str, Any] = {
            "id": make_completion_id(),
            "object": "chat.completion",
            "created": now_seconds(),
            "model": model_id,
            "choices": [
                {
                    "index": candidate.get("index") or 0,
                    "message": message,
                    "finish_reason": finish_reason,
                    "logprobs": None,
                }
            ],
            "usage": _usage(response),
            "system_fingerprint": None,
        }
        if parts.thoughts:
            openai_response[THOUGHT_PROCESS_FIELD] = parts.thoughts

        return json.dumps(openai_response, ensure_ascii=False)

    except Exception as e:
        logger.error("Error transforming Gemini non-stream response: %s. Response: %r", e, response, exc_info=True)
        return _error_response(model_id, f"Error processing Gemini response: {e}", "error")
