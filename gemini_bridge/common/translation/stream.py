"""
Gemini Stream Event -> OpenAI SSE Translation

Each decoded `streamGenerateContent` event is translated on its own; no partial
text is buffered across calls.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from gemini_bridge.common.sse import encode_sse_data, encode_sse_event
from gemini_bridge.common.time import now_ms, now_seconds
from gemini_bridge.common.translation.base import (
    candidate_role,
    make_completion_id,
    make_error_completion_id,
    make_tool_call_id,
    map_finish_reason,
    split_candidate_parts,
)

logger = logging.getLogger(__name__)

THOUGHT_EVENT = "thought_process"


def gemini_chunk_to_openai_sse(chunk: Any, model_id: str) -> Optional[str]:
    """
    Translate one Gemini stream event into OpenAI SSE text.

    Args:
        chunk: The decoded JSON object of one Gemini stream line
        model_id: Model id echoed in the OpenAI chunk

    Returns:
        Concatenated SSE blocks (`thought_process` events first, then at most one
        `chat.completion.chunk`), or None when the event carries nothing to forward.
        Never raises: failures become a single error chunk.
    """
    try:
        candidates = chunk.get("candidates") if chunk else None
        if not candidates:
            if not (chunk and chunk.get("usageMetadata")):
                logger.warning("Received empty or invalid Gemini stream chunk: %r", chunk)
            return None

        candidate = candidates[0]
        parts = split_candidate_parts(candidate)

        events: List[str] = [encode_sse_event(THOUGHT_EVENT, thought) for thought in parts.thoughts]

        timestamp = now_ms()
        tool_calls = [
            {
                "index": i,
                "id": make_tool_call_id(fc["name"], i, timestamp),
                "type": "function",
                "function": {
                    "name": fc["name"],
                    "arguments": json.dumps(fc.get("args") or {}, ensure_ascii=False),
                },
            }
            for i, fc in enumerate(parts.function_calls)
        ]

        finish_reason = map_finish_reason(candidate.get("finishReason"), bool(tool_calls))

        delta: Dict[str, Any] = {}
        role = candidate_role(candidate)
        if role and (parts.text is not None or tool_calls):
            delta["role"] = role
        if tool_calls:
            delta["tool_calls"] = tool_calls
            delta["content"] = parts.text
        elif parts.text is not None:
            delta["content"] = parts.text

        if delta or finish_reason:
            events.append(
                encode_sse_data(
                    {
                        "id": make_completion_id(),
                        "object": "chat.completion.chunk",
                        "created": now_seconds(),
                        "model": model_id,
                        "choices": [
                            {
                                "index": candidate.get("index") or 0,
                                "delta": delta,
                                "finish_reason": finish_reason,
                                "logprobs": None,
                            }
                        ],
                    }
                )
            )

        return "".join(events) if events else None

    except Exception as e:
        logger.error("Error transforming Gemini stream chunk: %s. Chunk: %r", e, chunk, exc_info=True)
        return encode_sse_data(
            {
                "id": make_error_completion_id(),
                "object": "chat.completion.chunk",
                "created": now_seconds(),
                "model": model_id,
                "choices": [
                    {
                        "index": 0,
                        "delta": {"content": f"[Error transforming chunk: {e}]"},
                        "finish_reason": "error",
                    }
                ],
            }
        )
