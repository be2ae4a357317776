"""
Shared Translation Primitives

Finish-reason mapping, synthetic id generation, candidate part classification
and skip bookkeeping used by the request, stream and response translators.
"""

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from gemini_bridge.common.time import now_ms

# Gemini terminal reasons with a direct OpenAI equivalent
_TERMINAL_FINISH_REASONS = {
    "STOP": "stop",
    "MAX_TOKENS": "length",
    "SAFETY": "content_filter",
    "RECITATION": "content_filter",
}
_PLACEHOLDER_FINISH_REASONS = {"FINISH_REASON_UNSPECIFIED", "OTHER"}

TOOL_CALL_ID_PREFIX = "call_"
# call_<name>_<timestamp>_<index>; the name itself may contain underscores
_TOOL_CALL_ID_RE = re.compile(r"^call_(.+)_(\d+)_(\d+)$", re.DOTALL)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class SkipReason(str, Enum):
    """Why a message or part was left out of a translation."""

    INVALID_MESSAGE = "invalid_message"
    UNKNOWN_ROLE = "unknown_role"
    MISSING_TOOL_CALL_ID = "missing_tool_call_id"
    DUPLICATE_TOOL_CALL_ID = "duplicate_tool_call_id"
    INVALID_TOOL_ARGUMENTS = "invalid_tool_arguments"
    MISSING_IMAGE_URL = "missing_image_url"
    UNSUPPORTED_IMAGE_URL = "unsupported_image_url"
    UNSUPPORTED_PART = "unsupported_part"
    EMPTY_MESSAGE = "empty_message"


@dataclass(frozen=True)
class SkipRecord:
    """One skipped message (or part of a message) in a request translation."""

    index: int
    role: Optional[str]
    reason: SkipReason
    detail: str = ""


@dataclass
class CandidateParts:
    """The first candidate's parts, split into the OpenAI-facing channels."""

    thoughts: List[Dict[str, Any]] = field(default_factory=list)
    text: Optional[str] = None
    function_calls: List[Dict[str, Any]] = field(default_factory=list)


def map_finish_reason(reason: Optional[str], has_tool_calls: bool) -> Optional[str]:
    """
    Map a Gemini `finishReason` onto an OpenAI `finish_reason`.

    Precedence: direct terminal mapping, then tool calls, then passthrough of
    any other non-placeholder reason, else None.
    """
    if reason in _TERMINAL_FINISH_REASONS:
        return _TERMINAL_FINISH_REASONS[reason]
    if reason == "TOOL_CALLS" or (has_tool_calls and reason not in ("stop", "length")):
        return "tool_calls"
    if reason and reason not in _PLACEHOLDER_FINISH_REASONS:
        return reason
    return None


def make_tool_call_id(name: str, index: int, timestamp_ms: Optional[int] = None) -> str:
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    return f"{TOOL_CALL_ID_PREFIX}{name}_{ts}_{index}"


def parse_tool_call_id(tool_call_id: Optional[str]) -> Optional[str]:
    """
    Recover the function name from an id produced by `make_tool_call_id`.

    >>> parse_tool_call_id("call_getWeather_1700000000000_0")
    'getWeather'
    >>> parse_tool_call_id("call_get_weather_1700000000000_2")
    'get_weather'
    >>> parse_tool_call_id("call_abc123") is None
    True
    """
    if not tool_call_id or not isinstance(tool_call_id, str):
        return None
    match = _TOOL_CALL_ID_RE.match(tool_call_id)
    return match.group(1) if match else None


def make_completion_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"chatcmpl-{now_ms()}-{suffix}"


def make_error_completion_id() -> str:
    return f"chatcmpl-error-{now_ms()}"


def thought_to_event(part: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Convert a thought part into its `thought_process` payload.

    Only structured thoughts (`toolCode` or `placeholder`) produce an event. A
    `thought: true` flag on a text part is not an event; its text stays content.
    """
    thought = part.get("thought")
    if not isinstance(thought, dict):
        return None
    if thought.get("toolCode"):
        return {"type": "tool_code", "content": thought["toolCode"]}
    if "placeholder" in thought:
        return {"type": "placeholder"}
    return None


def split_candidate_parts(candidate: Dict[str, Any]) -> CandidateParts:
    """
    Separate a candidate's parts into thought events, concatenated text and function calls.

    Raises on structurally malformed parts; callers turn that into an error chunk/response.
    """
    result = CandidateParts()
    content = candidate.get("content") or {}
    parts = content.get("parts") or []

    texts: List[str] = []
    for part in parts:
        event = thought_to_event(part)
        if event is not None:
            result.thoughts.append(event)
        if isinstance(part.get("text"), str):
            texts.append(part["text"])
        if part.get("functionCall") is not None:
            result.function_calls.append(part["functionCall"])

    if texts:
        result.text = "".join(texts)
    return result


def candidate_role(candidate: Dict[str, Any]) -> Optional[str]:
    content = candidate.get("content") or {}
    role = content.get("role")
    if not role:
        return None
    return "assistant" if role == "model" else role
