"""
OpenAI Chat Completions -> Gemini Request Translation

Converts an OpenAI-shaped request body into Gemini `contents`, an optional
`systemInstruction` and optional `tools`. Malformed messages and parts are
skipped (logged and recorded on the result); the translation itself never fails.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from gemini_bridge.common.data_uri import parse_data_uri
from gemini_bridge.common.schema import sanitize_parameters_schema
from gemini_bridge.common.translation.base import (
    SkipReason,
    SkipRecord,
    parse_tool_call_id,
)
from gemini_bridge.common.translation.content import (
    AbsentContent,
    PartsContent,
    TextContent,
    classify_content,
)

logger = logging.getLogger(__name__)

UNKNOWN_TOOL_NAME = "unknown_tool"

_ROLE_MAP = {
    "user": "user",
    "assistant": "model",
    "tool": "user",
}

_HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
)


@dataclass
class GeminiRequest:
    """Gemini request fragment produced from one OpenAI request."""

    contents: List[Dict[str, Any]] = field(default_factory=list)
    system_instruction: Optional[Dict[str, Any]] = None
    tools: Optional[List[Dict[str, Any]]] = None
    skipped: List[SkipRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"contents": self.contents}
        if self.system_instruction is not None:
            out["systemInstruction"] = self.system_instruction
        if self.tools is not None:
            out["tools"] = self.tools
        return out


@dataclass
class _RequestState:
    """Mutable state scoped to a single translation call."""

    downgrade_system: bool
    requested_model_id: Optional[str]
    is_safety_enabled: bool
    tool_call_names: Dict[str, str] = field(default_factory=dict)
    consumed_tool_call_ids: set = field(default_factory=set)
    system_downgrade_logged: bool = False
    skipped: List[SkipRecord] = field(default_factory=list)

    def skip(self, index: int, role: Optional[str], reason: SkipReason, detail: str = "") -> None:
        self.skipped.append(SkipRecord(index=index, role=role, reason=reason, detail=detail))


def openai_to_gemini_request(
    body: Dict[str, Any],
    requested_model_id: Optional[str] = None,
    is_safety_enabled: Optional[bool] = None,
) -> GeminiRequest:
    """
    Translate an OpenAI Chat Completions request body into a Gemini request fragment.

    Args:
        body: OpenAI request body (`messages`, optional `tools`, optional
            `requestedModelId` / `model`, optional `isSafetyEnabled`)
        requested_model_id: Overrides the model id found in the body
        is_safety_enabled: Overrides `isSafetyEnabled` from the body (default True)

    Returns:
        GeminiRequest: contents, optional systemInstruction/tools and the skipped items
    """
    if requested_model_id is None:
        requested_model_id = body.get("requestedModelId") or body.get("model")
    if is_safety_enabled is None:
        is_safety_enabled = body.get("isSafetyEnabled", True)

    downgrade_system = is_safety_enabled is False or (
        isinstance(requested_model_id, str) and requested_model_id.startswith("gemma")
    )

    messages = body.get("messages") or []
    state = _RequestState(
        downgrade_system=downgrade_system,
        requested_model_id=requested_model_id,
        is_safety_enabled=is_safety_enabled,
        tool_call_names=_collect_tool_call_names(messages),
    )

    result = GeminiRequest()
    for index, msg in enumerate(messages):
        if not isinstance(msg, dict):
            logger.warning("Message at index %s is not an object. Skipping message.", index)
            state.skip(index, None, SkipReason.INVALID_MESSAGE, type(msg).__name__)
            continue

        role = msg.get("role")
        if role == "system" and not downgrade_system:
            instruction = _system_instruction(msg)
            if instruction is not None:
                result.system_instruction = instruction
            continue

        content = _translate_message(state, index, msg)
        if content is not None:
            result.contents.append(content)

    result.tools = _translate_tools(body.get("tools"))
    result.skipped = state.skipped
    return result


def _collect_tool_call_names(messages: List[Any]) -> Dict[str, str]:
    """Map every assistant tool-call id in the history to its function name."""
    names: Dict[str, str] = {}
    for msg in messages:
        if not isinstance(msg, dict) or msg.get("role") != "assistant":
            continue
        tool_calls = msg.get("tool_calls")
        if not isinstance(tool_calls, list):
            continue
        for tc in tool_calls:
            if not isinstance(tc, dict):
                continue
            fn = tc.get("function")
            if isinstance(tc.get("id"), str) and isinstance(fn, dict) and isinstance(fn.get("name"), str):
                names[tc["id"]] = fn["name"]
    return names


def _system_instruction(msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    content = classify_content(msg)
    if isinstance(content, TextContent):
        return {"role": "system", "parts": [{"text": content.text}]}
    if isinstance(content, PartsContent):
        texts = content.text_parts()
        if texts and texts[0]:
            return {"role": "system", "parts": [{"text": texts[0]}]}
    return None


def _translate_message(state: _RequestState, index: int, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    role = msg.get("role")

    if role == "system":
        if not state.system_downgrade_logged:
            logger.info(
                "Safety disabled (%s) or Gemma model detected (%s). Treating system message as user message.",
                state.is_safety_enabled,
                state.requested_model_id,
            )
            state.system_downgrade_logged = True
        gemini_role = "user"
        parts = _content_to_parts(state, index, msg)
    elif role == "tool":
        gemini_role = _ROLE_MAP[role]
        part = _tool_result_part(state, index, msg)
        if part is None:
            return None
        parts = [part]
    elif isinstance(role, str) and role in _ROLE_MAP:
        gemini_role = _ROLE_MAP[role]
        parts = _content_to_parts(state, index, msg)
        if role == "assistant":
            parts.extend(_tool_calls_to_parts(state, index, msg))
    else:
        logger.warning("Unknown role encountered: %s. Skipping message.", role)
        state.skip(index, role if isinstance(role, str) else None, SkipReason.UNKNOWN_ROLE, str(role))
        return None

    if not parts:
        content = classify_content(msg)
        if isinstance(content, AbsentContent):
            logger.warning("Message for role %s has no content. Skipping message.", role)
        else:
            logger.warning(
                "Unsupported content type for role %s: %s. Skipping message.",
                role,
                type(msg.get("content")).__name__,
            )
        state.skip(index, role, SkipReason.EMPTY_MESSAGE)
        return None

    return {"role": gemini_role, "parts": parts}


def _content_to_parts(state: _RequestState, index: int, msg: Dict[str, Any]) -> List[Dict[str, Any]]:
    role = msg.get("role")
    content = classify_content(msg)

    if isinstance(content, TextContent):
        return [{"text": content.text}]
    if not isinstance(content, PartsContent):
        return []

    parts: List[Dict[str, Any]] = []
    for item in content.parts:
        item_type = item.get("type") if isinstance(item, dict) else None
        if item_type == "text":
            parts.append({"text": item.get("text")})
        elif item_type == "image_url":
            image_url = item.get("image_url")
            url = image_url.get("url") if isinstance(image_url, dict) else image_url
            if not url:
                logger.warning("Missing url in image_url part. Skipping image part.")
                state.skip(index, role, SkipReason.MISSING_IMAGE_URL)
                continue
            data_uri = parse_data_uri(url)
            if data_uri is None:
                logger.warning(
                    "Image URL is not a data URI: %s. Gemini API requires inlineData. Skipping image part.",
                    url,
                )
                state.skip(index, role, SkipReason.UNSUPPORTED_IMAGE_URL, str(url))
                continue
            parts.append({"inlineData": data_uri.to_inline_data()})
        else:
            logger.debug("Unsupported content part type %s for role %s. Skipping part.", item_type, role)
            state.skip(index, role, SkipReason.UNSUPPORTED_PART, str(item_type))
    return parts


def _tool_calls_to_parts(state: _RequestState, index: int, msg: Dict[str, Any]) -> List[Dict[str, Any]]:
    tool_calls = msg.get("tool_calls")
    if not isinstance(tool_calls, list):
        return []

    parts: List[Dict[str, Any]] = []
    for tc in tool_calls:
        fn = tc.get("function") if isinstance(tc, dict) else None
        name = fn.get("name") if isinstance(fn, dict) else None
        try:
            args = json.loads(fn["arguments"])
        except (TypeError, KeyError, ValueError) as e:
            logger.error("Error parsing tool_call arguments for %s: %s. Skipping tool call.", name, e)
            state.skip(index, msg.get("role"), SkipReason.INVALID_TOOL_ARGUMENTS, f"{name}: {e}")
            continue
        parts.append({"functionCall": {"name": name, "args": args}})
    return parts


def _tool_result_part(state: _RequestState, index: int, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    tool_call_id = msg.get("tool_call_id")
    if not tool_call_id or not isinstance(tool_call_id, str):
        logger.error("Error: 'tool' message is missing 'tool_call_id'. Skipping message.")
        state.skip(index, "tool", SkipReason.MISSING_TOOL_CALL_ID)
        return None

    if tool_call_id in state.consumed_tool_call_ids:
        logger.warning(
            "Duplicate tool_call_id detected: %s, skipping repeated tool message.", tool_call_id
        )
        state.skip(index, "tool", SkipReason.DUPLICATE_TOOL_CALL_ID, str(tool_call_id))
        return None
    state.consumed_tool_call_ids.add(tool_call_id)

    name = (
        state.tool_call_names.get(tool_call_id)
        or parse_tool_call_id(tool_call_id)
        or msg.get("name")
    )
    if not name:
        name = UNKNOWN_TOOL_NAME
        logger.warning(
            "Could not extract function name from tool_call_id: %s and msg.name is missing. "
            "Using '%s' as fallback.",
            tool_call_id,
            UNKNOWN_TOOL_NAME,
        )

    return {"functionResponse": {"name": name, "response": _tool_response_payload(msg)}}


def _tool_response_payload(msg: Dict[str, Any]) -> Dict[str, Any]:
    content = classify_content(msg)
    if isinstance(content, AbsentContent):
        return {}
    if isinstance(content, PartsContent):
        raw = "".join(content.text_parts())
    elif isinstance(content, TextContent):
        raw = content.text
    else:
        raw = content.raw
        return raw if isinstance(raw, dict) else {"content": raw}

    try:
        parsed = json.loads(raw)
    except ValueError:
        # Plain-text tool output; Gemini expects an object
        return {"content": raw}
    return parsed if isinstance(parsed, dict) else {"content": parsed}


def _translate_tools(tools: Any) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(tools, list) or not tools:
        return None

    declarations: List[Dict[str, Any]] = []
    for tool in tools:
        if not isinstance(tool, dict) or tool.get("type") != "function":
            continue
        fn = tool.get("function")
        if not isinstance(fn, dict):
            continue
        decl: Dict[str, Any] = {"name": fn.get("name")}
        if fn.get("description") is not None:
            decl["description"] = fn["description"]
        parameters = sanitize_parameters_schema(fn.get("parameters"), fn.get("name"))
        if parameters is not None:
            decl["parameters"] = parameters
        declarations.append(decl)

    if not declarations:
        return None
    return [{"functionDeclarations": declarations}]


def openai_generation_config(body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Map OpenAI sampling parameters onto a Gemini `generationConfig`."""
    generation_config: Dict[str, Any] = {}
    for src, dst in (
        ("temperature", "temperature"),
        ("top_p", "topP"),
        ("top_k", "topK"),
    ):
        if body.get(src) is not None:
            generation_config[dst] = body[src]

    max_tokens = body.get("max_completion_tokens")
    if max_tokens is None:
        max_tokens = body.get("max_tokens")
    if isinstance(max_tokens, int):
        generation_config["maxOutputTokens"] = max_tokens

    stop = body.get("stop")
    if isinstance(stop, str):
        generation_config["stopSequences"] = [stop]
    elif isinstance(stop, list):
        seqs = [x for x in stop if isinstance(x, str)]
        if seqs:
            generation_config["stopSequences"] = seqs

    return generation_config or None


def safety_settings(is_safety_enabled: bool) -> Optional[List[Dict[str, str]]]:
    """Gemini `safetySettings` to send; None keeps the upstream defaults."""
    if is_safety_enabled:
        return None
    return [{"category": category, "threshold": "BLOCK_NONE"} for category in _HARM_CATEGORIES]
