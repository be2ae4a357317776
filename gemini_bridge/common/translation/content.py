"""
Message Content Variants

OpenAI `content` is either a string, a list of typed parts, or null. The
request translator dispatches on these variants rather than on raw types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Union


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class PartsContent:
    parts: List[Any]

    def text_parts(self) -> List[str]:
        return [
            p["text"]
            for p in self.parts
            if isinstance(p, dict) and p.get("type") == "text" and isinstance(p.get("text"), str)
        ]


@dataclass(frozen=True)
class AbsentContent:
    pass


@dataclass(frozen=True)
class UnsupportedContent:
    raw: Any


MessageContent = Union[TextContent, PartsContent, AbsentContent, UnsupportedContent]


def classify_content(message: Dict[str, Any]) -> MessageContent:
    """Classify a raw message's `content` field."""
    raw = message.get("content")
    if raw is None:
        return AbsentContent()
    if isinstance(raw, str):
        return TextContent(raw)
    if isinstance(raw, list):
        return PartsContent(raw)
    return UnsupportedContent(raw)
