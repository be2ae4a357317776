"""
Server-Sent Events helpers

Decodes the upstream Gemini SSE byte stream and encodes the OpenAI-side event blocks.
"""

from __future__ import annotations

import json
from typing import Any, Optional

DONE_SSE = "data: [DONE]\n\n"


def encode_sse_data(payload: dict[str, Any]) -> str:
    """Encode a JSON object as an unnamed `data:` event block."""
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def encode_sse_event(event: str, payload: dict[str, Any]) -> str:
    """Encode a JSON object as a named event block."""
    return f"event: {event}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


class SSEDecoder:
    """
    Simple SSE Decoder: Splits bytes stream into event blocks and extracts data fields.

    - Uses empty line (\\n\\n) as event boundary
    - Supports CRLF (\\r\\n)
    - Only parses data: lines, ignores other fields
    """

    def __init__(self) -> None:
        self._buf = b""

    def feed(self, chunk: bytes) -> list[str]:
        """
        Append bytes and return list of parsed data payloads (one string per event).
        """
        if not chunk:
            return []

        data = (self._buf + chunk).replace(b"\r\n", b"\n")
        parts = data.split(b"\n\n")
        self._buf = parts.pop()  # Keep last incomplete event

        payloads: list[str] = []
        for event in parts:
            payload = self._extract_data_payload(event)
            if payload is not None:
                payloads.append(payload)
        return payloads

    def flush(self) -> list[str]:
        """Return the payload of a trailing event that was not followed by a blank line."""
        remaining, self._buf = self._buf, b""
        if not remaining.strip():
            return []
        payload = self._extract_data_payload(remaining.replace(b"\r\n", b"\n"))
        return [payload] if payload is not None else []

    @staticmethod
    def _extract_data_payload(event: bytes) -> Optional[str]:
        data_lines: list[bytes] = []
        for line in event.split(b"\n"):
            if not line:
                continue
            if line.startswith(b"data:"):
                value = line[5:]
                if value.startswith(b" "):
                    value = value[1:]
                data_lines.append(value)
        if not data_lines:
            return None
        return b"\n".join(data_lines).decode("utf-8", errors="ignore")
