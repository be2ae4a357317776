"""
Data URI Parsing

Gemini only accepts images as inline base64 payloads, so OpenAI `image_url`
parts must carry a `data:<mime>;base64,<payload>` URI.
"""

import re
from dataclasses import dataclass
from typing import Optional

_DATA_URI_RE = re.compile(r"^data:(.+?);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class DataUri:
    """Decoded pieces of a base64 data URI."""

    mime_type: str
    data: str

    def to_inline_data(self) -> dict[str, str]:
        return {"mimeType": self.mime_type, "data": self.data}


def parse_data_uri(data_uri: Optional[str]) -> Optional[DataUri]:
    """
    Parse a base64 data URI.

    Args:
        data_uri: e.g. "data:image/jpeg;base64,/9j/4AAQ..."

    Returns:
        DataUri with MIME type and base64 payload, or None if empty or not a base64 data URI.

    Examples:
        >>> parse_data_uri("data:image/png;base64,iVBORw0KGgo=")
        DataUri(mime_type='image/png', data='iVBORw0KGgo=')
        >>> parse_data_uri("https://example.com/cat.png") is None
        True
    """
    if not data_uri or not isinstance(data_uri, str):
        return None
    match = _DATA_URI_RE.match(data_uri)
    if not match:
        return None
    return DataUri(mime_type=match.group(1), data=match.group(2))
