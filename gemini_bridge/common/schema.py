"""
JSON Schema Sanitization

Gemini function declarations accept an OpenAPI subset of JSON Schema and reject
keywords such as `additionalProperties` and `$schema`.
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

ADDITIONAL_PROPERTIES = "additionalProperties"


def strip_schema_field(obj: Any, field: str = ADDITIONAL_PROPERTIES) -> Any:
    """
    Return a deep copy of `obj` with every key named `field` removed at any depth.

    Lists and dicts are both traversed; scalars are returned unchanged.
    The input is never modified.
    """
    if isinstance(obj, list):
        return [strip_schema_field(item, field) for item in obj]
    if isinstance(obj, dict):
        return {
            key: strip_schema_field(value, field)
            for key, value in obj.items()
            if key != field
        }
    return obj


def sanitize_parameters_schema(
    parameters: Any, tool_name: Optional[str] = None
) -> Optional[dict[str, Any]]:
    """
    Prepare an OpenAI tool `parameters` schema for a Gemini function declaration.

    Args:
        parameters: The tool's JSON schema
        tool_name: Used only for logging

    Returns:
        A sanitized copy, or None when the tool declares no parameters object.
    """
    if not isinstance(parameters, dict):
        return None

    cleaned = strip_schema_field(parameters, ADDITIONAL_PROPERTIES)
    if "$schema" in cleaned:
        del cleaned["$schema"]
        logger.info("Removed '$schema' from parameters for tool: %s", tool_name)
    return cleaned
