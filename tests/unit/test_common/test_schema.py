"""
Schema Sanitizer Unit Tests
"""

import json

from gemini_bridge.common.schema import sanitize_parameters_schema, strip_schema_field


def _count_key(obj, key):
    return json.dumps(obj).count(f'"{key}"')


class TestStripSchemaField:
    """strip_schema_field Test"""

    def test_removes_nested_occurrences(self):
        schema = {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "filters": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                        "properties": {"name": {"type": "string"}},
                    },
                },
                "options": {
                    "anyOf": [
                        {"type": "object", "additionalProperties": True},
                        {"type": "null"},
                    ]
                },
            },
        }

        result = strip_schema_field(schema)

        assert _count_key(result, "additionalProperties") == 0
        assert result["properties"]["filters"]["items"]["properties"] == {"name": {"type": "string"}}
        assert result["properties"]["options"]["anyOf"][1] == {"type": "null"}

    def test_does_not_modify_input(self):
        schema = {"type": "object", "additionalProperties": False}
        strip_schema_field(schema)
        assert schema == {"type": "object", "additionalProperties": False}

    def test_scalars_returned_unchanged(self):
        assert strip_schema_field("string") == "string"
        assert strip_schema_field(3) == 3
        assert strip_schema_field(None) is None

    def test_custom_field(self):
        assert strip_schema_field({"a": {"format": "uri", "type": "string"}}, "format") == {
            "a": {"type": "string"}
        }


class TestSanitizeParametersSchema:
    """sanitize_parameters_schema Test"""

    def test_removes_top_level_schema_keyword(self):
        params = {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": {"city": {"type": "string"}},
        }
        result = sanitize_parameters_schema(params, "get_weather")
        assert "$schema" not in result
        assert result["properties"] == {"city": {"type": "string"}}
        assert "$schema" in params

    def test_missing_parameters(self):
        assert sanitize_parameters_schema(None) is None
        assert sanitize_parameters_schema("not-a-schema") is None
