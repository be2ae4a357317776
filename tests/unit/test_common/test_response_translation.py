"""
Gemini Response -> OpenAI Completion Translation Unit Tests
"""

import json

from gemini_bridge.common.translation import gemini_response_to_openai, openai_to_gemini_request
from gemini_bridge.common.translation.response import SAFETY_PLACEHOLDER

MODEL = "gemini-2.0-flash"


def _translate(response):
    return json.loads(gemini_response_to_openai(response, MODEL))


class TestGeminiResponseToOpenAI:
    """gemini_response_to_openai Test"""

    def test_text_response(self):
        result = _translate(
            {
                "candidates": [
                    {
                        "content": {"role": "model", "parts": [{"text": "Hello"}, {"text": " there"}]},
                        "finishReason": "STOP",
                    }
                ],
                "usageMetadata": {"promptTokenCount": 4, "candidatesTokenCount": 2, "totalTokenCount": 6},
            }
        )

        assert result["object"] == "chat.completion"
        assert result["model"] == MODEL
        assert result["id"].startswith("chatcmpl-")
        assert result["system_fingerprint"] is None
        assert result["choices"][0]["message"] == {"role": "assistant", "content": "Hello there"}
        assert result["choices"][0]["finish_reason"] == "stop"
        assert result["usage"] == {"prompt_tokens": 4, "completion_tokens": 2, "total_tokens": 6}
        assert "x_gemini_thought_process" not in result

    def test_missing_usage_defaults_to_zero(self):
        result = _translate({"candidates": [{"content": {"parts": [{"text": "x"}]}}]})
        assert result["usage"] == {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}
        assert result["choices"][0]["finish_reason"] is None

    def test_tool_calls(self):
        result = _translate(
            {
                "candidates": [
                    {
                        "content": {
                            "role": "model",
                            "parts": [
                                {"functionCall": {"name": "a", "args": {"x": 1}}},
                                {"functionCall": {"name": "b"}},
                            ],
                        }
                    }
                ]
            }
        )

        message = result["choices"][0]["message"]
        assert message["content"] is None
        assert [tc["function"]["name"] for tc in message["tool_calls"]] == ["a", "b"]
        assert message["tool_calls"][0]["function"]["arguments"] == '{"x": 1}'
        assert message["tool_calls"][1]["function"]["arguments"] == "{}"
        assert message["tool_calls"][1]["id"].endswith("_1")
        assert result["choices"][0]["finish_reason"] == "tool_calls"

    def test_thoughts_surface_in_extension_field(self):
        result = _translate(
            {
                "candidates": [
                    {
                        "content": {
                            "parts": [
                                {"thought": {"toolCode": "x = 1"}},
                                {"text": "done"},
                            ]
                        },
                        "finishReason": "STOP",
                    }
                ]
            }
        )
        assert result["x_gemini_thought_process"] == [{"type": "tool_code", "content": "x = 1"}]
        assert result["choices"][0]["message"]["content"] == "done"

    def test_flagged_text_thought_stays_in_content(self):
        result = _translate(
            {
                "candidates": [
                    {
                        "content": {"parts": [{"text": "reasoning", "thought": True}, {"text": "answer"}]},
                        "finishReason": "STOP",
                    }
                ]
            }
        )
        assert result["choices"][0]["message"]["content"] == "reasoninganswer"
        assert "x_gemini_thought_process" not in result

    def test_safety_without_content_uses_placeholder(self):
        result = _translate({"candidates": [{"finishReason": "SAFETY", "safetyRatings": []}]})
        assert result["choices"][0]["message"]["content"] == SAFETY_PLACEHOLDER
        assert result["choices"][0]["finish_reason"] == "content_filter"

    def test_recitation_forces_content_filter(self):
        result = _translate(
            {"candidates": [{"content": {"parts": [{"text": "partial"}]}, "finishReason": "RECITATION"}]}
        )
        assert result["choices"][0]["message"]["content"] == "partial"
        assert result["choices"][0]["finish_reason"] == "content_filter"

    def test_prompt_blocked(self):
        result = _translate({"promptFeedback": {"blockReason": "SAFETY"}})

        assert result["id"].startswith("chatcmpl-error-")
        assert result["choices"][0]["message"]["content"] == "Request blocked by Gemini: SAFETY."
        assert result["choices"][0]["finish_reason"] == "content_filter"
        assert result["usage"] == {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}

    def test_missing_candidates(self):
        result = _translate({"usageMetadata": {}})
        assert result["choices"][0]["message"]["content"] == "Gemini response missing candidates."
        assert result["choices"][0]["finish_reason"] == "error"

    def test_malformed_response(self):
        result = _translate({"candidates": ["bogus"]})
        assert result["choices"][0]["message"]["content"].startswith("Error processing Gemini response: ")
        assert result["choices"][0]["finish_reason"] == "error"


class TestToolCallRoundTrip:
    """Ids emitted for tool calls resolve back to the function name"""

    def test_round_trip(self):
        completion = _translate(
            {
                "candidates": [
                    {
                        "content": {
                            "role": "model",
                            "parts": [{"functionCall": {"name": "get_weather", "args": {"city": "Rome"}}}],
                        }
                    }
                ]
            }
        )
        assert completion["choices"][0]["finish_reason"] == "tool_calls"
        assistant = completion["choices"][0]["message"]
        assert assistant["tool_calls"][0]["function"]["name"] == "get_weather"
        tool_call_id = assistant["tool_calls"][0]["id"]

        # The client sends back only the tool result, not the assistant turn
        request = openai_to_gemini_request(
            {
                "messages": [
                    {"role": "user", "content": "Weather in Rome?"},
                    {"role": "tool", "tool_call_id": tool_call_id, "content": '{"temp": 25}'},
                ]
            }
        )

        assert request.contents[1] == {
            "role": "user",
            "parts": [{"functionResponse": {"name": "get_weather", "response": {"temp": 25}}}],
        }
