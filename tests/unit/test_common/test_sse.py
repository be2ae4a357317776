"""
SSE Helpers Unit Tests
"""

import json

from gemini_bridge.common.sse import SSEDecoder, encode_sse_data, encode_sse_event


class TestSSEDecoder:
    """SSEDecoder Test"""

    def test_split_across_chunks(self):
        decoder = SSEDecoder()
        assert decoder.feed(b'data: {"a"') == []
        assert decoder.feed(b': 1}\n\ndata: {"b": 2}\n\n') == ['{"a": 1}', '{"b": 2}']

    def test_crlf_and_non_data_fields(self):
        decoder = SSEDecoder()
        payloads = decoder.feed(b"event: ping\r\nid: 1\r\ndata: x\r\n\r\n")
        assert payloads == ["x"]

    def test_flush_trailing_event(self):
        decoder = SSEDecoder()
        assert decoder.feed(b"data: tail") == []
        assert decoder.flush() == ["tail"]
        assert decoder.flush() == []


def test_encode_helpers():
    assert encode_sse_data({"a": 1}) == 'data: {"a": 1}\n\n'
    block = encode_sse_event("thought_process", {"type": "placeholder"})
    assert block.startswith("event: thought_process\ndata: ")
    assert json.loads(block.split("data: ", 1)[1]) == {"type": "placeholder"}
