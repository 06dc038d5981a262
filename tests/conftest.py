"""Shared test fixtures."""

import json
from unittest.mock import patch

import pytest

from chat_adapter.llm.tokens import get_default_tokenizer


class WordEncoding:
    """Offline stand-in for a tiktoken encoding: one token per word."""

    name = "cl100k_base"

    def encode(self, text, **kwargs):
        return list(range(len(text.split())))


@pytest.fixture(autouse=True)
def offline_encoding():
    """tiktoken downloads its encoding data on first use, so tests use WordEncoding."""
    get_default_tokenizer.cache_clear()
    with patch("tiktoken.get_encoding", return_value=WordEncoding()) as get_encoding:
        yield get_encoding
    get_default_tokenizer.cache_clear()


def _sse(event_type: str, **payload) -> list[str]:
    """Render one server-sent event as the lines a transport delivers."""
    return [f"event: {event_type}", f"data: {json.dumps({'type': event_type, **payload})}", ""]


@pytest.fixture
def sse():
    return _sse


@pytest.fixture
def message_start():
    def _make(input_tokens=10, output_tokens=0, role="assistant", model="claude-3-5-sonnet-20240620"):
        return _sse(
            "message_start",
            message={
                "id": "msg_01",
                "type": "message",
                "role": role,
                "content": [],
                "model": model,
                "stop_reason": None,
                "stop_sequence": None,
                "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
            },
        )

    return _make


@pytest.fixture
def text_delta():
    def _make(text, index=0):
        return _sse(
            "content_block_delta", index=index, delta={"type": "text_delta", "text": text}
        )

    return _make


@pytest.fixture
def message_delta():
    def _make(output_tokens, stop_reason=None):
        return _sse(
            "message_delta",
            delta={"stop_reason": stop_reason, "stop_sequence": None},
            usage={"output_tokens": output_tokens},
        )

    return _make


@pytest.fixture
def hello_stream(message_start, text_delta, message_delta, sse):
    """A complete response streaming "Hello world" with 10 input and 5 output tokens."""
    return [
        *message_start(input_tokens=10, output_tokens=0),
        *sse("content_block_start", index=0, content_block={"type": "text", "text": ""}),
        *sse("ping"),
        *text_delta("Hel"),
        *text_delta("lo"),
        *text_delta(" world"),
        *sse("content_block_stop", index=0),
        *message_delta(5, stop_reason="end_turn"),
        *sse("message_stop"),
    ]
