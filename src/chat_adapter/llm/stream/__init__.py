"""Streamed response handling: frame decoding, token accounting and output."""

from chat_adapter.llm.stream.events import (
    ContentBlockDelta,
    FrameBuffer,
    MessageDelta,
    MessageStart,
    StreamError,
    StreamEvent,
    Usage,
    decode_frame,
)
from chat_adapter.llm.stream.output import chat_output, inline_output
from chat_adapter.llm.stream.session import StreamSession
from chat_adapter.llm.stream.usage import UsageTracker

__all__ = [
    "ContentBlockDelta",
    "FrameBuffer",
    "MessageDelta",
    "MessageStart",
    "StreamError",
    "StreamEvent",
    "Usage",
    "decode_frame",
    "chat_output",
    "inline_output",
    "StreamSession",
    "UsageTracker",
]
