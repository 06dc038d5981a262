"""Decoding of server-sent event frames into typed stream events.

Each frame is one line of the streamed response body. ``event:`` lines only
name the event that follows and are skipped; ``data:`` lines carry a JSON
payload whose ``type`` field selects the event model.

Decoding is lenient: a frame that is empty, malformed, or of an unknown type
decodes to None instead of raising. Transport chunking can split or repeat
frame boundaries, so a bad frame must never end the stream. The one exception
to dropping is an ``error`` frame: it always decodes to a StreamError, with
defaults filled in for any detail that is missing or unreadable.

Public API (the "studs"):
    Usage: Token counts reported when a message starts
    MessageStart: First event of a response
    MessageDelta: Top-level message changes, including output token count
    ContentBlockDelta: Incremental text
    StreamError: Error reported by the service
    StreamEvent: Union of the event models above
    decode_frame: Decode one frame into a StreamEvent or None
    FrameBuffer: Split raw transport chunks into complete frames
"""

from __future__ import annotations

import codecs
import json
import logging
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

_logger = logging.getLogger(__name__)

EVENT_PREFIX = "event:"
DATA_PREFIX = "data:"


class Usage(BaseModel):
    """Token counts reported by message_start."""

    input_tokens: int = 0
    output_tokens: int = 0

    @field_validator("input_tokens", "output_tokens", mode="before")
    @classmethod
    def none_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class StartMessage(BaseModel):
    id: str | None = None
    role: str = "assistant"
    model: str | None = None
    usage: Usage = Field(default_factory=Usage)


class MessageStart(BaseModel):
    """Opens a response and carries its role and initial usage."""

    type: Literal["message_start"]
    message: StartMessage = Field(default_factory=StartMessage)


class DeltaUsage(BaseModel):
    output_tokens: int = 0

    @field_validator("output_tokens", mode="before")
    @classmethod
    def none_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class MessageDeltaBody(BaseModel):
    stop_reason: str | None = None
    stop_sequence: str | None = None


class MessageDelta(BaseModel):
    """Reports output tokens generated since message_start, and the stop reason."""

    type: Literal["message_delta"]
    delta: MessageDeltaBody = Field(default_factory=MessageDeltaBody)
    usage: DeltaUsage = Field(default_factory=DeltaUsage)


class TextDelta(BaseModel):
    type: str = "text_delta"
    text: str | None = None


class ContentBlockDelta(BaseModel):
    """An incremental piece of a content block.

    Only text deltas carry ``text``; other delta kinds leave it None.
    """

    type: Literal["content_block_delta"]
    index: int = 0
    delta: TextDelta = Field(default_factory=TextDelta)

    @property
    def text(self) -> str | None:
        return self.delta.text


class ErrorDetail(BaseModel):
    type: str = "error"
    message: str = ""

    @field_validator("type", "message", mode="before")
    @classmethod
    def none_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return "error" if info.field_name == "type" else ""
        if not isinstance(v, str):
            return str(v)
        return v


class StreamError(BaseModel):
    """Error reported by the service in place of (or partway through) a response."""

    type: Literal["error"]
    error: ErrorDetail = Field(default_factory=ErrorDetail)

    @field_validator("error", mode="before")
    @classmethod
    def wrap_plain_message(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return v
        return {"message": v}


StreamEvent = Annotated[
    Union[MessageStart, MessageDelta, ContentBlockDelta, StreamError],
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(StreamEvent)
_KNOWN_TYPES = frozenset({"message_start", "message_delta", "content_block_delta", "error"})


def decode_frame(frame: str | bytes | None) -> StreamEvent | None:
    """Decode a single frame.

    Args:
        frame: One line of the response body, with or without its ``data:`` prefix

    Returns:
        The decoded event, or None for marker lines, blank lines, malformed
        payloads and event types the adapter does not handle
    """
    if frame is None:
        return None
    if isinstance(frame, (bytes, bytearray)):
        frame = bytes(frame).decode("utf-8", errors="replace")

    frame = frame.strip("\r\n")
    if not frame.strip() or frame.startswith(EVENT_PREFIX):
        return None
    if frame.startswith(DATA_PREFIX):
        frame = frame[len(DATA_PREFIX) :].lstrip()

    try:
        payload = json.loads(frame)
    except (ValueError, RecursionError):
        _logger.debug("Dropping malformed frame: %.80s", frame)
        return None

    if not isinstance(payload, dict):
        return None

    # Non-streaming error bodies look like {"error": {...}} with no event type
    if "type" not in payload and "error" in payload:
        payload = {**payload, "type": "error"}

    event_type = payload.get("type")
    if not isinstance(event_type, str) or event_type not in _KNOWN_TYPES:
        return None

    try:
        return _EVENT_ADAPTER.validate_python(payload)
    except (ValidationError, RecursionError):
        if event_type == "error":
            # An error must reach the caller even when its details are unreadable
            _logger.debug("Error frame with unexpected shape: %.80s", frame)
            return StreamError(type="error")
        _logger.debug("Dropping %s frame with unexpected shape", event_type)
        return None


class FrameBuffer:
    """Reassemble frames from arbitrarily split transport chunks.

    A trailing partial line is held back until the chunk that completes it
    arrives. Multi-byte UTF-8 sequences split across chunks are handled.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: str | bytes) -> list[str]:
        """Add a chunk and return every frame it completed."""
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        self._pending += chunk
        *lines, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> list[str]:
        """Return whatever is left once the transport is exhausted."""
        rest = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        rest = rest.rstrip("\r")
        return [rest] if rest else []


__all__ = [
    "Usage",
    "MessageStart",
    "MessageDelta",
    "ContentBlockDelta",
    "StreamError",
    "StreamEvent",
    "decode_frame",
    "FrameBuffer",
]
