"""State for one streamed response.

Public API (the "studs"):
    StreamSession: Decode, account and project the frames of one response
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from ..exceptions import LLMUpstreamError
from ..types import ChatOutput, LLMResponse
from .events import (
    ContentBlockDelta,
    FrameBuffer,
    MessageDelta,
    MessageStart,
    StreamError,
    StreamEvent,
    decode_frame,
)
from .output import chat_output, inline_output
from .usage import UsageTracker

_logger = logging.getLogger(__name__)


class StreamSession:
    """Processes the frames of a single streamed response in arrival order.

    Each session owns its own UsageTracker, so concurrent streams never share
    token totals. Whatever was observed before a stream is abandoned remains
    readable through ``usage``, ``total_tokens`` and ``to_response()``.
    """

    def __init__(self) -> None:
        self.tracker = UsageTracker()
        self.model: str | None = None
        self.role: str | None = None
        self.stop_reason: str | None = None
        self._parts: list[str] = []
        self._buffer = FrameBuffer()

    def process(self, frame: str | bytes | None) -> StreamEvent | None:
        """Decode one frame and update session state.

        Raises:
            LLMUpstreamError: If the frame carries an error reported by the service
        """
        event = decode_frame(frame)
        if event is None:
            return None

        if isinstance(event, StreamError):
            _logger.error("Error: %s", event.error.message)
            raise LLMUpstreamError(event.error.message, error_type=event.error.type)

        self.tracker.observe(event)
        if isinstance(event, MessageStart):
            self.model = event.message.model
            self.role = event.message.role
        elif isinstance(event, MessageDelta):
            self.stop_reason = event.delta.stop_reason
        elif isinstance(event, ContentBlockDelta) and event.text is not None:
            self._parts.append(event.text)
        return event

    def feed(self, chunk: str | bytes) -> list[StreamEvent]:
        """Process a raw transport chunk that may hold partial frames."""
        events = (self.process(frame) for frame in self._buffer.feed(chunk))
        return [e for e in events if e is not None]

    def finish(self) -> list[StreamEvent]:
        """Process any frame left buffered once the transport is exhausted."""
        events = (self.process(frame) for frame in self._buffer.flush())
        return [e for e in events if e is not None]

    def chat(self, frames: Iterable[str | bytes]) -> Iterator[ChatOutput]:
        """Yield chat transcript output for each frame that produces any."""
        for frame in frames:
            output = chat_output(self.process(frame))
            if output is not None:
                yield output

    def inline(self, frames: Iterable[str | bytes]) -> Iterator[str]:
        """Yield text fragments for an inline buffer."""
        for frame in frames:
            text = inline_output(self.process(frame))
            if text is not None:
                yield text

    async def achat(self, frames: AsyncIterable[str | bytes]) -> AsyncIterator[ChatOutput]:
        """Async variant of chat()."""
        async for frame in frames:
            output = chat_output(self.process(frame))
            if output is not None:
                yield output

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def usage(self) -> dict[str, int]:
        return self.tracker.usage

    @property
    def total_tokens(self) -> int:
        return self.tracker.total

    def to_response(self) -> LLMResponse:
        """Assemble what has been received so far into an LLMResponse."""
        return LLMResponse(
            content=self.text,
            model=self.model or "",
            usage=self.usage,
            stop_reason=self.stop_reason,
        )


__all__ = ["StreamSession"]
