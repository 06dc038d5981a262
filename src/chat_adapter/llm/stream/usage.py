"""Token accounting for a single streamed response.

Public API (the "studs"):
    UsageTracker: Running token totals for one stream
"""

from __future__ import annotations

from .events import MessageDelta, MessageStart, StreamEvent


class UsageTracker:
    """Running token totals for one streamed response.

    ``message_start`` fixes the input/output baseline. Each ``message_delta``
    reports output tokens generated since the start, so the running total is
    the baseline plus the latest delta, never the sum of all deltas.

    Create one tracker per stream; trackers hold no shared state.
    """

    def __init__(self) -> None:
        self.input_tokens = 0
        self.output_tokens = 0
        self.last_total: int | None = None

    def reset(self) -> None:
        """Return to the zeroed state for a new response."""
        self.input_tokens = 0
        self.output_tokens = 0
        self.last_total = None

    def observe(self, event: StreamEvent | None) -> int | None:
        """Update totals from an event.

        Args:
            event: Decoded stream event (None is ignored)

        Returns:
            The running total on message_delta, otherwise None
        """
        if isinstance(event, MessageStart):
            self.input_tokens = event.message.usage.input_tokens
            self.output_tokens = event.message.usage.output_tokens
            self.last_total = None
            return None
        if isinstance(event, MessageDelta):
            self.last_total = self.input_tokens + self.output_tokens + event.usage.output_tokens
            return self.last_total
        return None

    @property
    def total(self) -> int:
        """Best known total, including any reported delta."""
        if self.last_total is not None:
            return self.last_total
        return self.input_tokens + self.output_tokens

    @property
    def usage(self) -> dict[str, int]:
        """Last observed usage, suitable for LLMResponse.usage."""
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.total - self.input_tokens,
            "total_tokens": self.total,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(input_tokens={self.input_tokens}, "
            f"output_tokens={self.output_tokens}, last_total={self.last_total})"
        )


__all__ = ["UsageTracker"]
