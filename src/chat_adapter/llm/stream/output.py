"""Projections of stream events onto consumer output.

A chat transcript needs to know who is speaking; an inline edit buffer
only wants text. Both read the same decoded events.

Public API (the "studs"):
    chat_output: Project an event for a chat transcript
    inline_output: Project an event for a plain-text buffer
"""

from __future__ import annotations

from ..types import ChatOutput
from .events import ContentBlockDelta, MessageStart, StreamEvent


def chat_output(event: StreamEvent | None) -> ChatOutput | None:
    """Project an event into chat transcript form.

    ``message_start`` opens the turn with its role and empty content;
    text deltas follow with content only.
    """
    if isinstance(event, MessageStart):
        return ChatOutput(role=event.message.role, content="")
    if isinstance(event, ContentBlockDelta) and event.text is not None:
        return ChatOutput(role=None, content=event.text)
    return None


def inline_output(event: StreamEvent | None) -> str | None:
    """Return the text fragment of a text delta, otherwise None."""
    if isinstance(event, ContentBlockDelta):
        return event.text
    return None


__all__ = ["chat_output", "inline_output"]
