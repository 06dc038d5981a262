"""Type definitions for the LLM adapter layer.

Public API (the "studs"):
    CacheControl: Server-side cache directive attached to a content block
    ContentBlock: A single text block of message content
    LLMMessage: Represents a single message in a conversation
    LLMResponse: Response assembled from a completed (or cancelled) stream
    ChatOutput: One unit of output for a chat transcript
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CacheControl(BaseModel):
    """Prompt caching directive. Only ephemeral caching is supported."""

    type: Literal["ephemeral"] = "ephemeral"


class ContentBlock(BaseModel):
    """A text block of message content, optionally marked for caching.

    Attributes:
        type: Block type (always "text")
        text: Block text
        cache_control: Cache directive, or None when the block is not cached
    """

    type: Literal["text"] = "text"
    text: str = Field(..., description="Block text")
    cache_control: CacheControl | None = Field(None, description="Cache directive")


class LLMMessage(BaseModel):
    """Represents a single message in a conversation.

    Attributes:
        role: Message role ("user", "assistant", or "system")
        content: Message text, or a list of content blocks once annotated for caching
    """

    role: str = Field(..., description="Message role: user, assistant, or system")
    content: str | list[ContentBlock] = Field(..., description="Message content")

    @property
    def text(self) -> str:
        """Plain text of the message regardless of its content form."""
        if isinstance(self.content, str):
            return self.content
        return "".join(block.text for block in self.content)


class LLMResponse(BaseModel):
    """Response from an LLM provider.

    Attributes:
        content: Generated text content
        model: Model that generated the response
        usage: Token usage statistics
        stop_reason: Why generation stopped
    """

    content: str = Field(..., description="Generated text content")
    model: str = Field(..., description="Model that generated the response")
    usage: dict[str, Any] = Field(default_factory=dict, description="Token usage statistics")
    stop_reason: str | None = Field(None, description="Why generation stopped")


class ChatOutput(BaseModel):
    """Output destined for a chat transcript.

    The role is only set on the first event of a turn; later fragments carry
    content alone and are appended to the current turn.
    """

    role: str | None = Field(None, description="Speaker of the turn, set once per turn")
    content: str | None = Field(None, description="Text fragment to append")


__all__ = ["CacheControl", "ContentBlock", "LLMMessage", "LLMResponse", "ChatOutput"]
