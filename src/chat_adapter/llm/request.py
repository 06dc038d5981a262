"""Construction of the outbound messages API request.

Public API (the "studs"):
    OutboundPayload: The request body sent to the messages endpoint
    build_request: Shape a conversation into an OutboundPayload
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, Field

from .config import LLMConfig
from .messages import DEFAULT_SEPARATOR, annotate_cache, normalize_messages, system_blocks
from .parameters import GenerationParameters, validate_parameters
from .tokens import Tokenizer
from .types import ContentBlock, LLMMessage


class OutboundPayload(BaseModel):
    """Request body for the messages endpoint.

    ``system`` is None when the conversation contained no system prompts,
    and is then left out of the serialized body entirely.
    """

    model: str
    max_tokens: int
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    stop_sequences: list[str] | None = None
    stream: bool = True
    system: list[ContentBlock] | None = None
    messages: list[LLMMessage] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON-ready wire form."""
        return self.model_dump(exclude_none=True)


def build_request(
    messages: Sequence[LLMMessage],
    config: LLMConfig,
    parameters: Mapping[str, Any] | GenerationParameters | None = None,
    tokenizer: Tokenizer | None = None,
    separator: str = DEFAULT_SEPARATOR,
) -> OutboundPayload:
    """Build the outbound payload for a conversation.

    Parameters are validated before any shaping happens. System prompts are
    always marked cacheable; user messages are marked once they reach
    ``config.cache_over`` tokens.

    Args:
        messages: Conversation messages in order
        config: Adapter configuration
        parameters: Generation parameters
        tokenizer: Token counter for the caching threshold
        separator: Text placed between merged same-role contents

    Returns:
        OutboundPayload ready to send

    Raises:
        LLMParameterError: If a generation parameter is out of range
    """
    params = validate_parameters(parameters, default_model=config.model)

    system, rest = normalize_messages(messages, separator=separator)
    rest = annotate_cache(
        rest, threshold=config.cache_over, tokenizer=tokenizer, role=config.user_role
    )

    return OutboundPayload(
        **params.model_dump(),
        stream=True,
        system=system_blocks(system) if system else None,
        messages=rest,
    )


__all__ = ["OutboundPayload", "build_request"]
