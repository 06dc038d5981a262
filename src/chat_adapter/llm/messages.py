"""Shaping of a conversation into the form the messages API accepts.

The API takes system prompts separately from the conversation and rejects
consecutive messages from the same role, so conversations are normalized
before being sent. Large user messages are additionally marked for
server-side prompt caching.

Public API (the "studs"):
    normalize_messages: Split out system prompts and merge same-role runs
    merge_messages: Merge consecutive messages that share a role
    annotate_cache: Mark large messages of one role as ephemeral-cacheable
    DEFAULT_SEPARATOR: Text inserted between merged message contents
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import DEFAULT_CACHE_OVER
from .tokens import Tokenizer, get_default_tokenizer
from .types import CacheControl, ContentBlock, LLMMessage

_logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n\n"


def _join_content(
    first: str | list[ContentBlock], second: str | list[ContentBlock], separator: str
) -> str | list[ContentBlock]:
    if isinstance(first, str) and isinstance(second, str):
        return f"{first}{separator}{second}"
    # Block-formed content keeps its blocks (and their cache directives)
    blocks = [ContentBlock(text=first)] if isinstance(first, str) else list(first)
    blocks.extend([ContentBlock(text=second)] if isinstance(second, str) else second)
    return blocks


def merge_messages(
    messages: Sequence[LLMMessage], separator: str = DEFAULT_SEPARATOR
) -> list[LLMMessage]:
    """Merge consecutive messages that share a role.

    Contents are joined in order with ``separator`` between them. Pass an
    empty separator for plain concatenation.

    Args:
        messages: Conversation messages
        separator: Text placed between merged contents

    Returns:
        New list of messages; the input messages are not modified
    """
    merged: list[LLMMessage] = []
    for message in messages:
        if merged and merged[-1].role == message.role:
            last = merged[-1]
            merged[-1] = LLMMessage(
                role=last.role, content=_join_content(last.content, message.content, separator)
            )
        else:
            merged.append(message.model_copy(deep=True))
    return merged


def normalize_messages(
    messages: Sequence[LLMMessage],
    system_role: str = "system",
    separator: str = DEFAULT_SEPARATOR,
) -> tuple[list[LLMMessage] | None, list[LLMMessage]]:
    """Separate system prompts from the conversation and merge same-role runs.

    Merging happens after system prompts are removed, so a user message,
    a system prompt and another user message collapse into one user message.

    Args:
        messages: Conversation messages in order
        system_role: Role name that identifies system prompts
        separator: Text placed between merged contents

    Returns:
        Tuple of (system messages in original order or None if there were
        none, remaining messages with same-role runs merged)
    """
    system = [m.model_copy(deep=True) for m in messages if m.role == system_role]
    rest = merge_messages([m for m in messages if m.role != system_role], separator)
    _logger.debug(
        "Normalized %d messages into %d system and %d conversation messages",
        len(messages),
        len(system),
        len(rest),
    )
    return (system or None), rest


def annotate_cache(
    messages: Sequence[LLMMessage],
    threshold: int = DEFAULT_CACHE_OVER,
    tokenizer: Tokenizer | None = None,
    role: str = "user",
) -> list[LLMMessage]:
    """Mark large messages for ephemeral prompt caching.

    A message is annotated when its role is ``role`` and its estimated token
    count is at least ``threshold``. Annotation replaces the plain text with
    a single text block carrying an ephemeral cache directive. Everything
    else passes through unchanged.

    Args:
        messages: Normalized conversation messages
        threshold: Inclusive token threshold
        tokenizer: Token counter, defaults to the shared TiktokenCounter
        role: The only role eligible for caching

    Returns:
        New list of messages
    """
    tokenizer = tokenizer or get_default_tokenizer()
    annotated: list[LLMMessage] = []
    for message in messages:
        if (
            message.role == role
            and isinstance(message.content, str)
            and tokenizer.count_tokens(message.content) >= threshold
        ):
            _logger.debug("Caching %s message (threshold %d)", role, threshold)
            annotated.append(
                LLMMessage(
                    role=message.role,
                    content=[ContentBlock(text=message.content, cache_control=CacheControl())],
                )
            )
        else:
            annotated.append(message.model_copy(deep=True))
    return annotated


def system_blocks(system: Sequence[LLMMessage]) -> list[ContentBlock]:
    """Convert system prompts into cache-tagged blocks. Every one is cached."""
    return [ContentBlock(text=m.text, cache_control=CacheControl()) for m in system]


__all__ = [
    "DEFAULT_SEPARATOR",
    "normalize_messages",
    "merge_messages",
    "annotate_cache",
    "system_blocks",
]
