"""Anthropic messages adapter for chat clients.

This module turns a conversation into a messages API request and turns the
streamed response back into output a chat client can use:
- System prompts are sent separately and always marked for prompt caching
- Consecutive same-role messages are merged
- Large user messages are marked for prompt caching
- Streamed frames are decoded leniently and token usage is tracked per stream

Public API (the "studs"):
    create_llm_client: Factory function to create provider instances
    LLMConfig: Configuration model for LLM providers
    LLMMessage: Message type for conversations
    LLMResponse: Response type from providers
    ChatOutput: Streamed output for chat transcripts
    build_request: Shape a conversation into an outbound payload
    StreamSession: Decode and account one streamed response
    BaseLLMProvider: Abstract base class for providers (for custom providers)

Example:
    >>> from chat_adapter.llm import create_llm_client, LLMConfig, LLMMessage
    >>>
    >>> config = LLMConfig(provider="anthropic", api_key="sk-...")
    >>> client = create_llm_client(config)
    >>> messages = [
    ...     LLMMessage(role="system", content="Be terse"),
    ...     LLMMessage(role="user", content="Hello!"),
    ... ]
    >>> for output in client.stream_chat(messages, {"max_tokens": 512}):
    ...     print(output.content, end="")
"""

from chat_adapter.llm.config import DEFAULT_CACHE_OVER, LLMConfig
from chat_adapter.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMInvalidRequestError,
    LLMParameterError,
    LLMProviderError,
    LLMRateLimitError,
    LLMUpstreamError,
)
from chat_adapter.llm.factory import create_llm_client
from chat_adapter.llm.messages import annotate_cache, merge_messages, normalize_messages
from chat_adapter.llm.parameters import GenerationParameters, validate_parameters
from chat_adapter.llm.providers.base import BaseLLMProvider
from chat_adapter.llm.request import OutboundPayload, build_request
from chat_adapter.llm.stream import (
    StreamSession,
    UsageTracker,
    chat_output,
    decode_frame,
    inline_output,
)
from chat_adapter.llm.tokens import (
    ApproximateTokenizer,
    TiktokenCounter,
    Tokenizer,
    get_default_tokenizer,
)
from chat_adapter.llm.types import ChatOutput, ContentBlock, LLMMessage, LLMResponse

__all__ = [
    # Factory
    "create_llm_client",
    # Config
    "LLMConfig",
    "DEFAULT_CACHE_OVER",
    "GenerationParameters",
    "validate_parameters",
    # Types
    "LLMMessage",
    "LLMResponse",
    "ContentBlock",
    "ChatOutput",
    # Request shaping
    "normalize_messages",
    "merge_messages",
    "annotate_cache",
    "build_request",
    "OutboundPayload",
    "Tokenizer",
    "ApproximateTokenizer",
    "TiktokenCounter",
    "get_default_tokenizer",
    # Streaming
    "decode_frame",
    "UsageTracker",
    "chat_output",
    "inline_output",
    "StreamSession",
    # Base class (for custom providers)
    "BaseLLMProvider",
    # Exceptions
    "LLMError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "LLMInvalidRequestError",
    "LLMParameterError",
    "LLMProviderError",
    "LLMUpstreamError",
]
