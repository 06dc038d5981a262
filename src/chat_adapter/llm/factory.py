"""Factory function for creating LLM clients.

Public API (the "studs"):
    create_llm_client: Factory function to create provider instances
"""

from chat_adapter.llm.config import LLMConfig
from chat_adapter.llm.providers.base import BaseLLMProvider
from chat_adapter.llm.tokens import Tokenizer


def create_llm_client(config: LLMConfig, tokenizer: Tokenizer | None = None) -> BaseLLMProvider:
    """Create an LLM client based on configuration.

    Args:
        config: LLMConfig specifying provider and settings
        tokenizer: Token counter used for the prompt caching threshold

    Returns:
        BaseLLMProvider: Configured provider instance

    Raises:
        ValueError: If provider is unknown

    Example:
        >>> config = LLMConfig(provider="anthropic", api_key="sk-...")
        >>> client = create_llm_client(config)
        >>> for output in client.stream_chat([LLMMessage(role="user", content="Hello")]):
        ...     print(output.content, end="")
    """
    if config.provider == "anthropic":
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(config, tokenizer=tokenizer)
    else:
        raise ValueError(f"Unknown provider: {config.provider}")


__all__ = ["create_llm_client"]
