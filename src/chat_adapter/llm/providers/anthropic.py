"""Anthropic Claude provider implementation.

Public API (the "studs"):
    AnthropicProvider: Anthropic Claude provider implementation
"""

import logging
from collections.abc import AsyncIterator, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from anthropic import (
    Anthropic,
    AsyncAnthropic,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
)

from chat_adapter.llm.config import LLMConfig
from chat_adapter.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMInvalidRequestError,
    LLMProviderError,
    LLMRateLimitError,
)
from chat_adapter.llm.providers.base import BaseLLMProvider
from chat_adapter.llm.request import OutboundPayload, build_request
from chat_adapter.llm.stream.session import StreamSession
from chat_adapter.llm.tokens import Tokenizer
from chat_adapter.llm.types import ChatOutput, LLMMessage

_logger = logging.getLogger(__name__)

_MESSAGES_PATH = "/v1/messages"


@contextmanager
def _translate_errors():
    try:
        yield
    except LLMError:
        raise
    except AuthenticationError as e:
        raise LLMAuthenticationError(f"Anthropic authentication failed: {e}") from e
    except RateLimitError as e:
        raise LLMRateLimitError(f"Anthropic rate limit exceeded: {e}") from e
    except BadRequestError as e:
        raise LLMInvalidRequestError(f"Anthropic rejected the request: {e}") from e
    except Exception as e:
        raise LLMProviderError(f"Anthropic error: {e}") from e


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation.

    Requests are shaped by build_request (system prompts split out, same-role
    messages merged, large user messages cached) and the raw event stream is
    decoded by a StreamSession created per call.
    """

    def __init__(self, config: LLMConfig, tokenizer: Tokenizer | None = None) -> None:
        self._config = config
        self._model = config.model
        self._tokenizer = tokenizer
        api_key = config.api_key.get_secret_value() if config.api_key else None

        base_url = config.url.removesuffix(_MESSAGES_PATH)
        default_headers = {"anthropic-beta": config.beta} if config.beta else None

        self._client = Anthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            default_headers=default_headers,
        )
        self._async_client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            default_headers=default_headers,
        )

    def build_request(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
    ) -> OutboundPayload:
        """Shape a conversation into the request body for this provider."""
        return build_request(messages, self._config, parameters, tokenizer=self._tokenizer)

    def stream_chat(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> Iterator[ChatOutput]:
        session = session or StreamSession()
        payload = self.build_request(messages, parameters)
        _logger.debug("Streaming chat request to %s (model %s)", self._config.url, payload.model)

        with _translate_errors():
            with self._client.messages.with_streaming_response.create(
                **payload.to_dict()
            ) as response:
                yield from session.chat(response.iter_lines())

    def stream_inline(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> Iterator[str]:
        session = session or StreamSession()
        payload = self.build_request(messages, parameters)
        _logger.debug("Streaming inline request to %s (model %s)", self._config.url, payload.model)

        with _translate_errors():
            with self._client.messages.with_streaming_response.create(
                **payload.to_dict()
            ) as response:
                yield from session.inline(response.iter_lines())

    async def stream_chat_async(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> AsyncIterator[ChatOutput]:
        session = session or StreamSession()
        payload = self.build_request(messages, parameters)
        _logger.debug("Streaming chat request to %s (model %s)", self._config.url, payload.model)

        with _translate_errors():
            async with self._async_client.messages.with_streaming_response.create(
                **payload.to_dict()
            ) as response:
                async for output in session.achat(response.iter_lines()):
                    yield output


__all__ = ["AnthropicProvider"]
