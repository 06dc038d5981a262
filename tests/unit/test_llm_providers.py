"""Tests for the Anthropic provider with mocked SDK clients."""

from unittest.mock import MagicMock, patch

import pytest

from chat_adapter.llm.config import LLMConfig
from chat_adapter.llm.exceptions import (
    LLMAuthenticationError,
    LLMInvalidRequestError,
    LLMParameterError,
    LLMProviderError,
    LLMRateLimitError,
    LLMUpstreamError,
)
from chat_adapter.llm.providers.base import BaseLLMProvider
from chat_adapter.llm.stream.session import StreamSession
from chat_adapter.llm.types import ChatOutput, LLMMessage, LLMResponse


class _FakeResponse:
    """Stands in for the SDK's raw streaming response."""

    def __init__(self, lines):
        self._lines = lines

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def iter_lines(self):
        return iter(self._lines)


class _FakeAsyncResponse(_FakeResponse):
    async def _lines_async(self):
        for line in self._lines:
            yield line

    def iter_lines(self):
        return self._lines_async()


def _http_error(cls, status_code, message):
    mock_http_response = MagicMock()
    mock_http_response.status_code = status_code
    mock_http_response.headers = {}
    return cls(message, response=mock_http_response, body=None)


@pytest.fixture
def config():
    return LLMConfig(provider="anthropic", api_key="sk-test")


class TestAnthropicProvider:
    """Tests for AnthropicProvider initialization and streaming."""

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_init_creates_clients(self, mock_sync, mock_async, config):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        AnthropicProvider(config)

        mock_sync.assert_called_once()
        mock_async.assert_called_once()
        kwargs = mock_sync.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["base_url"] == "https://api.anthropic.com"
        assert kwargs["default_headers"] == {"anthropic-beta": "prompt-caching-2024-07-31"}
        assert kwargs["timeout"] == 120
        assert kwargs["max_retries"] == 3

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_no_beta_header(self, mock_sync, mock_async):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        AnthropicProvider(LLMConfig(api_key="sk-test", beta=None))
        assert mock_sync.call_args.kwargs["default_headers"] is None

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_is_base_provider(self, mock_sync, mock_async, config):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        assert isinstance(AnthropicProvider(config), BaseLLMProvider)

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_stream_chat_sends_shaped_payload(self, mock_sync, mock_async, config, hello_stream):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.return_value = _FakeResponse(hello_stream)

        provider = AnthropicProvider(config)
        outputs = list(
            provider.stream_chat(
                [
                    LLMMessage(role="system", content="Be terse"),
                    LLMMessage(role="user", content="Hi"),
                    LLMMessage(role="user", content="there"),
                ],
                {"max_tokens": 100},
            )
        )

        kwargs = create.call_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["max_tokens"] == 100
        assert kwargs["system"][0]["cache_control"] == {"type": "ephemeral"}
        assert kwargs["messages"] == [{"role": "user", "content": "Hi\n\nthere"}]
        assert outputs[0] == ChatOutput(role="assistant", content="")
        assert "".join(o.content for o in outputs) == "Hello world"

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_stream_inline(self, mock_sync, mock_async, config, hello_stream):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.return_value = _FakeResponse(hello_stream)

        provider = AnthropicProvider(config)
        session = StreamSession()
        text = "".join(
            provider.stream_inline([LLMMessage(role="user", content="Hi")], session=session)
        )
        assert text == "Hello world"
        assert session.total_tokens == 15

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_create_message_returns_llm_response(
        self, mock_sync, mock_async, config, hello_stream
    ):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.return_value = _FakeResponse(hello_stream)

        provider = AnthropicProvider(config)
        response = provider.create_message(
            messages=[LLMMessage(role="user", content="Hello")],
            system="Be helpful",
        )

        assert isinstance(response, LLMResponse)
        assert response.content == "Hello world"
        assert response.model == "claude-3-5-sonnet-20240620"
        assert response.usage["input_tokens"] == 10
        assert response.usage["total_tokens"] == 15
        assert response.stop_reason == "end_turn"
        assert create.call_args.kwargs["system"][0]["text"] == "Be helpful"

    @pytest.mark.asyncio
    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    async def test_create_message_async(self, mock_sync, mock_async, config, hello_stream):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_async.return_value.messages.with_streaming_response.create
        create.return_value = _FakeAsyncResponse(hello_stream)

        provider = AnthropicProvider(config)
        response = await provider.create_message_async([LLMMessage(role="user", content="Hi")])

        assert response.content == "Hello world"
        assert response.usage["total_tokens"] == 15

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_parameter_error_raised_before_send(self, mock_sync, mock_async, config):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        provider = AnthropicProvider(config)
        with pytest.raises(LLMParameterError):
            list(provider.stream_chat([LLMMessage(role="user", content="Hi")], {"top_k": 1000}))
        mock_sync.return_value.messages.with_streaming_response.create.assert_not_called()

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_upstream_error_surfaces(self, mock_sync, mock_async, config, message_start, sse):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        lines = [
            *message_start(),
            *sse("error", error={"type": "overloaded_error", "message": "Overloaded"}),
        ]
        create = mock_sync.return_value.messages.with_streaming_response.create
        create.return_value = _FakeResponse(lines)

        provider = AnthropicProvider(config)
        with pytest.raises(LLMUpstreamError, match="Overloaded"):
            list(provider.stream_chat([LLMMessage(role="user", content="Hi")]))

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_anthropic_auth_error_mapping(self, mock_sync, mock_async, config):
        """AuthenticationError from SDK maps to LLMAuthenticationError."""
        from anthropic import AuthenticationError

        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.side_effect = _http_error(AuthenticationError, 401, "bad key")

        provider = AnthropicProvider(config)
        with pytest.raises(LLMAuthenticationError):
            provider.create_message(messages=[LLMMessage(role="user", content="Hello")])

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_anthropic_rate_limit_error_mapping(self, mock_sync, mock_async, config):
        """RateLimitError from SDK maps to LLMRateLimitError."""
        from anthropic import RateLimitError

        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.side_effect = _http_error(RateLimitError, 429, "rate limited")

        provider = AnthropicProvider(config)
        with pytest.raises(LLMRateLimitError):
            provider.create_message(messages=[LLMMessage(role="user", content="Hello")])

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_anthropic_bad_request_mapping(self, mock_sync, mock_async, config):
        from anthropic import BadRequestError

        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.side_effect = _http_error(BadRequestError, 400, "bad request")

        provider = AnthropicProvider(config)
        with pytest.raises(LLMInvalidRequestError):
            provider.create_message(messages=[LLMMessage(role="user", content="Hello")])

    @patch("chat_adapter.llm.providers.anthropic.AsyncAnthropic")
    @patch("chat_adapter.llm.providers.anthropic.Anthropic")
    def test_unexpected_error_mapping(self, mock_sync, mock_async, config):
        from chat_adapter.llm.providers.anthropic import AnthropicProvider

        create = mock_sync.return_value.messages.with_streaming_response.create
        create.side_effect = RuntimeError("connection dropped")

        provider = AnthropicProvider(config)
        with pytest.raises(LLMProviderError, match="connection dropped"):
            provider.create_message(messages=[LLMMessage(role="user", content="Hello")])

