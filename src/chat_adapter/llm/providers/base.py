"""Abstract base class for LLM providers.

Public API (the "studs"):
    BaseLLMProvider: Abstract base class for LLM providers
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator, Mapping, Sequence
from typing import Any

from chat_adapter.llm.stream.session import StreamSession
from chat_adapter.llm.types import ChatOutput, LLMMessage, LLMResponse


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Providers stream every response. ``create_message`` drains a stream and
    returns the assembled result; the ``stream_*`` methods hand output to the
    caller as it arrives. Passing a ``session`` lets the caller read token
    usage even if it stops consuming early.
    """

    @abstractmethod
    def stream_chat(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> Iterator[ChatOutput]:
        """Stream a response in chat transcript form.

        Args:
            messages: Conversation messages
            parameters: Generation parameters
            session: Session to record state in (a new one if omitted)

        Yields:
            ChatOutput for each frame that produces output
        """
        ...

    @abstractmethod
    def stream_inline(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> Iterator[str]:
        """Stream a response as plain text fragments."""
        ...

    @abstractmethod
    def stream_chat_async(
        self,
        messages: Sequence[LLMMessage],
        parameters: Mapping[str, Any] | None = None,
        session: StreamSession | None = None,
    ) -> AsyncIterator[ChatOutput]:
        """Async variant of stream_chat."""
        ...

    def create_message(
        self,
        messages: Sequence[LLMMessage],
        system: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> LLMResponse:
        """Create a message synchronously.

        Args:
            messages: List of conversation messages
            system: Optional system prompt placed before the conversation
            parameters: Generation parameters

        Returns:
            LLMResponse with generated content
        """
        session = StreamSession()
        for _ in self.stream_chat(_with_system(messages, system), parameters, session=session):
            pass
        return session.to_response()

    async def create_message_async(
        self,
        messages: Sequence[LLMMessage],
        system: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> LLMResponse:
        """Create a message asynchronously.

        Args:
            messages: List of conversation messages
            system: Optional system prompt placed before the conversation
            parameters: Generation parameters

        Returns:
            LLMResponse with generated content
        """
        session = StreamSession()
        async for _ in self.stream_chat_async(
            _with_system(messages, system), parameters, session=session
        ):
            pass
        return session.to_response()


def _with_system(messages: Sequence[LLMMessage], system: str | None) -> list[LLMMessage]:
    if not system:
        return list(messages)
    return [LLMMessage(role="system", content=system), *messages]


__all__ = ["BaseLLMProvider"]
