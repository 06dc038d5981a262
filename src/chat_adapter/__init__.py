"""Chat Adapter - streamed Anthropic messages adapter for chat clients.

Chat Adapter shapes conversations into messages API requests (system
prompts split out, same-role messages merged, prompt caching applied) and
decodes the streamed response into output for a chat transcript or an
inline edit buffer while tracking token usage.

Key components:
    - build_request: Conversation -> outbound payload
    - StreamSession: Streamed frames -> chat/inline output and token totals
    - CLI: Inspect payloads, replay captured streams, chat from a terminal

Quick start:
    # Install
    pip install chat-adapter

    # Inspect the request a conversation produces
    chat-adapter request conversation.yaml

    # Replay a captured event stream
    chat-adapter replay response.sse --inline

    # Chat (needs ANTHROPIC_API_KEY)
    chat-adapter chat conversation.yaml
"""

from .llm import (
    ChatOutput,
    LLMConfig,
    LLMMessage,
    StreamSession,
    build_request,
)

__version__ = "0.1.0"

__all__ = [
    "ChatOutput",
    "LLMConfig",
    "LLMMessage",
    "StreamSession",
    "build_request",
    "__version__",
]
