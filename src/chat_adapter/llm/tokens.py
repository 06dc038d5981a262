"""Token counting used to decide which messages are worth caching.

Public API (the "studs"):
    Tokenizer: Protocol for token counters
    TiktokenCounter: tiktoken-backed counter, the default
    ApproximateTokenizer: Character-based estimator, no model vocabulary needed
    get_default_tokenizer: Shared default TiktokenCounter
"""

from __future__ import annotations

import functools
import math
from typing import Protocol, runtime_checkable

DEFAULT_ENCODING = "cl100k_base"


@runtime_checkable
class Tokenizer(Protocol):
    """Protocol for token counting.

    Any counter works as long as the count never decreases as text grows,
    otherwise threshold comparisons stop being meaningful.
    """

    def count_tokens(self, text: str) -> int: ...


class TiktokenCounter:
    """Token counter using the tiktoken library.

    cl100k_base is not Claude's vocabulary, but its counts are close enough
    to compare against a caching threshold.

    The tiktoken import and encoding load are deferred to ``__init__`` so
    that callers who inject their own Tokenizer never load BPE data.
    """

    __slots__ = ("_cache", "_encoding", "_max_cache_size")

    def __init__(self, encoding_name: str = DEFAULT_ENCODING, max_cache_size: int = 1_000) -> None:
        try:
            import tiktoken
        except ImportError:
            msg = (
                "tiktoken is required for the default tokenizer. "
                "Install it with: pip install tiktoken"
            )
            raise ImportError(msg) from None

        self._encoding = tiktoken.get_encoding(encoding_name)
        self._max_cache_size = max_cache_size
        self._cache: dict[str, int] = {}

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        if text in self._cache:
            return self._cache[text]
        count = len(self._encoding.encode(text, disallowed_special=()))
        # Only short texts are cached
        if len(text) < 10_000:
            if len(self._cache) >= self._max_cache_size:
                self._cache.clear()
            self._cache[text] = count
        return count

    def __repr__(self) -> str:
        return f"{type(self).__name__}(encoding={self._encoding.name!r})"


class ApproximateTokenizer:
    """Estimate tokens as one per ``chars_per_token`` characters, rounded up.

    Useful offline, where tiktoken cannot fetch its encoding data.
    """

    __slots__ = ("_chars_per_token",)

    def __init__(self, chars_per_token: int = 4) -> None:
        if chars_per_token < 1:
            raise ValueError("chars_per_token must be at least 1")
        self._chars_per_token = chars_per_token

    def count_tokens(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self._chars_per_token)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(chars_per_token={self._chars_per_token})"


@functools.cache
def get_default_tokenizer() -> TiktokenCounter:
    """Get or create the shared default TiktokenCounter.

    Call ``get_default_tokenizer.cache_clear()`` to reset it (useful in tests).
    """
    return TiktokenCounter()


__all__ = [
    "DEFAULT_ENCODING",
    "Tokenizer",
    "TiktokenCounter",
    "ApproximateTokenizer",
    "get_default_tokenizer",
]
