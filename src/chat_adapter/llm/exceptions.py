"""Exceptions for the LLM adapter layer.

Public API (the "studs"):
    LLMError: Base exception for all LLM errors
    LLMAuthenticationError: Invalid credentials
    LLMRateLimitError: Rate limit exceeded (retryable)
    LLMInvalidRequestError: Invalid request parameters
    LLMParameterError: A generation parameter is outside its valid range
    LLMProviderError: Provider-specific error
    LLMUpstreamError: The service reported an error inside the response body
"""


class LLMError(Exception):
    """Base exception for all LLM errors."""

    pass


class LLMAuthenticationError(LLMError):
    """Invalid credentials for LLM provider."""

    pass


class LLMRateLimitError(LLMError):
    """Rate limit exceeded. This error is typically retryable."""

    pass


class LLMInvalidRequestError(LLMError):
    """Invalid request parameters."""

    pass


class LLMParameterError(LLMInvalidRequestError):
    """A generation parameter failed validation before the request was sent.

    Attributes:
        field: Name of the offending parameter
        valid_range: Human-readable description of the accepted values
    """

    def __init__(self, field: str, valid_range: str, message: str | None = None) -> None:
        self.field = field
        self.valid_range = valid_range
        detail = f"Invalid parameter {field!r}: {valid_range}"
        if message:
            detail = f"{detail} ({message})"
        super().__init__(detail)


class LLMProviderError(LLMError):
    """Provider-specific error that doesn't fit other categories."""

    pass


class LLMUpstreamError(LLMProviderError):
    """Error payload delivered by the service instead of a completion.

    Attributes:
        error_type: Error type reported by the service (e.g. "overloaded_error")
    """

    def __init__(self, message: str, error_type: str = "error") -> None:
        self.error_type = error_type
        super().__init__(message)


__all__ = [
    "LLMError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "LLMInvalidRequestError",
    "LLMParameterError",
    "LLMProviderError",
    "LLMUpstreamError",
]
