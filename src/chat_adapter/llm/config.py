"""Configuration model for the LLM adapter.

Public API (the "studs"):
    LLMConfig: Configuration model for LLM providers
    DEFAULT_CACHE_OVER: Default token threshold for prompt caching
"""

import os
import re
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

DEFAULT_CACHE_OVER = 300
DEFAULT_MODEL = "claude-3-5-sonnet-20240620"

# Data-driven mapping: provider -> {config_field: env_var}
_PROVIDER_ENV_MAP: dict[str, dict[str, str]] = {
    "anthropic": {
        "api_key": "ANTHROPIC_API_KEY",
        "model": "ANTHROPIC_MODEL",
        "cache_over": "ANTHROPIC_CACHE_OVER",
    },
}

# Fields that are required per provider (must be set in env)
_PROVIDER_REQUIRED_FIELDS: dict[str, set[str]] = {
    "anthropic": {"api_key"},
}


class LLMConfig(BaseModel):
    """Configuration model for the Anthropic messages adapter.

    Attributes:
        provider: Provider name
        model: Default model used when request parameters name none
        api_key: API key
        url: Messages endpoint
        anthropic_version: Value of the anthropic-version header
        beta: Value of the anthropic-beta header (enables prompt caching)
        cache_over: Cache any user message with at least this many tokens
        roles: Mapping of logical roles to provider role names
        timeout_seconds: Request timeout
        max_retries: Maximum retry attempts performed by the HTTP client
    """

    provider: Literal["anthropic"] = Field("anthropic", description="Provider name")
    model: str = Field(DEFAULT_MODEL, description="Default model name")
    api_key: SecretStr | None = Field(None, description="API key")
    url: str = Field("https://api.anthropic.com/v1/messages", description="Messages endpoint")
    anthropic_version: str = Field("2023-06-01", description="anthropic-version header")
    beta: str | None = Field("prompt-caching-2024-07-31", description="anthropic-beta header")
    cache_over: int = Field(
        DEFAULT_CACHE_OVER, ge=0, description="Token threshold for caching user messages"
    )
    roles: dict[str, str] = Field(
        default_factory=lambda: {"llm": "assistant", "user": "user"},
        description="Logical role -> provider role",
    )
    timeout_seconds: int = Field(120, ge=1, le=600, description="Request timeout in seconds")
    max_retries: int = Field(3, ge=0, le=10, description="Maximum retry attempts")

    @field_validator("anthropic_version")
    @classmethod
    def validate_anthropic_version(cls, v: str) -> str:
        """Validate anthropic_version matches YYYY-MM-DD format."""
        if not re.match(r"^\d{4}-\d{2}-\d{2}$", v):
            raise ValueError(f"Invalid anthropic_version format: {v!r}. Expected YYYY-MM-DD")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate url starts with https://."""
        if not v.startswith("https://"):
            raise ValueError(f"url must start with 'https://': {v!r}")
        return v

    @model_validator(mode="after")
    def validate_provider_config(self) -> "LLMConfig":
        """Validate provider-specific requirements."""
        if not self.api_key:
            raise ValueError("api_key is required for anthropic provider")
        for logical in ("llm", "user"):
            if logical not in self.roles:
                raise ValueError(f"roles must define the {logical!r} role")
        return self

    @property
    def user_role(self) -> str:
        return self.roles["user"]

    @property
    def llm_role(self) -> str:
        return self.roles["llm"]

    def headers(self) -> dict[str, str]:
        """Build the HTTP headers sent with every request."""
        headers = {
            "content-type": "application/json",
            "x-api-key": self.api_key.get_secret_value() if self.api_key else "",
            "anthropic-version": self.anthropic_version,
        }
        if self.beta:
            headers["anthropic-beta"] = self.beta
        return headers

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """Create LLMConfig from environment variables.

        Environment variables:
            LLM_PROVIDER: Provider name (default: anthropic)
            ANTHROPIC_API_KEY: Anthropic API key
            ANTHROPIC_MODEL: Default model (optional)
            ANTHROPIC_CACHE_OVER: Prompt caching token threshold (optional)

        Returns:
            LLMConfig instance

        Raises:
            ValueError: If provider is unknown or required env vars are missing
        """
        provider = os.environ.get("LLM_PROVIDER", "anthropic")

        if provider not in _PROVIDER_ENV_MAP:
            raise ValueError(f"Unknown provider: {provider}")

        env_map = _PROVIDER_ENV_MAP[provider]
        required = _PROVIDER_REQUIRED_FIELDS.get(provider, set())

        kwargs: dict[str, Any] = {"provider": provider}
        for field, env_var in env_map.items():
            value = os.environ.get(env_var)
            if value is None and field in required:
                raise ValueError(
                    f"{env_var} environment variable is required when LLM_PROVIDER={provider}"
                )
            if value is not None:
                kwargs[field] = value

        return cls(**kwargs)


__all__ = ["LLMConfig", "DEFAULT_CACHE_OVER", "DEFAULT_MODEL"]
