"""Generation parameters accepted by the messages API.

Public API (the "studs"):
    GenerationParameters: Validated generation parameters
    validate_parameters: Validate a mapping, raising LLMParameterError
    MODEL_CHOICES: Models the adapter accepts
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import LLMParameterError

MODEL_CHOICES: tuple[str, ...] = (
    "claude-3-5-sonnet-20240620",
    "claude-3-opus-20240229",
    "claude-3-haiku-20240307",
    "claude-2.1",
    "claude-sonnet-4-20250514",
    "claude-opus-4-20250514",
)

# Reported alongside validation failures so callers see what is accepted
_VALID_RANGES: dict[str, str] = {
    "model": f"Must be one of: {', '.join(MODEL_CHOICES)}",
    "max_tokens": "Must be between 0 and 8192",
    "temperature": "Must be between 0 and 1.0",
    "top_p": "Must be between 0 and 1",
    "top_k": "Must be between 0 and 500",
    "stop_sequences": "Must have at least 1 element",
}


class GenerationParameters(BaseModel):
    """Generation parameters merged into every outbound request.

    Attributes:
        model: The model that will complete the prompt
        max_tokens: Maximum number of tokens to generate before stopping
        temperature: Amount of randomness injected into the response
        top_p: Nucleus sampling cutoff
        top_k: Only sample from the top K options for each token
        stop_sequences: Sequences where generation stops
    """

    model_config = ConfigDict(extra="forbid")

    model: str = Field(MODEL_CHOICES[0], description="Model that will complete the prompt")
    max_tokens: int = Field(4096, gt=0, le=8192, description="Maximum tokens to generate")
    temperature: float = Field(0, ge=0, le=1, description="Sampling temperature")
    top_p: float | None = Field(None, ge=0, le=1, description="Nucleus sampling cutoff")
    top_k: int | None = Field(None, ge=0, le=500, description="Top-K sampling")
    stop_sequences: list[str] | None = Field(
        None, min_length=1, description="Sequences where the API stops generating"
    )

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        if v not in MODEL_CHOICES:
            raise ValueError(f"Unknown model: {v!r}")
        return v


def validate_parameters(
    values: Mapping[str, Any] | GenerationParameters | None = None,
    default_model: str | None = None,
) -> GenerationParameters:
    """Validate generation parameters.

    Out-of-range values are rejected rather than clamped.

    Args:
        values: Parameter mapping (or an already validated model)
        default_model: Model used when ``values`` names none

    Returns:
        GenerationParameters instance

    Raises:
        LLMParameterError: If any parameter is unknown or out of range
    """
    if isinstance(values, GenerationParameters):
        return values

    data = dict(values or {})
    if default_model and "model" not in data:
        data["model"] = default_model

    try:
        return GenerationParameters(**data)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "parameters"
        valid_range = _VALID_RANGES.get(field, "Not a supported parameter")
        raise LLMParameterError(field, valid_range, error["msg"]) from e


__all__ = ["GenerationParameters", "validate_parameters", "MODEL_CHOICES"]
