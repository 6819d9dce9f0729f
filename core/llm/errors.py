"""
LLM Provider Errors - safe, non-leaking error taxonomy for provider calls.

Raw provider bodies are only ever logged; callers see ``message``.
"""
from typing import Optional


class LLMProviderError(Exception):
    """Base class for provider failures. ``message`` is safe to surface to users."""

    error_type = "provider_request_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderAuthError(LLMProviderError):
    error_type = "provider_auth_error"


class ProviderRateLimitedError(LLMProviderError):
    error_type = "provider_rate_limited"


class ProviderUnavailableError(LLMProviderError):
    error_type = "provider_unavailable"


class ProviderCapabilityError(LLMProviderError):
    error_type = "provider_model_capability_error"


class ProviderModelConfigError(LLMProviderError):
    error_type = "provider_model_config_error"


class ProviderRequestError(LLMProviderError):
    error_type = "provider_request_error"


class ProviderNotImplementedError(LLMProviderError):
    error_type = "provider_not_implemented"


class ProviderExhaustedError(LLMProviderError):
    """Every candidate model failed with a transient error."""
    error_type = "provider_exhausted"


TRANSIENT_ERRORS = (ProviderRateLimitedError, ProviderUnavailableError)


def is_schema_unsupported_error(provider_body: str) -> bool:
    """True when a 400 body says the structured-output mode itself is rejected."""
    body = (provider_body or "").lower()
    mentions_format = "response_format" in body or "json_schema" in body
    rejected = "unsupported" in body or "not support" in body or "invalid" in body
    return mentions_format and rejected


def map_provider_error(status: Optional[int], provider_body: str = "") -> LLMProviderError:
    """Map an HTTP status (None for no response) and body to a safe typed error."""
    if status in (401, 403):
        return ProviderAuthError("AI provider key misconfigured. Please contact support.", status)

    if status == 429:
        return ProviderRateLimitedError("AI provider rate limit reached. Please retry shortly.", status)

    if status is None or status >= 500:
        return ProviderUnavailableError("AI provider temporarily unavailable. Please retry shortly.", status)

    if status == 400:
        body = (provider_body or "").lower()
        if "response_format" in body or "json_schema" in body or "schema" in body:
            return ProviderCapabilityError(
                "AI model does not support required structured output settings.", status
            )
        if "model" in body and ("not found" in body or "does not exist" in body or "invalid" in body):
            return ProviderModelConfigError(
                "AI model configuration is invalid. Check model env var settings.", status
            )

    return ProviderRequestError(f"AI provider request failed ({status}).", status)
