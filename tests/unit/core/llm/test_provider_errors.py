"""Unit tests for provider error mapping, pricing and provider selection."""
import pytest

from core.config_loader import LlmConfig, PricingRate
from core.llm.errors import (
    ProviderAuthError,
    ProviderCapabilityError,
    ProviderModelConfigError,
    ProviderNotImplementedError,
    ProviderRateLimitedError,
    ProviderRequestError,
    ProviderUnavailableError,
    is_schema_unsupported_error,
    map_provider_error,
)
from core.llm.factory import build_provider
from core.llm.openai_service import OpenAIService
from core.llm.pricing import estimate_cost


class TestMapProviderError:

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status):
        error = map_provider_error(status, "raw body")
        assert isinstance(error, ProviderAuthError)
        assert error.error_type == "provider_auth_error"
        assert error.status_code == status

    def test_rate_limit(self):
        error = map_provider_error(429)
        assert isinstance(error, ProviderRateLimitedError)
        assert error.message == "AI provider rate limit reached. Please retry shortly."

    @pytest.mark.parametrize("status", [None, 500, 502, 503])
    def test_unavailable(self, status):
        error = map_provider_error(status)
        assert isinstance(error, ProviderUnavailableError)
        assert error.message == "AI provider temporarily unavailable. Please retry shortly."

    def test_schema_capability_400(self):
        error = map_provider_error(400, "Invalid schema for response_format 'ats_analysis'")
        assert isinstance(error, ProviderCapabilityError)

    def test_model_config_400(self):
        error = map_provider_error(400, "The model `gpt-9` does not exist")
        assert isinstance(error, ProviderModelConfigError)
        assert "Check model env var settings" in error.message

    def test_other_status_never_leaks_body(self):
        error = map_provider_error(418, "internal stack trace")
        assert isinstance(error, ProviderRequestError)
        assert error.message == "AI provider request failed (418)."
        assert "stack trace" not in str(error)


class TestSchemaUnsupportedDetection:

    def test_detects_rejected_response_format(self):
        assert is_schema_unsupported_error("response_format of type json_schema is not supported")

    def test_ignores_unrelated_400(self):
        assert not is_schema_unsupported_error("max_tokens is too large")

    def test_handles_empty_body(self):
        assert not is_schema_unsupported_error("")


class TestEstimateCost:

    def test_known_models(self):
        assert estimate_cost(1_000_000, 1_000_000, "gpt-4o-mini") == pytest.approx(0.75)
        assert estimate_cost(1_000_000, 1_000_000, "gpt-4.1") == pytest.approx(10.0)
        assert estimate_cost(1_000_000, 1_000_000, "gpt-4.1-mini") == pytest.approx(2.0)

    def test_rounds_to_six_decimals(self):
        assert estimate_cost(1, 1, "gpt-4o-mini") == 0.000001

    def test_unknown_model_returns_none(self):
        assert estimate_cost(500, 500, "mystery-model") is None

    def test_override_wins_over_table(self):
        assert estimate_cost(1_000_000, 0, "gpt-4.1", PricingRate(input=1.0, output=0.0)) == pytest.approx(1.0)


class TestBuildProvider:

    def test_openai_provider(self):
        provider = build_provider(LlmConfig(api_key="test"))
        assert isinstance(provider, OpenAIService)
        assert provider.name == "openai"

    def test_unknown_provider_not_implemented(self):
        with pytest.raises(ProviderNotImplementedError) as exc_info:
            build_provider(LlmConfig(provider="anthropic", api_key="test"))
        assert exc_info.value.error_type == "provider_not_implemented"
