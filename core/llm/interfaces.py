"""
LLM Provider Interface - Abstract base for AI service providers.

This module defines the request/response contract every provider adapter
(OpenAI today, others later) implements.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, List, Any, Optional

from core.config_loader import PricingRate


@dataclass(frozen=True)
class LLMRequest:
    """
    One chat-completion call.

    model_candidates is ordered: the first entry is the primary model, the
    rest are fallbacks used only after a rate-limit or server failure.
    """
    system_prompt: str
    user_prompt: str
    model_candidates: List[str]
    temperature: float
    max_tokens: int
    task_label: str
    json_schema: Optional[Dict[str, Any]] = None
    schema_name: Optional[str] = None
    retry_attempts: int = 0
    pricing_override: Optional[PricingRate] = None
    # 0 for the first try; >0 when the caller retries after malformed output
    attempt: int = 0

    def for_attempt(self, attempt: int) -> "LLMRequest":
        return replace(self, attempt=attempt)


@dataclass(frozen=True)
class LLMResponse:
    raw_content: str
    model_used: str
    provider: str
    prompt_tokens: int
    completion_tokens: int
    cost_estimate_usd: Optional[float]
    duration_ms: int
    retry_attempts_used: int
    used_structured_output: bool = field(default=True)


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers (OpenAI, Ollama, Anthropic, etc.).
    """

    name: str = "unknown"

    @abstractmethod
    def invoke(self, request: LLMRequest) -> LLMResponse:
        """
        Run the request against its candidate models in order.

        Raises:
            LLMProviderError: auth and non-transient client errors immediately,
                ProviderExhaustedError when every model failed transiently.
        """
        pass
