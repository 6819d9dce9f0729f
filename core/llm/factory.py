"""Provider selection from configuration."""
import logging

from core.config_loader import LlmConfig
from core.llm.errors import ProviderNotImplementedError
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService

logger = logging.getLogger(__name__)


def build_provider(llm_config: LlmConfig) -> LLMProvider:
    """Build the provider named by ``llm_config.provider``."""
    provider = (llm_config.provider or "openai").strip().lower()

    if provider == "openai":
        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            timeout_seconds=llm_config.request_timeout_seconds,
        )

    raise ProviderNotImplementedError(
        f"provider_not_implemented: LLM provider '{llm_config.provider}' is not yet implemented. "
        f"Set SATS_LLM_PROVIDER=openai or remove the variable to use the default."
    )
