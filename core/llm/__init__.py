"""LLM Module - provider abstraction and the OpenAI adapter."""
from core.llm.interfaces import LLMProvider, LLMRequest, LLMResponse
from core.llm.openai_service import OpenAIService
from core.llm.factory import build_provider

__all__ = ['LLMProvider', 'LLMRequest', 'LLMResponse', 'OpenAIService', 'build_provider']
