"""
OpenAI Service - LLM provider adapter for the OpenAI chat completions API.

Walks the request's candidate models in order, enforcing structured output
when a schema is supplied, and maps SDK failures onto the safe error
taxonomy in ``core.llm.errors``.
"""
from typing import Dict, Any, List, Optional, Tuple
import logging
import time

import openai
from openai import OpenAI

from core.llm.errors import (
    LLMProviderError,
    ProviderExhaustedError,
    TRANSIENT_ERRORS,
    is_schema_unsupported_error,
    map_provider_error,
)
from core.llm.interfaces import LLMProvider, LLMRequest, LLMResponse
from core.llm.pricing import estimate_cost
from core.llm.system_prompts import RETRY_HINT

logger = logging.getLogger(__name__)


class _SchemaModeUnsupported(Exception):
    """The model rejected response_format=json_schema; resend without it."""
    pass


def _provider_body(exc: openai.APIStatusError) -> str:
    """Best-effort raw error body, for logging and classification only."""
    try:
        return exc.response.text
    except Exception:
        return str(exc.body or exc.message or "")


def build_messages(request: LLMRequest) -> List[Dict[str, str]]:
    user_content = request.user_prompt
    if request.attempt > 0:
        user_content = f"{user_content}{RETRY_HINT}"
    return [
        {"role": "system", "content": request.system_prompt},
        {"role": "user", "content": user_content},
    ]


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    The SDK's own retries are disabled: a rate-limit or server error moves on
    to the next candidate model instead of sleeping on the same one.
    """

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
        client: Optional[OpenAI] = None
    ):
        if client is None:
            client_kwargs: Dict[str, Any] = {'max_retries': 0, 'timeout': timeout_seconds}
            if api_key:
                client_kwargs['api_key'] = api_key
            if base_url:
                client_kwargs['base_url'] = base_url.rstrip('/')
            client = OpenAI(**client_kwargs)
        self.client = client

    def invoke(self, request: LLMRequest) -> LLMResponse:
        if not request.model_candidates:
            raise ValueError("LLMRequest.model_candidates must not be empty")

        last_error: Optional[str] = None
        start_time = time.monotonic()

        for model_name in request.model_candidates:
            try:
                completion, structured = self._complete(request, model_name)
            except TRANSIENT_ERRORS as e:
                last_error = f"Provider error on {model_name}: {e.status_code or e.error_type}"
                logger.warning(
                    f"[{request.task_label}] {e.error_type} on {model_name}; "
                    f"trying next candidate model"
                )
                continue

            raw_content = ""
            if completion.choices:
                raw_content = (completion.choices[0].message.content or "").strip()

            usage = completion.usage
            prompt_tokens = getattr(usage, 'prompt_tokens', 0) or 0
            completion_tokens = getattr(usage, 'completion_tokens', 0) or 0
            duration_ms = int((time.monotonic() - start_time) * 1000)

            cost = estimate_cost(prompt_tokens, completion_tokens, model_name, request.pricing_override)
            logger.info(
                f"[{request.task_label}] {model_name} responded in {duration_ms}ms "
                f"(prompt={prompt_tokens}, completion={completion_tokens}, cost={cost})"
            )

            return LLMResponse(
                raw_content=raw_content,
                model_used=model_name,
                provider=self.name,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                cost_estimate_usd=cost,
                duration_ms=duration_ms,
                retry_attempts_used=request.attempt,
                used_structured_output=structured,
            )

        raise ProviderExhaustedError(
            last_error or "All LLM model candidates exhausted without a successful response"
        )

    def _complete(self, request: LLMRequest, model_name: str) -> Tuple[Any, bool]:
        """One attempt on one model. Falls back to plain mode if schema mode is rejected."""
        use_schema = request.json_schema is not None
        if use_schema:
            try:
                return self._send(request, model_name, use_schema=True), True
            except _SchemaModeUnsupported:
                logger.info(
                    f"[{request.task_label}] Schema output unsupported by {model_name}; "
                    f"retrying without schema mode"
                )
        return self._send(request, model_name, use_schema=False), False

    def _send(self, request: LLMRequest, model_name: str, use_schema: bool):
        kwargs: Dict[str, Any] = {
            'model': model_name,
            'temperature': request.temperature,
            'max_tokens': request.max_tokens,
            'messages': build_messages(request),
        }
        if use_schema:
            kwargs['response_format'] = {
                "type": "json_schema",
                "json_schema": {
                    "name": request.schema_name or "response",
                    "strict": True,
                    "schema": request.json_schema,
                },
            }

        try:
            return self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as e:
            body = _provider_body(e)
            if use_schema and e.status_code == 400 and is_schema_unsupported_error(body):
                raise _SchemaModeUnsupported() from e
            error = map_provider_error(e.status_code, body)
            self._log_failure(request, model_name, error, body)
            raise error from e
        except openai.APIConnectionError as e:
            # Covers APITimeoutError; no HTTP response to classify.
            error = map_provider_error(None)
            self._log_failure(request, model_name, error, str(e))
            raise error from e

    @staticmethod
    def _log_failure(request: LLMRequest, model_name: str, error: LLMProviderError, body: str) -> None:
        logger.error(
            f"[{request.task_label}] OpenAI error: status={error.status_code} "
            f"type={error.error_type} model={model_name}"
        )
        logger.debug(f"[{request.task_label}] Provider body: {body}")
