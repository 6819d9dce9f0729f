"""
Test doubles for the LLM layer.

FakeProvider replays scripted outcomes; the make_* helpers build the
objects the openai SDK returns or raises.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import httpx
import openai

from core.llm.interfaces import LLMProvider, LLMRequest, LLMResponse

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def make_analysis_payload(match_score: float = 0.82, **overrides) -> Dict[str, Any]:
    payload = {
        "match_score": match_score,
        "keywords_found": ["React", "TypeScript"],
        "keywords_missing": ["GraphQL"],
        "resume_warnings": [],
        "recommendations": ["Mention GraphQL projects", "Quantify performance work"],
        "score_breakdown": {
            "skills_alignment": 0.9,
            "experience_relevance": 0.8,
            "domain_fit": 0.7,
            "format_quality": 0.75,
        },
        "evidence": [
            {
                "skill": "React",
                "jd_quote": "work daily with React",
                "resume_quote": "React | years=3",
                "reasoning": "Direct match",
            }
        ],
    }
    payload.update(overrides)
    return payload


def make_completion(content: str, prompt_tokens: int = 1000, completion_tokens: int = 200):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    completion = MagicMock()
    completion.choices = [choice]
    completion.usage = MagicMock(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    return completion


def make_status_error(error_cls, status_code: int, body: str = "{}"):
    response = httpx.Response(status_code, text=body, request=_REQUEST)
    return error_cls(f"Error code: {status_code}", response=response, body=None)


def make_connection_error():
    return openai.APIConnectionError(request=_REQUEST)


def make_timeout_error():
    return openai.APITimeoutError(request=_REQUEST)


class FakeProvider(LLMProvider):
    """
    Returns (or raises) scripted outcomes in order; the last one repeats.

    Outcomes are raw content strings, dicts (serialized to JSON) or exceptions.
    models_per_call scripts which model answered each call, like a fallback would.
    """

    name = "fake"

    def __init__(
        self,
        outcomes: List[Any],
        model_used: str = "gpt-4.1",
        cost: Optional[float] = 0.0036,
        models_per_call: Optional[List[str]] = None
    ):
        self.outcomes = list(outcomes)
        self.model_used = model_used
        self.models_per_call = list(models_per_call or [])
        self.cost = cost
        self.requests: List[LLMRequest] = []

    def invoke(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.outcomes) - 1)
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        content = json.dumps(outcome) if isinstance(outcome, dict) else outcome
        model_used = self.model_used
        if self.models_per_call:
            model_used = self.models_per_call[min(len(self.requests) - 1, len(self.models_per_call) - 1)]
        return LLMResponse(
            raw_content=content,
            model_used=model_used,
            provider=self.name,
            prompt_tokens=1000,
            completion_tokens=200,
            cost_estimate_usd=self.cost,
            duration_ms=5,
            retry_attempts_used=request.attempt,
        )
