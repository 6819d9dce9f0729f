#!/usr/bin/env python3
"""
Scoring Models - typed boundary for model output plus batch data structures.

Model output is parsed exactly once into ``MatchAnalysis``; everything past
``parse_match_analysis`` works with validated, clamped values.
"""

import json
import math
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from core.exceptions import MalformedOutputError
from core.utils import clamp01, round_half_away_from_zero


def _as_string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]


class ScoreBreakdown(BaseModel):
    skills_alignment: float = 0.0
    experience_relevance: float = 0.0
    domain_fit: float = 0.0
    format_quality: float = 0.0

    @field_validator('*', mode='before')
    @classmethod
    def _clamp(cls, value: Any) -> float:
        return clamp01(value)


class EvidenceItem(BaseModel):
    skill: str = ""
    jd_quote: str = ""
    resume_quote: str = ""
    reasoning: str = ""


class MatchAnalysis(BaseModel):
    """
    Validated ATS comparison result. All probability fields are in [0, 1].

    Every top-level key is required; wrongly typed sections are coerced and clamped.
    """
    match_score: float
    keywords_found: List[str]
    keywords_missing: List[str]
    resume_warnings: List[str]
    recommendations: List[str]
    score_breakdown: ScoreBreakdown
    evidence: List[EvidenceItem]

    @field_validator('match_score', mode='before')
    @classmethod
    def _clamp_match_score(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            raise ValueError("match_score must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError("match_score must be a number")
        if math.isnan(number):
            raise ValueError("match_score must be a number")
        return clamp01(number)

    @field_validator('keywords_found', 'keywords_missing', 'resume_warnings', 'recommendations', mode='before')
    @classmethod
    def _coerce_string_list(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator('score_breakdown', mode='before')
    @classmethod
    def _coerce_breakdown(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @field_validator('evidence', mode='before')
    @classmethod
    def _coerce_evidence(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @property
    def score_percent(self) -> int:
        """0-100 integer score, rounded half away from zero."""
        return max(0, min(100, round_half_away_from_zero(Decimal(str(self.match_score)) * 100)))


def parse_match_analysis(raw_content: str) -> MatchAnalysis:
    """Parse raw model content, or raise MalformedOutputError."""
    try:
        data = json.loads(raw_content)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedOutputError(f"Model output is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedOutputError("Model output is not a JSON object")

    try:
        return MatchAnalysis.model_validate(data)
    except ValidationError as e:
        raise MalformedOutputError(f"Model output failed validation: {e.error_count()} error(s)") from e


@dataclass
class PostingDTO:
    """Staged posting detached from the session."""
    id: Any
    source: str
    source_url: str
    title: str
    company_name: Optional[str]
    description_raw: str

    @property
    def display_name(self) -> str:
        return f"{self.title} @ {self.company_name}" if self.company_name else self.title


@dataclass
class CandidateDTO:
    """The latest resume of one account."""
    user_id: Any
    resume_id: Any


@dataclass
class Baseline:
    """Candidate-side comparison text. ``text`` is None when variant is 'none'."""
    text: Optional[str]
    variant: str  # skills_profile|resume_extraction|none


@dataclass
class PostingOutcome:
    posting_id: Any
    scored: int = 0
    errors: int = 0
    notifications: int = 0
    last_error: Optional[str] = None
    skipped: bool = False

    @property
    def failed(self) -> bool:
        return self.errors > 0 and self.scored == 0


@dataclass
class BatchResult:
    """Aggregate outcome of one batch run."""
    request_id: str
    processed_jobs: int = 0
    scored_analyses: int = 0
    failed_jobs: int = 0
    notifications_triggered: int = 0
    skipped_jobs: int = 0
    duration_ms: int = 0
    outcomes: List[PostingOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """False only when postings failed and nothing at all was scored."""
        return self.failed_jobs == 0 or self.scored_analyses > 0

    @property
    def status_code(self) -> int:
        return 207 if self.failed_jobs > 0 else 200

    def to_response_data(self) -> dict:
        return {
            'request_id': self.request_id,
            'processed_jobs': self.processed_jobs,
            'scored_analyses': self.scored_analyses,
            'failed_jobs': self.failed_jobs,
            'notifications_triggered': self.notifications_triggered,
            'duration_ms': self.duration_ms,
        }
