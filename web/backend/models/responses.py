#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ScoringRunData(BaseModel):
    """Counts for one scoring batch."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "request_id": "ats-1767225600000-k3v9qz",
                "processed_jobs": 3,
                "scored_analyses": 5,
                "failed_jobs": 1,
                "notifications_triggered": 2,
                "duration_ms": 18422
            }
        }
    )

    request_id: str
    processed_jobs: int = Field(ge=0)
    scored_analyses: int = Field(ge=0)
    failed_jobs: int = Field(0, ge=0)
    notifications_triggered: int = Field(0, ge=0)
    duration_ms: int = Field(0, ge=0)
    message: Optional[str] = None


class ScoringRunResponse(BaseModel):
    """Response for POST /api/scoring/run."""
    success: bool
    data: Optional[ScoringRunData] = None
    error: Optional[str] = None
