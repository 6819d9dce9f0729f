#!/usr/bin/env python3
"""
Scoring endpoints - trigger one batch of proactive match scoring.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.app_context import AppContext
from pipeline.runner import run_scoring_batch
from ..config import get_config
from ..dependencies import get_app_context
from ..exceptions import MethodNotAllowedException, ScoringRunFailedException
from ..models.responses import ScoringRunData, ScoringRunResponse

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/scoring", tags=["scoring"])

NO_QUEUED_POSTINGS_MESSAGE = "No queued staged jobs found"
UNEXPECTED_FAILURE_MESSAGE = "Unexpected scorer failure"


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "type": "RateLimitExceeded"}
    )


def _rate_limit() -> str:
    return get_config().web.rate_limit


@router.options("/run")
def preflight_scoring_run():
    """CORS preflight; headers are added by the origin middleware."""
    return Response(status_code=200, content="ok")


@router.post("/run", response_model=ScoringRunResponse)
@limiter.limit(_rate_limit)
def run_scoring_endpoint(request: Request, ctx: AppContext = Depends(get_app_context)):
    """
    Score every queued posting against every candidate's latest baseline.

    No body is read; the batch size is a server-side setting.

    Status codes:
    - 200: every processed posting succeeded, or there was nothing to do
    - 207: at least one posting failed (counts in body)
    - 500: configuration missing or the batch aborted (generic message; detail is logged)
    """
    try:
        result = run_scoring_batch(ctx)
    except Exception as e:
        # Raw error text is logged, never returned
        logger.error(f"Scoring run failed: {e}", exc_info=True)
        raise ScoringRunFailedException(UNEXPECTED_FAILURE_MESSAGE) from e

    data = ScoringRunData(**result.to_response_data())
    if result.processed_jobs == 0 and result.skipped_jobs == 0:
        data.message = NO_QUEUED_POSTINGS_MESSAGE

    body = ScoringRunResponse(success=result.success, data=data)
    return JSONResponse(status_code=result.status_code, content=body.model_dump(exclude_none=True))


@router.api_route("/run", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def reject_scoring_method(request: Request):
    raise MethodNotAllowedException("Method not allowed")
