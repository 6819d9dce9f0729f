"""Shared scoring pipeline runner module.

This module contains the batch scoring entry point used by both main.py
and the web application.
"""

import logging
import time
from typing import Optional

from core.app_context import AppContext
from core.scorer.models import BatchResult
from core.telemetry import new_request_id
from database.uow import scoring_uow

logger = logging.getLogger(__name__)


def run_scoring_batch(ctx: AppContext, request_id: Optional[str] = None) -> BatchResult:
    """Run one scoring batch in its own unit of work.

    Per-pair and per-posting failures are absorbed into the returned counts.
    Anything that escapes (store unreachable, bad schema) is reported to
    telemetry and re-raised for the caller to turn into a 500.

    Args:
        ctx: Application context with config, provider and scorer wired
        request_id: Correlation id; generated when omitted

    Returns:
        BatchResult with processed/scored/failed/notification counts
    """
    request_id = request_id or new_request_id()
    pipeline_start = time.time()

    logger.info("=" * 60)
    logger.info(f"STARTING SCORING BATCH {request_id}")
    logger.info("=" * 60)

    try:
        with scoring_uow(ctx.session_factory) as repo:
            result = ctx.scorer.run(repo, request_id=request_id)
    except Exception as e:
        ctx.telemetry.log_event(
            'ERROR', 'Async ATS scorer failed unexpectedly',
            {'error': str(e)},
            request_id
        )
        raise

    execution_time = time.time() - pipeline_start
    logger.info("=" * 60)
    logger.info(
        f"SCORING BATCH COMPLETED in {execution_time:.2f}s: "
        f"processed={result.processed_jobs} scored={result.scored_analyses} "
        f"failed={result.failed_jobs} notified={result.notifications_triggered}"
    )
    logger.info("=" * 60)
    return result
