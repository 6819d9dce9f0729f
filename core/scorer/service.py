#!/usr/bin/env python3
"""
Batch Scorer - scores every queued posting against every candidate's latest baseline.

Per (posting, candidate) pair:
- resolve the effective notification threshold
- build the candidate baseline (skipped silently when none exists)
- upsert the job description and seed the analysis as processing
- invoke the LLM provider, re-asking on malformed output
- complete the analysis and notify when the score clears the threshold

A failing pair never aborts the batch. A posting ends in ``error`` only when
at least one pair failed and none succeeded; otherwise it ends ``processed``.
"""

import logging
import time
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from core.config_loader import LlmConfig, ScorerConfig
from core.exceptions import MalformedOutputError
from core.llm.interfaces import LLMProvider, LLMRequest, LLMResponse
from core.llm.schema_models import ATS_ANALYSIS_SCHEMA
from core.llm.system_prompts import SCORING_SYSTEM_PROMPT, build_scoring_prompt
from core.telemetry import TelemetrySink, new_request_id
from core.utils import normalize_text
from database.models import PROACTIVE_THRESHOLD_DEFAULT_KEY
from database.repository import ScoringRepository

from core.scorer.baseline import BaselineBuilder
from core.scorer.models import (
    BatchResult,
    CandidateDTO,
    MatchAnalysis,
    PostingDTO,
    PostingOutcome,
    parse_match_analysis,
)
from core.scorer.thresholds import ThresholdResolver

logger = logging.getLogger(__name__)

ANALYSIS_SOURCE = 'proactive_staged_job'
NO_VALID_OUTPUT_MESSAGE = 'No model produced schema-valid output'
DESCRIPTION_TOO_SHORT_MESSAGE = 'Description too short to score'


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _log_schema_retry(retry_state) -> None:
    logger.warning(
        f"Malformed model output (attempt {retry_state.attempt_number}); "
        f"retrying with invalid-response hint"
    )


class BatchScorer:
    """
    One bounded execution of the scoring batch.

    Stateless between runs: every run() reads its inputs from the store.
    The notification service is injected so delivery can be swapped in tests.
    """

    def __init__(
        self,
        provider: LLMProvider,
        llm_config: LlmConfig,
        scorer_config: ScorerConfig,
        notification_service,
        telemetry: Optional[TelemetrySink] = None
    ):
        self.provider = provider
        self.llm_config = llm_config
        self.scorer_config = scorer_config
        self.notification_service = notification_service
        self.telemetry = telemetry or TelemetrySink()

    def run(self, repo: ScoringRepository, request_id: Optional[str] = None) -> BatchResult:
        request_id = request_id or new_request_id()
        started = time.monotonic()
        result = BatchResult(request_id=request_id)

        self.telemetry.log_event(
            'INFO', 'Async ATS scorer started',
            {'batch_jobs_limit': self.scorer_config.batch_size},
            request_id
        )

        if self.scorer_config.claim_postings:
            self._requeue_stale_claims(repo, request_id)

        postings = [self._to_posting(job) for job in repo.staged_jobs.get_queued(self.scorer_config.batch_size)]
        if not postings:
            logger.info(f"[{request_id}] No queued staged jobs found")
            result.duration_ms = int((time.monotonic() - started) * 1000)
            return result

        candidates = [
            CandidateDTO(user_id=resume.user_id, resume_id=resume.id)
            for resume in repo.resumes.get_latest_per_user()
        ]
        thresholds = ThresholdResolver.from_raw(
            repo.settings.get_value(PROACTIVE_THRESHOLD_DEFAULT_KEY),
            repo.settings.get_threshold_overrides({c.user_id for c in candidates}),
            fallback=self.scorer_config.default_threshold,
        )
        baseline_builder = BaselineBuilder(repo, self.scorer_config.max_evidence_lines)

        logger.info(
            f"[{request_id}] Scoring {len(postings)} postings against {len(candidates)} candidates"
        )

        for posting in postings:
            if self.scorer_config.claim_postings and not repo.staged_jobs.claim(posting.id):
                logger.info(f"[{request_id}] Posting {posting.id} already claimed by another run; skipping")
                result.skipped_jobs += 1
                continue

            outcome = self._score_posting(repo, baseline_builder, thresholds, posting, candidates, request_id)
            result.outcomes.append(outcome)
            result.processed_jobs += 1
            result.scored_analyses += outcome.scored
            result.notifications_triggered += outcome.notifications

            status_written = self._write_posting_status(repo, posting, outcome, request_id)
            if outcome.failed or not status_written:
                result.failed_jobs += 1

        result.duration_ms = int((time.monotonic() - started) * 1000)

        self.telemetry.log_event(
            'ERROR' if result.failed_jobs > 0 else 'INFO',
            'Async ATS scorer completed',
            {
                'processed_jobs': result.processed_jobs,
                'scored_analyses': result.scored_analyses,
                'failed_jobs': result.failed_jobs,
                'notifications_triggered': result.notifications_triggered,
                'skipped_jobs': result.skipped_jobs,
                'duration_ms': result.duration_ms,
            },
            request_id
        )
        return result

    def _requeue_stale_claims(self, repo: ScoringRepository, request_id: str) -> None:
        claimed_before = datetime.now(timezone.utc) - timedelta(minutes=self.scorer_config.stale_claim_minutes)
        requeued = repo.staged_jobs.requeue_stale_claims(claimed_before)
        if requeued:
            logger.warning(
                f"[{request_id}] Requeued {requeued} postings left in processing for over "
                f"{self.scorer_config.stale_claim_minutes} minutes"
            )

    def _score_posting(
        self,
        repo: ScoringRepository,
        baseline_builder: BaselineBuilder,
        thresholds: ThresholdResolver,
        posting: PostingDTO,
        candidates,
        request_id: str
    ) -> PostingOutcome:
        outcome = PostingOutcome(posting_id=posting.id)

        for candidate in candidates:
            try:
                scored, notified = self._score_pair(
                    repo, baseline_builder, posting, candidate,
                    thresholds.resolve(candidate.user_id), request_id
                )
            except Exception as e:
                repo.rollback()
                outcome.errors += 1
                outcome.last_error = str(e) or type(e).__name__
                logger.error(
                    f"[{request_id}] Scoring failed for posting {posting.id}, "
                    f"user {candidate.user_id}: {outcome.last_error}"
                )
                continue

            if scored:
                outcome.scored += 1
            if notified:
                outcome.notifications += 1

        if outcome.scored == 0 and outcome.errors == 0:
            outcome.skipped = True
        return outcome

    def _score_pair(
        self,
        repo: ScoringRepository,
        baseline_builder: BaselineBuilder,
        posting: PostingDTO,
        candidate: CandidateDTO,
        threshold: float,
        request_id: str
    ) -> Tuple[bool, bool]:
        """Returns (scored, notification_triggered). Raises on any failure."""
        baseline = baseline_builder.build(candidate.user_id, candidate.resume_id)
        if not baseline.text:
            return False, False

        # Checked per pair: a short posting with no eligible candidates still ends processed
        if len(normalize_text(posting.description_raw)) < self.scorer_config.min_description_length:
            raise ValueError(DESCRIPTION_TOO_SHORT_MESSAGE)

        jd_id = repo.job_descriptions.upsert_for_staged_job(
            user_id=candidate.user_id,
            staged_job_id=posting.id,
            name=posting.display_name,
            pasted_text=posting.description_raw,
            source_url=posting.source_url,
        )

        seed_data = {
            'request_id': request_id,
            'source': ANALYSIS_SOURCE,
            'staged_job_id': str(posting.id),
            'baseline_type': baseline.variant,
            'processing_started_at': _utc_now_iso(),
        }
        analysis_id = repo.analyses.seed_processing(
            user_id=candidate.user_id,
            resume_id=candidate.resume_id,
            jd_id=jd_id,
            staged_job_id=posting.id,
            analysis_data=seed_data,
        )

        request = LLMRequest(
            system_prompt=SCORING_SYSTEM_PROMPT,
            user_prompt=build_scoring_prompt(posting.display_name, posting.description_raw, baseline.text),
            model_candidates=self.llm_config.model_candidates(),
            temperature=self.llm_config.temperature,
            max_tokens=self.llm_config.max_tokens,
            task_label='ats_scoring',
            json_schema=ATS_ANALYSIS_SCHEMA['schema'],
            schema_name=ATS_ANALYSIS_SCHEMA['name'],
            retry_attempts=self.llm_config.schema_retry_attempts,
            pricing_override=self.llm_config.pricing_override,
        )

        try:
            response, analysis = self.invoke_with_retries(request)
        except Exception as e:
            self._mark_analysis_error(repo, analysis_id, str(e) or type(e).__name__, request_id)
            raise

        completed_data = {
            **seed_data,
            'threshold_used': threshold,
            'processing_completed_at': _utc_now_iso(),
            'score_breakdown': analysis.score_breakdown.model_dump(),
            'evidence_count': len(analysis.evidence),
            'resume_warnings': analysis.resume_warnings,
            'model_used': response.model_used,
            'cost_estimate_usd': response.cost_estimate_usd,
            'retry_attempts_used': response.retry_attempts_used,
            'used_structured_output': response.used_structured_output,
        }
        repo.analyses.complete(
            analysis_id=analysis_id,
            ats_score=analysis.score_percent,
            matched_skills=analysis.keywords_found,
            missing_skills=analysis.keywords_missing,
            suggestions='\n'.join(analysis.recommendations),
            analysis_data=completed_data,
        )

        if analysis.match_score <= threshold:
            return True, False

        return True, self._notify(repo, candidate, posting, analysis_id, analysis, threshold, request_id)

    def invoke_with_retries(self, request: LLMRequest) -> Tuple[LLMResponse, MatchAnalysis]:
        """
        Invoke the provider and parse its output, re-asking on malformed content.

        Provider errors propagate untouched; only MalformedOutputError is retried,
        at most ``request.retry_attempts`` extra times. The returned
        ``retry_attempts_used`` counts only retries answered by the winning model.
        """
        calls_by_model: Dict[str, int] = {}
        retrying = Retrying(
            retry=retry_if_exception_type(MalformedOutputError),
            stop=stop_after_attempt(request.retry_attempts + 1),
            before_sleep=_log_schema_retry,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    attempt_request = request.for_attempt(attempt.retry_state.attempt_number - 1)
                    response = self.provider.invoke(attempt_request)
                    calls_by_model[response.model_used] = calls_by_model.get(response.model_used, 0) + 1
                    analysis = parse_match_analysis(response.raw_content)
        except MalformedOutputError as e:
            raise MalformedOutputError(NO_VALID_OUTPUT_MESSAGE) from e
        response = replace(response, retry_attempts_used=calls_by_model[response.model_used] - 1)
        return response, analysis

    def _notify(
        self,
        repo: ScoringRepository,
        candidate: CandidateDTO,
        posting: PostingDTO,
        analysis_id: Any,
        analysis: MatchAnalysis,
        threshold: float,
        request_id: str
    ) -> bool:
        """A failed notification write is reported but never fails the pair."""
        try:
            self.notification_service.notify_match(
                repo, candidate.user_id, posting, analysis_id, analysis, threshold
            )
        except Exception as e:
            repo.rollback()
            self.telemetry.log_event(
                'ERROR', 'Failed to create proactive notification',
                {
                    'user_id': str(candidate.user_id),
                    'staged_job_id': str(posting.id),
                    'analysis_id': str(analysis_id),
                    'error': str(e),
                },
                request_id
            )
            return False
        return True

    def _mark_analysis_error(self, repo: ScoringRepository, analysis_id: Any, message: str, request_id: str) -> None:
        try:
            repo.rollback()
            repo.analyses.mark_error(analysis_id, message)
        except Exception as e:
            repo.rollback()
            logger.warning(f"[{request_id}] Could not record error on analysis {analysis_id}: {e}")

    def _write_posting_status(
        self,
        repo: ScoringRepository,
        posting: PostingDTO,
        outcome: PostingOutcome,
        request_id: str
    ) -> bool:
        try:
            if outcome.failed:
                repo.staged_jobs.mark_error(
                    posting.id,
                    f"No analyses produced. Last error: {outcome.last_error or 'unknown error'}"
                )
            else:
                repo.staged_jobs.mark_processed(posting.id)
        except Exception as e:
            repo.rollback()
            logger.error(f"[{request_id}] Failed to update status for posting {posting.id}: {e}")
            return False
        return True

    @staticmethod
    def _to_posting(job) -> PostingDTO:
        return PostingDTO(
            id=job.id,
            source=job.source,
            source_url=job.source_url,
            title=job.title,
            company_name=job.company_name,
            description_raw=job.description_raw or '',
        )
