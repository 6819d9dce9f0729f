from typing import Any, Dict, Optional

from pydantic import BaseModel

from core.scorer.models import MatchAnalysis, PostingDTO

MATCH_NOTIFICATION_TYPE = 'proactive_match_found'


class MatchNotification(BaseModel):
    user_id: Any
    type: str = MATCH_NOTIFICATION_TYPE
    title: str
    message: str
    dedupe_key: str
    payload: Dict[str, Any]


class NotificationMessageBuilder:
    @staticmethod
    def build_dedupe_key(posting_id: Any) -> str:
        return f"staged_job:{posting_id}"

    @staticmethod
    def build_title(score_percent: int) -> str:
        return f"New {score_percent}% match found"

    @staticmethod
    def build_message(posting: PostingDTO, score_percent: int) -> str:
        return f"{posting.display_name} matched your profile with a {score_percent}% ATS score."

    @staticmethod
    def build_payload(
        posting: PostingDTO,
        analysis_id: Any,
        match_score: float,
        threshold: float
    ) -> Dict[str, Any]:
        """Enough to deep-link back to the analysis and the original posting."""
        return {
            'staged_job_id': str(posting.id),
            'analysis_id': str(analysis_id),
            'match_score': match_score,
            'threshold_used': threshold,
            'source_url': posting.source_url,
            'source': posting.source,
            'job_title': posting.title,
            'company_name': posting.company_name,
        }


def build_match_notification(
    user_id: Any,
    posting: PostingDTO,
    analysis_id: Any,
    analysis: MatchAnalysis,
    threshold: float,
    score_percent: Optional[int] = None
) -> MatchNotification:
    percent = analysis.score_percent if score_percent is None else score_percent
    return MatchNotification(
        user_id=user_id,
        title=NotificationMessageBuilder.build_title(percent),
        message=NotificationMessageBuilder.build_message(posting, percent),
        dedupe_key=NotificationMessageBuilder.build_dedupe_key(posting.id),
        payload=NotificationMessageBuilder.build_payload(posting, analysis_id, analysis.match_score, threshold),
    )
