import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update

from database.models import Analysis
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class AnalysisRepository(BaseRepository):
    def get_for_staged_job(self, user_id: Any, staged_job_id: Any) -> Optional[Analysis]:
        stmt = select(Analysis).where(
            Analysis.user_id == user_id,
            Analysis.staged_job_id == staged_job_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def seed_processing(
        self,
        user_id: Any,
        resume_id: Any,
        jd_id: Any,
        staged_job_id: Any,
        analysis_data: Dict[str, Any],
    ) -> Any:
        """Upsert the (user, staged job) analysis into processing state. Returns its id."""
        values = {
            'user_id': user_id,
            'resume_id': resume_id,
            'jd_id': jd_id,
            'staged_job_id': staged_job_id,
            'status': 'processing',
            'matched_skills': [],
            'missing_skills': [],
            'analysis_data': analysis_data,
            'error_message': None,
        }
        stmt = self._insert(Analysis).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=['user_id', 'staged_job_id'],
            set_={k: stmt.excluded[k] for k in values if k not in ('user_id', 'staged_job_id')},
        ).returning(Analysis.id)
        analysis_id = self.db.execute(stmt).scalar_one()
        self.db.commit()
        return analysis_id

    def complete(
        self,
        analysis_id: Any,
        ats_score: int,
        matched_skills: List[str],
        missing_skills: List[str],
        suggestions: str,
        analysis_data: Dict[str, Any],
    ) -> None:
        stmt = (
            update(Analysis)
            .where(Analysis.id == analysis_id)
            .values(
                status='completed',
                ats_score=ats_score,
                matched_skills=matched_skills,
                missing_skills=missing_skills,
                suggestions=suggestions,
                analysis_data=analysis_data,
                error_message=None,
            )
        )
        self.db.execute(stmt)
        self.db.commit()

    def mark_error(self, analysis_id: Any, error_message: str) -> None:
        stmt = (
            update(Analysis)
            .where(Analysis.id == analysis_id)
            .values(status='error', error_message=error_message)
        )
        self.db.execute(stmt)
        self.db.commit()
