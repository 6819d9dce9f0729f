import logging
from typing import List, Optional, Any

from sqlalchemy import select

from database.models import Resume, DocumentExtraction
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ResumeRepository(BaseRepository):
    def get_latest_per_user(self) -> List[Resume]:
        """
        The most recent non-deleted resume for every account.

        Ordered by user id so candidate order is stable within a run.
        """
        stmt = (
            select(Resume)
            .where(Resume.deleted_at.is_(None))
            .order_by(Resume.user_id.asc(), Resume.created_at.desc(), Resume.id.asc())
        )
        latest: List[Resume] = []
        seen = set()
        for resume in self.db.execute(stmt).scalars().all():
            if resume.user_id in seen:
                continue
            seen.add(resume.user_id)
            latest.append(resume)
        return latest

    def get_latest_extraction_text(self, resume_id: Any) -> Optional[str]:
        stmt = (
            select(DocumentExtraction.extracted_text)
            .where(DocumentExtraction.resume_id == resume_id)
            .order_by(DocumentExtraction.created_at.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()
