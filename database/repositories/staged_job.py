import logging
from datetime import datetime, timezone
from typing import List, Optional, Any

from sqlalchemy import select, update

from database.models import StagedJob
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class StagedJobRepository(BaseRepository):
    def get_queued(self, limit: int) -> List[StagedJob]:
        """Oldest-fetched first."""
        stmt = (
            select(StagedJob)
            .where(StagedJob.status == 'queued')
            .order_by(StagedJob.fetched_at.asc(), StagedJob.id.asc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def claim(self, staged_job_id: Any) -> bool:
        """
        Move a posting from queued to processing.

        Returns False when another run already claimed it (zero rows updated).
        """
        stmt = (
            update(StagedJob)
            .where(StagedJob.id == staged_job_id, StagedJob.status == 'queued')
            .values(status='processing')
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def requeue_stale_claims(self, claimed_before: datetime) -> int:
        """
        Return postings stuck in processing since before ``claimed_before`` to the queue.

        A run that dies between claim and final status write leaves its claims behind.
        """
        stmt = (
            update(StagedJob)
            .where(StagedJob.status == 'processing', StagedJob.updated_at < claimed_before)
            .values(status='queued')
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount

    def mark_processed(self, staged_job_id: Any) -> None:
        self._set_status(staged_job_id, 'processed', None)

    def mark_error(self, staged_job_id: Any, error_message: str) -> None:
        self._set_status(staged_job_id, 'error', error_message)

    def _set_status(self, staged_job_id: Any, status: str, error_message: Optional[str]) -> None:
        stmt = (
            update(StagedJob)
            .where(StagedJob.id == staged_job_id)
            .values(status=status, error_message=error_message)
        )
        self.db.execute(stmt)
        self.db.commit()

    def find_hash_collision(self, content_hash: str, source_url: str) -> Optional[StagedJob]:
        """A posting with the same content published under a different URL."""
        stmt = (
            select(StagedJob)
            .where(StagedJob.content_hash == content_hash, StagedJob.source_url != source_url)
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def upsert_queued(
        self,
        source: str,
        source_url: str,
        title: str,
        company_name: Optional[str],
        description_raw: str,
        description_normalized: str,
        content_hash: str,
    ) -> None:
        """Insert or re-queue a posting keyed by its source URL."""
        values = {
            'source': source,
            'source_url': source_url,
            'title': title,
            'company_name': company_name,
            'description_raw': description_raw,
            'description_normalized': description_normalized,
            'content_hash': content_hash,
            'fetched_at': datetime.now(timezone.utc),
            'status': 'queued',
            'error_message': None,
        }
        stmt = self._insert(StagedJob).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=['source_url'],
            set_={k: stmt.excluded[k] for k in values if k != 'source_url'},
        )
        self.db.execute(stmt)
        self.db.commit()
