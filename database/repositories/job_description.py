from typing import Any, Optional

from database.models import JobDescription
from database.repositories.base import BaseRepository


class JobDescriptionRepository(BaseRepository):
    def upsert_for_staged_job(
        self,
        user_id: Any,
        staged_job_id: Any,
        name: str,
        pasted_text: str,
        source_url: Optional[str],
    ) -> Any:
        """Create or refresh the user's job description row for a posting. Returns its id."""
        values = {
            'user_id': user_id,
            'staged_job_id': staged_job_id,
            'name': name,
            'pasted_text': pasted_text,
            'source_type': 'url',
            'source_url': source_url,
        }
        stmt = self._insert(JobDescription).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=['user_id', 'staged_job_id'],
            set_={
                'name': stmt.excluded.name,
                'pasted_text': stmt.excluded.pasted_text,
                'source_type': stmt.excluded.source_type,
                'source_url': stmt.excluded.source_url,
            },
        ).returning(JobDescription.id)
        jd_id = self.db.execute(stmt).scalar_one()
        self.db.commit()
        return jd_id
