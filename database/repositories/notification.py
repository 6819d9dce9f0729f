from typing import Any, Dict

from database.models import UserNotification
from database.repositories.base import BaseRepository


class NotificationRepository(BaseRepository):
    def insert_ignore_duplicate(
        self,
        user_id: Any,
        type: str,
        title: str,
        message: str,
        dedupe_key: str,
        payload: Dict[str, Any],
    ) -> bool:
        """Insert unless (user_id, type, dedupe_key) already exists. Returns True if a row was written."""
        stmt = self._insert(UserNotification).values(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            dedupe_key=dedupe_key,
            payload=payload,
        ).on_conflict_do_nothing(index_elements=['user_id', 'type', 'dedupe_key'])
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1
