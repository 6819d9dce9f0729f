from typing import Any, Dict, Iterable, Optional

from sqlalchemy import select

from database.models import Profile, RuntimeSetting
from database.repositories.base import BaseRepository


class SettingsRepository(BaseRepository):
    def get_value(self, key: str) -> Optional[str]:
        stmt = select(RuntimeSetting.value).where(RuntimeSetting.key == key)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_threshold_overrides(self, user_ids: Iterable[Any]) -> Dict[Any, Any]:
        """Raw per-account threshold values (may be None) for exactly the given accounts."""
        ids = list(user_ids)
        if not ids:
            return {}
        stmt = select(Profile.user_id, Profile.proactive_match_threshold).where(Profile.user_id.in_(ids))
        return {user_id: threshold for user_id, threshold in self.db.execute(stmt).all()}
