from typing import List, Any

from sqlalchemy import select

from database.models import UserSkill, SkillExperience
from database.repositories.base import BaseRepository


class SkillRepository(BaseRepository):
    def get_user_skills(self, user_id: Any) -> List[UserSkill]:
        stmt = (
            select(UserSkill)
            .where(UserSkill.user_id == user_id, UserSkill.deleted_at.is_(None))
            .order_by(UserSkill.created_at.asc(), UserSkill.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_skill_experiences(self, user_id: Any) -> List[SkillExperience]:
        """Most recent evidence first."""
        stmt = (
            select(SkillExperience)
            .where(SkillExperience.user_id == user_id, SkillExperience.deleted_at.is_(None))
            .order_by(SkillExperience.created_at.desc(), SkillExperience.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())
