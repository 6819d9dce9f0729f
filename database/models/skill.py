import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Numeric, Uuid, Index, func
from sqlalchemy.orm import relationship

from .base import Base, JSONType


class Skill(Base):
    __tablename__ = 'skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)


class UserSkill(Base):
    """A skill on a user's curated profile."""
    __tablename__ = 'user_skills'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.id', ondelete='CASCADE'), nullable=False)
    proficiency_level = Column(Text)
    years_of_experience = Column(Numeric(4, 1))
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(TIMESTAMP(timezone=True))

    skill = relationship("Skill")

    __table_args__ = (
        Index('idx_user_skills_user', 'user_id'),
    )


class SkillExperience(Base):
    """Evidence of a skill used in a specific role."""
    __tablename__ = 'skill_experiences'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    skill_id = Column(Uuid, ForeignKey('skills.id', ondelete='CASCADE'), nullable=False)
    job_title = Column(Text)
    description = Column(Text)
    keywords = Column(JSONType, default=list)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(TIMESTAMP(timezone=True))

    skill = relationship("Skill")

    __table_args__ = (
        Index('idx_skill_experiences_user', 'user_id'),
    )
