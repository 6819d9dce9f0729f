import uuid

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, Index, func

from .base import Base, JSONType


class Analysis(Base):
    """
    Stores the outcome of scoring one candidate resume against one staged posting.

    At most one row per (user, staged job): reprocessing upserts in place.
    """
    __tablename__ = 'analyses'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    resume_id = Column(Uuid, ForeignKey('resumes.id', ondelete='CASCADE'), nullable=False)
    jd_id = Column(Uuid, ForeignKey('job_descriptions.id', ondelete='CASCADE'), nullable=False)
    staged_job_id = Column(Uuid, ForeignKey('staged_jobs.id', ondelete='SET NULL'))

    status = Column(Text, nullable=False, default='processing')  # processing|completed|error
    ats_score = Column(Integer)  # 0-100
    matched_skills = Column(JSONType, default=list)
    missing_skills = Column(JSONType, default=list)
    suggestions = Column(Text)
    analysis_data = Column(JSONType, default=dict)
    error_message = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'staged_job_id', name='uq_analyses_user_staged_job'),
        Index('idx_analyses_status', 'status'),
        Index('idx_analyses_score', 'ats_score'),
    )
