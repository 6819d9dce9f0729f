import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, UniqueConstraint, func

from .base import Base


class JobDescription(Base):
    """A per-account job description row materialized from a staged posting."""
    __tablename__ = 'job_descriptions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    name = Column(Text, nullable=False)
    pasted_text = Column(Text)
    source_type = Column(Text, nullable=False, default='url')
    source_url = Column(Text)
    staged_job_id = Column(Uuid, ForeignKey('staged_jobs.id', ondelete='SET NULL'))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'staged_job_id', name='uq_job_descriptions_user_staged_job'),
    )
