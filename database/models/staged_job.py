import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid, Index, func

from .base import Base


class StagedJob(Base):
    """
    An externally sourced job posting queued for proactive scoring.

    Lifecycle: queued -> processing (claimed by a batch run) -> processed | error.
    """
    __tablename__ = 'staged_jobs'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    source = Column(Text, nullable=False)
    source_url = Column(Text, nullable=False, unique=True)
    title = Column(Text, nullable=False)
    company_name = Column(Text)

    description_raw = Column(Text, nullable=False)
    description_normalized = Column(Text, nullable=False)
    content_hash = Column(Text, nullable=False)

    fetched_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    status = Column(Text, nullable=False, default='queued')  # queued|processing|processed|error
    error_message = Column(Text)

    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_staged_jobs_status_fetched', 'status', 'fetched_at'),
        Index('idx_staged_jobs_content_hash', 'content_hash'),
    )
