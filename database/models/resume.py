import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Resume(Base):
    __tablename__ = 'resumes'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(TIMESTAMP(timezone=True))

    extractions = relationship("DocumentExtraction", back_populates="resume", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_resumes_user_created', 'user_id', 'created_at'),
    )


class DocumentExtraction(Base):
    """Raw text pulled out of an uploaded resume document."""
    __tablename__ = 'document_extractions'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    resume_id = Column(Uuid, ForeignKey('resumes.id', ondelete='CASCADE'), nullable=False)
    extracted_text = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    resume = relationship("Resume", back_populates="extractions")

    __table_args__ = (
        Index('idx_document_extractions_resume', 'resume_id', 'created_at'),
    )
