import uuid

from sqlalchemy import Column, Numeric, TIMESTAMP, Uuid, func

from .base import Base


class Profile(Base):
    __tablename__ = 'profiles'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, unique=True)
    # Per-account override (0.0-1.0); NULL means use the global default
    proactive_match_threshold = Column(Numeric(4, 3), nullable=True)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
