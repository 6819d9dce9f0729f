import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid, UniqueConstraint, Index, func

from .base import Base, JSONType


class UserNotification(Base):
    """
    In-app notification raised when a proactive match clears the user's threshold.

    Deduplicated on (user_id, type, dedupe_key): repeat triggers are ignored.
    """
    __tablename__ = 'user_notifications'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    dedupe_key = Column(Text, nullable=False)
    payload = Column(JSONType, default=dict)
    read_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'type', 'dedupe_key', name='uq_user_notifications_dedupe'),
        Index('idx_user_notifications_user', 'user_id', 'created_at'),
    )
