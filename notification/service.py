#!/usr/bin/env python3
"""
Notification Service - in-app match notifications with deduplication.

Usage:
    from notification.service import NotificationService

    service = NotificationService()
    written = service.notify_match(repo, user_id, posting, analysis_id, analysis, threshold)

Deduplication is owned by the store: (user_id, type, dedupe_key) is unique
and a repeated trigger is ignored rather than raised.
"""

import logging
from typing import Any

from database.repository import ScoringRepository
from core.scorer.models import MatchAnalysis, PostingDTO
from notification.message_builder import MatchNotification, build_match_notification

logger = logging.getLogger(__name__)


class NotificationService:

    def send(self, repo: ScoringRepository, notification: MatchNotification) -> bool:
        """Persist one notification. Returns False when an identical one already exists."""
        written = repo.notifications.insert_ignore_duplicate(
            user_id=notification.user_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            dedupe_key=notification.dedupe_key,
            payload=notification.payload,
        )
        if written:
            logger.info(f"Notification {notification.dedupe_key} created for user {notification.user_id}")
        else:
            logger.debug(f"Notification {notification.dedupe_key} already exists for user {notification.user_id}")
        return written

    def notify_match(
        self,
        repo: ScoringRepository,
        user_id: Any,
        posting: PostingDTO,
        analysis_id: Any,
        analysis: MatchAnalysis,
        threshold: float
    ) -> bool:
        notification = build_match_notification(user_id, posting, analysis_id, analysis, threshold)
        return self.send(repo, notification)
