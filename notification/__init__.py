"""
Notification Module

In-app notifications raised when a scored posting clears an account's
match threshold.

Usage:
    from notification import NotificationService

    service = NotificationService()
    service.notify_match(repo, user_id, posting, analysis_id, analysis, threshold)
"""

from notification.message_builder import (
    MATCH_NOTIFICATION_TYPE,
    MatchNotification,
    NotificationMessageBuilder,
    build_match_notification,
)

from notification.service import NotificationService

__all__ = [
    'MATCH_NOTIFICATION_TYPE',
    'MatchNotification',
    'NotificationMessageBuilder',
    'build_match_notification',
    'NotificationService',
]
