import logging

from sqlalchemy.orm import Session

from database.repositories import (
    StagedJobRepository,
    ResumeRepository,
    SkillRepository,
    SettingsRepository,
    JobDescriptionRepository,
    AnalysisRepository,
    NotificationRepository,
)

logger = logging.getLogger(__name__)


class ScoringRepository:
    """
    Facade over the per-aggregate repositories, all bound to one Session.

    Every write method commits on its own: the scoring pipeline relies on
    ordering, not multi-table transactions, for cross-table consistency.
    """

    def __init__(self, db: Session):
        self.db = db
        self.staged_jobs = StagedJobRepository(db)
        self.resumes = ResumeRepository(db)
        self.skills = SkillRepository(db)
        self.settings = SettingsRepository(db)
        self.job_descriptions = JobDescriptionRepository(db)
        self.analyses = AnalysisRepository(db)
        self.notifications = NotificationRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
