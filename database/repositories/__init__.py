from database.repositories.base import BaseRepository
from database.repositories.staged_job import StagedJobRepository
from database.repositories.resume import ResumeRepository
from database.repositories.skill import SkillRepository
from database.repositories.settings import SettingsRepository
from database.repositories.job_description import JobDescriptionRepository
from database.repositories.analysis import AnalysisRepository
from database.repositories.notification import NotificationRepository

__all__ = [
    'BaseRepository',
    'StagedJobRepository',
    'ResumeRepository',
    'SkillRepository',
    'SettingsRepository',
    'JobDescriptionRepository',
    'AnalysisRepository',
    'NotificationRepository',
]
