from .base import Base, JSONType
from .staged_job import StagedJob
from .resume import Resume, DocumentExtraction
from .skill import Skill, UserSkill, SkillExperience
from .profile import Profile
from .settings import RuntimeSetting, PROACTIVE_THRESHOLD_DEFAULT_KEY
from .job_description import JobDescription
from .analysis import Analysis
from .notification import UserNotification

__all__ = [
    'Base',
    'JSONType',
    'StagedJob',
    'Resume',
    'DocumentExtraction',
    'Skill',
    'UserSkill',
    'SkillExperience',
    'Profile',
    'RuntimeSetting',
    'PROACTIVE_THRESHOLD_DEFAULT_KEY',
    'JobDescription',
    'Analysis',
    'UserNotification',
]
