"""
Seeding helpers for store-backed tests.

Every helper commits, mirroring how the repositories write.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from core.utils import PostingFingerprinter
from database.models import (
    DocumentExtraction,
    PROACTIVE_THRESHOLD_DEFAULT_KEY,
    Profile,
    Resume,
    RuntimeSetting,
    Skill,
    SkillExperience,
    StagedJob,
    UserSkill,
)

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

REACT_DESCRIPTION = (
    "We are hiring a Senior React Engineer to build our customer dashboard. "
    "You will work daily with React, TypeScript and GraphQL, mentor engineers "
    "and own frontend performance."
)


def add_posting(
    db,
    title: str = "Senior React Engineer",
    company_name: Optional[str] = "Acme",
    description: str = REACT_DESCRIPTION,
    source_url: Optional[str] = None,
    status: str = 'queued',
    minutes_offset: int = 0,
    updated_at: Optional[datetime] = None,
) -> StagedJob:
    job = StagedJob(
        source='test-board',
        source_url=source_url or f"https://jobs.example.com/{uuid.uuid4().hex}",
        title=title,
        company_name=company_name,
        description_raw=description,
        description_normalized=PostingFingerprinter.normalize_description(description),
        content_hash=PostingFingerprinter.calculate(description),
        fetched_at=BASE_TIME + timedelta(minutes=minutes_offset),
        status=status,
    )
    if updated_at is not None:
        job.updated_at = updated_at
    db.add(job)
    db.commit()
    return job


def add_resume(db, user_id=None, minutes_offset: int = 0, deleted: bool = False) -> Resume:
    resume = Resume(
        user_id=user_id or uuid.uuid4(),
        name="resume.pdf",
        created_at=BASE_TIME + timedelta(minutes=minutes_offset),
        deleted_at=BASE_TIME if deleted else None,
    )
    db.add(resume)
    db.commit()
    return resume


def add_extraction(db, resume: Resume, text: str) -> DocumentExtraction:
    extraction = DocumentExtraction(resume_id=resume.id, extracted_text=text, created_at=BASE_TIME)
    db.add(extraction)
    db.commit()
    return extraction


def get_or_create_skill(db, name: str) -> Skill:
    skill = db.query(Skill).filter(Skill.name == name).one_or_none()
    if skill is None:
        skill = Skill(name=name)
        db.add(skill)
        db.commit()
    return skill


def add_user_skill(
    db,
    user_id,
    name: str,
    proficiency: Optional[str] = 'advanced',
    years=Decimal('3'),
    notes: Optional[str] = None,
    minutes_offset: int = 0,
) -> UserSkill:
    user_skill = UserSkill(
        user_id=user_id,
        skill_id=get_or_create_skill(db, name).id,
        proficiency_level=proficiency,
        years_of_experience=years,
        notes=notes,
        created_at=BASE_TIME + timedelta(minutes=minutes_offset),
    )
    db.add(user_skill)
    db.commit()
    return user_skill


def add_skill_experience(
    db,
    user_id,
    skill_name: str,
    job_title: Optional[str] = None,
    description: Optional[str] = None,
    keywords: Optional[List[str]] = None,
    minutes_offset: int = 0,
    deleted: bool = False,
) -> SkillExperience:
    experience = SkillExperience(
        user_id=user_id,
        skill_id=get_or_create_skill(db, skill_name).id,
        job_title=job_title,
        description=description,
        keywords=keywords or [],
        created_at=BASE_TIME + timedelta(minutes=minutes_offset),
        deleted_at=BASE_TIME if deleted else None,
    )
    db.add(experience)
    db.commit()
    return experience


def add_candidate_with_skills(db, skills=(("React", Decimal('3')),)) -> Resume:
    """A user with one resume and a structured skills profile."""
    resume = add_resume(db)
    for name, years in skills:
        add_user_skill(db, resume.user_id, name, years=years)
    return resume


def set_global_threshold(db, value: str) -> None:
    db.add(RuntimeSetting(key=PROACTIVE_THRESHOLD_DEFAULT_KEY, value=value))
    db.commit()


def set_user_threshold(db, user_id, value) -> None:
    db.add(Profile(user_id=user_id, proactive_match_threshold=value))
    db.commit()


