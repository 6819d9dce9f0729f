#!/usr/bin/env python3
"""
Baseline Builder - candidate-side text for one comparison.

Structured skills win over extracted resume text whenever both exist.
"""

import logging
from decimal import Decimal
from typing import Any, List, Optional

from database.repository import ScoringRepository
from core.scorer.models import Baseline

logger = logging.getLogger(__name__)

VARIANT_SKILLS_PROFILE = 'skills_profile'
VARIANT_RESUME_EXTRACTION = 'resume_extraction'
VARIANT_NONE = 'none'


def _format_years(years: Any) -> str:
    if years is None:
        return 'unknown'
    if isinstance(years, Decimal):
        years = float(years)
    if isinstance(years, float) and years.is_integer():
        return str(int(years))
    return str(years)


def _clean(value: Optional[str]) -> str:
    return (value or '').strip()


def render_skill_line(skill_name: Optional[str], proficiency: Optional[str], years: Any, notes: Optional[str]) -> str:
    parts = [
        f"- {_clean(skill_name) or 'unknown skill'}",
        f"proficiency={_clean(proficiency) or 'unspecified'}",
        f"years={_format_years(years)}",
    ]
    if _clean(notes):
        parts.append(f"notes={_clean(notes)}")
    return ' | '.join(parts)


def render_evidence_line(
    skill_name: Optional[str],
    job_title: Optional[str],
    keywords: Optional[List[Any]],
    description: Optional[str]
) -> str:
    parts = [f"- skill={_clean(skill_name) or 'unknown skill'}"]
    if _clean(job_title):
        parts.append(f"role={_clean(job_title)}")
    keyword_list = [str(k).strip() for k in (keywords or []) if str(k).strip()]
    if keyword_list:
        parts.append(f"keywords={', '.join(keyword_list)}")
    if _clean(description):
        parts.append(f"evidence={_clean(description)}")
    return ' | '.join(parts)


class BaselineBuilder:
    """Builds a Baseline per (account, resume) from the store."""

    def __init__(self, repo: ScoringRepository, max_evidence_lines: int = 20):
        self.repo = repo
        self.max_evidence_lines = max_evidence_lines

    def build(self, account_id: Any, resume_id: Any) -> Baseline:
        skills = self.repo.skills.get_user_skills(account_id)
        if skills:
            experiences = self.repo.skills.get_skill_experiences(account_id)
            return Baseline(text=self._render_profile(skills, experiences), variant=VARIANT_SKILLS_PROFILE)

        extracted = self.repo.resumes.get_latest_extraction_text(resume_id)
        if extracted and extracted.strip():
            return Baseline(text=extracted, variant=VARIANT_RESUME_EXTRACTION)

        logger.debug(f"No baseline available for account {account_id}")
        return Baseline(text=None, variant=VARIANT_NONE)

    def _render_profile(self, skills, experiences) -> str:
        skill_lines = [
            render_skill_line(
                us.skill.name if us.skill else None,
                us.proficiency_level,
                us.years_of_experience,
                us.notes,
            )
            for us in skills
        ]
        evidence_lines = [
            render_evidence_line(
                exp.skill.name if exp.skill else None,
                exp.job_title,
                exp.keywords if isinstance(exp.keywords, list) else None,
                exp.description,
            )
            for exp in experiences[:self.max_evidence_lines]
        ]

        return "\n".join(["Skills:", *skill_lines, "", "Experience Evidence:", *evidence_lines]).strip()
