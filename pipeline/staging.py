"""Posting staging - puts externally fetched postings into the scoring queue.

Postings are keyed by source URL. A posting whose normalized description
already exists under a different URL is skipped, not rescored.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from pydantic import BaseModel

from core.utils import PostingFingerprinter, normalize_text
from database.repository import ScoringRepository

logger = logging.getLogger(__name__)


class IncomingPosting(BaseModel):
    source: str
    source_url: str
    title: str
    company_name: Optional[str] = None
    description: str


@dataclass
class StagingResult:
    staged: int = 0
    skipped_by_hash: int = 0
    failed: int = 0

    @property
    def success(self) -> bool:
        return self.failed == 0


def stage_postings(repo: ScoringRepository, postings: Iterable[IncomingPosting]) -> StagingResult:
    """Queue each posting for scoring; failures are counted per posting."""
    result = StagingResult()

    for posting in postings:
        try:
            source_url = normalize_text(posting.source_url)
            description_raw = normalize_text(posting.description)
            description_normalized = PostingFingerprinter.normalize_description(description_raw)
            content_hash = PostingFingerprinter.calculate(description_raw)

            if repo.staged_jobs.find_hash_collision(content_hash, source_url):
                logger.info(f"Skipping {source_url}: same content already staged under another URL")
                result.skipped_by_hash += 1
                continue

            repo.staged_jobs.upsert_queued(
                source=posting.source,
                source_url=source_url,
                title=normalize_text(posting.title),
                company_name=normalize_text(posting.company_name) or None,
                description_raw=description_raw,
                description_normalized=description_normalized,
                content_hash=content_hash,
            )
            result.staged += 1
        except Exception as e:
            repo.rollback()
            logger.error(f"Failed to stage posting {posting.source_url}: {e}")
            result.failed += 1

    logger.info(
        f"Staging complete: staged={result.staged} "
        f"skipped_by_hash={result.skipped_by_hash} failed={result.failed}"
    )
    return result
