"""Pipeline execution modules for the proactive match scorer."""

from .runner import run_scoring_batch
from .staging import IncomingPosting, StagingResult, stage_postings

__all__ = ['run_scoring_batch', 'IncomingPosting', 'StagingResult', 'stage_postings']
