#!/usr/bin/env python3
"""
Scoring Module - LLM-backed ATS scoring of queued postings.

Public API:
- BatchScorer: batch orchestrator
- BatchResult: aggregate counts for one run
- MatchAnalysis: validated model output

- models.py: Data structures and the parse-once output boundary
- thresholds.py: Effective notification threshold per account
- baseline.py: Candidate baseline text (skills profile or resume extraction)
- service.py: BatchScorer orchestrator
"""

from core.scorer.models import BatchResult, MatchAnalysis, parse_match_analysis
from core.scorer.service import BatchScorer

__all__ = ['BatchScorer', 'BatchResult', 'MatchAnalysis', 'parse_match_analysis']
