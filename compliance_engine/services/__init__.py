"""Scoring services: lookup adapters, overall scoring, gap ranking."""

from compliance_engine.services.gap_service import GapService, identify_gaps, prioritize_gaps
from compliance_engine.services.lookup import InMemoryScoringStore, ScoreSink, ScoringDataSource
from compliance_engine.services.scoring_service import WeightedScoringService

__all__ = [
    "GapService",
    "InMemoryScoringStore",
    "ScoreSink",
    "ScoringDataSource",
    "WeightedScoringService",
    "identify_gaps",
    "prioritize_gaps",
]
