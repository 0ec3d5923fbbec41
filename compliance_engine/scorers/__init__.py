"""Deterministic scoring modules for compliance assessments."""

from compliance_engine.scorers.gap_prioritization import (
    calculate_gap_prioritization,
    calculate_gap_priority,
    calculate_gap_severity,
    calculate_priority_score,
    classify_gap,
    estimate_cost,
    estimate_effort,
    priority_to_score,
    score_to_priority,
)
from compliance_engine.scorers.score_aggregator import (
    ScoreStats,
    calculate_score_stats,
    round_half_up,
    scale_score,
    weighted_average,
    weighted_sum,
)
from compliance_engine.scorers.tier_multiplier import get_best_tier, get_multiplier
from compliance_engine.scorers.weight_validator import (
    normalize_weights,
    require_valid_weights,
    sum_weights,
    validate_weights,
)
from compliance_engine.scorers.weighted_scorer import (
    aggregate_question_scores,
    aggregate_section_scores,
    determine_risk_band,
    score_answer,
    score_question,
    score_section,
    score_template,
    unanswered_question_score,
    validate_section_weights,
)

__all__ = [
    # Tier multipliers
    "get_best_tier",
    "get_multiplier",
    # Weight validation
    "normalize_weights",
    "require_valid_weights",
    "sum_weights",
    "validate_weights",
    # Aggregation
    "ScoreStats",
    "calculate_score_stats",
    "round_half_up",
    "scale_score",
    "weighted_average",
    "weighted_sum",
    # Weighted scoring
    "aggregate_question_scores",
    "aggregate_section_scores",
    "determine_risk_band",
    "score_answer",
    "score_question",
    "score_section",
    "score_template",
    "unanswered_question_score",
    "validate_section_weights",
    # Gap prioritization
    "calculate_gap_prioritization",
    "calculate_gap_priority",
    "calculate_gap_severity",
    "calculate_priority_score",
    "classify_gap",
    "estimate_cost",
    "estimate_effort",
    "priority_to_score",
    "score_to_priority",
]
