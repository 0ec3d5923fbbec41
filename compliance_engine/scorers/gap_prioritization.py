"""
Gap Prioritization - severity, priority, effort and cost for a compliance gap.

Evaluated once per identified gap on (score 0-5, is_foundational,
section_weight 0-1). Every branch is total; no input raises.

Severity (raw score):
- <1.5 CRITICAL, <2.5 HIGH, <3.5 MEDIUM, else LOW

Priority score (1-10):
    priority = (5 - score) * 2          # Base: 0-10 from score
    priority += 2 if foundational       # Boost foundational
    priority += section_weight * 5      # Boost high-weight sections
    priority = clamp(round_half_up(priority), 1, 10)

Priority bucket (priority score): 9-10 IMMEDIATE, 6-8 SHORT_TERM,
3-5 MEDIUM_TERM, 1-2 LONG_TERM

Effort:
- LARGE: weight >0.25 AND foundational AND score <2.0
- MEDIUM: weight 0.15-0.25 OR foundational
- SMALL: everything else

Cost:
- OVER_250K: LARGE + CRITICAL + weight >0.20
- RANGE_100K_250K: LARGE + CRITICAL
- RANGE_50K_100K: LARGE OR (MEDIUM + foundational)
- RANGE_10K_50K: MEDIUM OR (SMALL + foundational)
- UNDER_10K: SMALL
"""

from typing import Union

from compliance_engine.constants import (
    FOUNDATIONAL_PRIORITY_BOOST,
    LARGE_EFFORT_MAX_SCORE,
    LARGE_EFFORT_MIN_SECTION_WEIGHT,
    MEDIUM_EFFORT_SECTION_WEIGHT_RANGE,
    OVER_250K_MIN_SECTION_WEIGHT,
    PRIORITY_IMMEDIATE_THRESHOLD,
    PRIORITY_MEDIUM_TERM_THRESHOLD,
    PRIORITY_SCORE_MAX,
    PRIORITY_SCORE_MIN,
    PRIORITY_SHORT_TERM_THRESHOLD,
    SECTION_WEIGHT_PRIORITY_FACTOR,
    SEVERITY_CRITICAL_BELOW,
    SEVERITY_HIGH_BELOW,
    SEVERITY_MEDIUM_BELOW,
)
from compliance_engine.schemas.enums import CostRange, EffortRange, Priority, Severity
from compliance_engine.schemas.scoring import GapPrioritization, GapPrioritizationInput
from compliance_engine.scorers.score_aggregator import round_half_up

GapInputLike = Union[GapPrioritizationInput, dict]


def _coerce_input(gap_input: GapInputLike) -> GapPrioritizationInput:
    if isinstance(gap_input, GapPrioritizationInput):
        return gap_input
    return GapPrioritizationInput.model_validate(gap_input)


def calculate_gap_severity(score: float) -> Severity:
    """Severity from the gap's 0-5 score."""
    if score < SEVERITY_CRITICAL_BELOW:
        return Severity.CRITICAL
    if score < SEVERITY_HIGH_BELOW:
        return Severity.HIGH
    if score < SEVERITY_MEDIUM_BELOW:
        return Severity.MEDIUM
    return Severity.LOW


def calculate_priority_score(gap_input: GapInputLike) -> int:
    """Numeric priority (1-10): lower score, foundational and heavy sections rank higher."""
    gap = _coerce_input(gap_input)

    priority = (5 - gap.score) * 2
    if gap.is_foundational:
        priority += FOUNDATIONAL_PRIORITY_BOOST
    priority += gap.section_weight * SECTION_WEIGHT_PRIORITY_FACTOR

    return int(max(PRIORITY_SCORE_MIN, min(PRIORITY_SCORE_MAX, round_half_up(priority))))


def score_to_priority(priority_score: float) -> Priority:
    """Bucket a numeric priority score."""
    if priority_score >= PRIORITY_IMMEDIATE_THRESHOLD:
        return Priority.IMMEDIATE
    if priority_score >= PRIORITY_SHORT_TERM_THRESHOLD:
        return Priority.SHORT_TERM
    if priority_score >= PRIORITY_MEDIUM_TERM_THRESHOLD:
        return Priority.MEDIUM_TERM
    return Priority.LONG_TERM


def priority_to_score(priority: Priority) -> int:
    """Representative numeric score for a priority bucket."""
    return priority.score


def calculate_gap_priority(gap_input: GapInputLike) -> Priority:
    """Priority bucket, driven by the boosted priority score rather than the raw score."""
    return score_to_priority(calculate_priority_score(gap_input))


def estimate_effort(section_weight: float, is_foundational: bool, score: float) -> EffortRange:
    """Remediation effort. Non-foundational gaps never reach LARGE."""
    if section_weight > LARGE_EFFORT_MIN_SECTION_WEIGHT and is_foundational and score < LARGE_EFFORT_MAX_SCORE:
        return EffortRange.LARGE

    low, high = MEDIUM_EFFORT_SECTION_WEIGHT_RANGE
    if low <= section_weight <= high:
        return EffortRange.MEDIUM
    if is_foundational:
        return EffortRange.MEDIUM

    return EffortRange.SMALL


def estimate_cost(
    effort: EffortRange,
    severity: Severity,
    section_weight: float,
    is_foundational: bool,
) -> CostRange:
    """Remediation cost bucket from effort, escalated by severity, weight and foundational flag."""
    if effort == EffortRange.LARGE and severity == Severity.CRITICAL:
        if section_weight > OVER_250K_MIN_SECTION_WEIGHT:
            return CostRange.OVER_250K
        return CostRange.RANGE_100K_250K

    if effort == EffortRange.LARGE or (effort == EffortRange.MEDIUM and is_foundational):
        return CostRange.RANGE_50K_100K

    if effort == EffortRange.MEDIUM or (effort == EffortRange.SMALL and is_foundational):
        return CostRange.RANGE_10K_50K

    return CostRange.UNDER_10K


def calculate_gap_prioritization(gap_input: GapInputLike) -> GapPrioritization:
    """All prioritization fields for one gap."""
    gap = _coerce_input(gap_input)

    severity = calculate_gap_severity(gap.score)
    priority_score = calculate_priority_score(gap)
    effort = estimate_effort(gap.section_weight, gap.is_foundational, gap.score)

    return GapPrioritization(
        severity=severity,
        priority_score=priority_score,
        priority=score_to_priority(priority_score),
        effort=effort,
        cost=estimate_cost(effort, severity, gap.section_weight, gap.is_foundational),
    )


# Alias matching the external classifier interface
classify_gap = calculate_gap_prioritization
