"""
Weighted Scorer - hierarchical compliance scoring over plain data.

Three levels, each a weighted sum of the level below:
1. Question: raw quality (0-5) × best evidence tier multiplier
2. Section: Σ(question final_score × question weight), 0-5 and 0-100
3. Overall: Σ(section score × section weight), scaled to 0-100 with a risk band

Business defaults (changing these changes reported compliance scores):
- Unanswered question → raw 0, TIER_0, TIER_0 multiplier, final 0.
  It stays in the weighted sum so skipping hard questions never helps.
- Empty section → score 0 (anomaly, logged)
- Empty template → overall 0, Critical (anomaly, logged). No data is never "safe".

Risk bands (lower bound inclusive):
- ≥80 Low, ≥60 Medium, ≥40 High, <40 Critical

These functions never fetch or persist anything; see
services/scoring_service.py for the lookup adapter.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from compliance_engine.config import ScoringConfig, get_scoring_config
from compliance_engine.constants import (
    INTERNAL_SCORE_MAX,
    INTERNAL_SCORE_MIN,
    REPORTED_SCORE_MAX,
    REPORTED_SCORE_MIN,
    RISK_BAND_HIGH_THRESHOLD,
    RISK_BAND_LOW_THRESHOLD,
    RISK_BAND_MEDIUM_THRESHOLD,
)
from compliance_engine.schemas.enums import EvidenceTier, RiskBand
from compliance_engine.schemas.scoring import (
    Answer,
    OverallScore,
    Question,
    QuestionScore,
    Section,
    SectionScore,
    Template,
)
from compliance_engine.scorers.score_aggregator import round_half_up, scale_score, weighted_sum
from compliance_engine.scorers.tier_multiplier import get_best_tier, get_multiplier
from compliance_engine.scorers.weight_validator import require_valid_weights, sum_weights
from compliance_engine.utils.logger import ScoringLogger

logger = logging.getLogger(__name__)

METHODOLOGY = "complete"

SectionMapper = Callable[[Callable[[Section], SectionScore], Sequence[Section]], list[SectionScore]]


def _warn(log: Optional[ScoringLogger], message: str, **fields: Any) -> None:
    if log is not None:
        log.warning(message, **fields)
        return
    rendered = " ".join(f"{key}={value}" for key, value in fields.items())
    logger.warning(f"{message} [{rendered}]")


def _to_reported_scale(score: float) -> float:
    return scale_score(score, INTERNAL_SCORE_MIN, INTERNAL_SCORE_MAX, REPORTED_SCORE_MIN, REPORTED_SCORE_MAX)


# =============================================================================
# Question level
# =============================================================================


def unanswered_question_score(question_id: str, config: Optional[ScoringConfig] = None) -> QuestionScore:
    """Score for a question with no answer: zero quality, weakest evidence."""
    config = config or get_scoring_config()
    return QuestionScore(
        answer_id=None,
        question_id=question_id,
        raw_quality_score=0.0,
        evidence_tier=EvidenceTier.TIER_0,
        tier_multiplier=get_multiplier(EvidenceTier.TIER_0, config.tier_multipliers),
    )


def score_answer(answer: Answer, config: Optional[ScoringConfig] = None) -> QuestionScore:
    """Tier-adjusted score for an existing answer.

    The best tier among linked documents (nulls dropped) sets the
    multiplier; a missing raw quality score counts as 0.
    """
    config = config or get_scoring_config()
    tiers = [doc.evidence_tier for doc in answer.linked_documents if doc.evidence_tier is not None]
    best_tier = get_best_tier(tiers)
    raw_quality_score = answer.raw_quality_score if answer.raw_quality_score is not None else 0.0

    return QuestionScore(
        answer_id=answer.id,
        question_id=answer.question_id,
        raw_quality_score=raw_quality_score,
        evidence_tier=best_tier,
        tier_multiplier=get_multiplier(best_tier, config.tier_multipliers),
    )


def score_question(
    question: Question,
    answer: Optional[Answer],
    config: Optional[ScoringConfig] = None,
) -> QuestionScore:
    """Score a question from its answer, or the unanswered default if there is none."""
    if answer is None:
        return unanswered_question_score(question.id, config)
    return score_answer(answer, config)


# =============================================================================
# Section level
# =============================================================================


def empty_section_score(section: Section) -> SectionScore:
    return SectionScore(
        section_id=section.id,
        section_name=section.title,
        score=0.0,
        scaled_score=0.0,
        question_scores=[],
        total_weight=0.0,
    )


def aggregate_question_scores(
    section: Section,
    questions: Sequence[Question],
    question_scores: Sequence[QuestionScore],
) -> SectionScore:
    """Weighted sum of already-computed question scores.

    question_scores must be aligned with questions. Weights are assumed
    already validated.
    """
    weights = [q.weight for q in questions]
    score = weighted_sum([qs.final_score for qs in question_scores], weights)
    return SectionScore(
        section_id=section.id,
        section_name=section.title,
        score=score,
        scaled_score=_to_reported_scale(score),
        question_scores=list(question_scores),
        total_weight=sum_weights(weights),
    )


def score_section(
    section: Section,
    answers_by_question: Mapping[str, Answer],
    config: Optional[ScoringConfig] = None,
    log: Optional[ScoringLogger] = None,
) -> SectionScore:
    """Score one section from its questions and this assessment's answers.

    Args:
        section: Section with its questions
        answers_by_question: Answers in the assessment, keyed by question ID
        config: Scoring configuration (defaults to the process-wide config)
        log: Tracking logger for anomalies; the module logger if omitted

    Raises:
        InvalidWeightsError: if question weights do not sum to 1.0
    """
    config = config or get_scoring_config()
    questions = section.ordered_questions()

    if not questions:
        _warn(log, "Empty section encountered", section_id=section.id, section_title=section.title)
        return empty_section_score(section)

    require_valid_weights(
        [q.weight for q in questions],
        f'Question weights in section "{section.title}"',
        config.weight_tolerance,
    )

    question_scores = [score_question(q, answers_by_question.get(q.id), config) for q in questions]
    return aggregate_question_scores(section, questions, question_scores)


# =============================================================================
# Overall level
# =============================================================================


def determine_risk_band(score: float) -> RiskBand:
    """Map a 0-100 overall score to its risk band."""
    if score >= RISK_BAND_LOW_THRESHOLD:
        return RiskBand.LOW
    if score >= RISK_BAND_MEDIUM_THRESHOLD:
        return RiskBand.MEDIUM
    if score >= RISK_BAND_HIGH_THRESHOLD:
        return RiskBand.HIGH
    return RiskBand.CRITICAL


def empty_overall_score(assessment_id: str, calculated_at: Optional[datetime] = None) -> OverallScore:
    return OverallScore(
        assessment_id=assessment_id,
        overall_score=0.0,
        risk_band=RiskBand.CRITICAL,
        methodology=METHODOLOGY,
        section_scores=[],
        calculated_at=calculated_at or datetime.now(timezone.utc),
    )


def validate_section_weights(template: Template, config: Optional[ScoringConfig] = None) -> None:
    """Raise InvalidWeightsError unless the template's section weights sum to 1.0."""
    config = config or get_scoring_config()
    require_valid_weights(
        [s.weight for s in template.sections],
        f'Section weights in template "{template.name}"',
        config.weight_tolerance,
    )


def aggregate_section_scores(
    assessment_id: str,
    sections: Sequence[Section],
    section_scores: Sequence[SectionScore],
    calculated_at: Optional[datetime] = None,
) -> OverallScore:
    """Weighted sum of section scores, scaled to 0-100 and banded.

    section_scores must be aligned with sections. Weights are assumed
    already validated.
    """
    weighted_score = weighted_sum([ss.score for ss in section_scores], [s.weight for s in sections])
    overall_score = _to_reported_scale(weighted_score)
    return OverallScore(
        assessment_id=assessment_id,
        overall_score=round_half_up(overall_score, 2),
        risk_band=determine_risk_band(overall_score),
        methodology=METHODOLOGY,
        section_scores=list(section_scores),
        calculated_at=calculated_at or datetime.now(timezone.utc),
    )


def score_template(
    assessment_id: str,
    template: Template,
    answers_by_question: Mapping[str, Answer],
    config: Optional[ScoringConfig] = None,
    calculated_at: Optional[datetime] = None,
    log: Optional[ScoringLogger] = None,
    map_sections: Optional[SectionMapper] = None,
) -> OverallScore:
    """Score a whole assessment against its template.

    Section weights are checked first, then every section is scored; any
    InvalidWeightsError aborts the whole computation and no partial score
    is returned. map_sections(func, sections) may score sections
    concurrently (WorkerPool.map_all_or_raise) but must keep their order.
    """
    config = config or get_scoring_config()
    sections = template.ordered_sections()

    if not sections:
        _warn(log, "Assessment has no sections", assessment_id=assessment_id)
        return empty_overall_score(assessment_id, calculated_at)

    validate_section_weights(template, config)

    def score_one(section: Section) -> SectionScore:
        return score_section(section, answers_by_question, config, log)

    if map_sections is None:
        section_scores = [score_one(section) for section in sections]
    else:
        section_scores = map_sections(score_one, sections)

    return aggregate_section_scores(assessment_id, sections, section_scores, calculated_at)
