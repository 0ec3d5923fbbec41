"""Gap identification and ranking.

A gap is any question whose tier-adjusted final score falls below the
configured threshold (default 3.0). Unanswered questions score 0 and are
always gaps. Each gap is classified by the gap prioritization scorer and
the list is ranked highest priority first.
"""

from typing import Mapping, Optional, Sequence

from compliance_engine.constants import GAP_TITLE_MAX_CHARS, INTERNAL_SCORE_MAX
from compliance_engine.schemas.scoring import (
    Answer,
    Gap,
    GapPrioritizationInput,
    OverallScore,
    Question,
    QuestionScore,
    Section,
)
from compliance_engine.scorers.gap_prioritization import calculate_gap_prioritization
from compliance_engine.scorers.score_aggregator import round_half_up
from compliance_engine.services.scoring_service import WeightedScoringService

DEFAULT_DESCRIPTION = "Insufficient evidence or controls identified"
DEFAULT_CURRENT_STATE = "Not adequately addressed"

SUGGESTED_ACTIONS = [
    "Review and update policies",
    "Implement proper controls",
    "Document procedures",
    "Provide staff training",
]


def calculate_gap_size(score: float) -> int:
    """Gap size on 0-100: a 0/5 answer is a 100% gap, 5/5 is no gap."""
    return int(round_half_up((INTERNAL_SCORE_MAX - score) * 20))


def describe_business_impact(score: float) -> str:
    if score == 0:
        return "Critical compliance risk requiring immediate attention"
    if score < 2:
        return "Significant compliance gap affecting business operations"
    return "Moderate compliance gap requiring remediation"


def build_gap(
    assessment_id: str,
    question: Question,
    section: Section,
    question_score: QuestionScore,
    answer: Optional[Answer] = None,
) -> Gap:
    """Annotate one low-scoring question as a prioritized gap."""
    score = question_score.final_score
    prioritization = calculate_gap_prioritization(
        GapPrioritizationInput(
            score=score,
            is_foundational=question.is_foundational,
            section_weight=section.weight,
            section_name=section.title,
            question_text=question.text,
        )
    )
    explanation = answer.explanation if answer is not None else None

    return Gap(
        assessment_id=assessment_id,
        question_id=question.id,
        section_id=section.id,
        answer_id=question_score.answer_id,
        category=question.category_tag or section.title,
        title=f"Gap in {question.text[:GAP_TITLE_MAX_CHARS]}",
        description=explanation or DEFAULT_DESCRIPTION,
        current_state=explanation or DEFAULT_CURRENT_STATE,
        score=score,
        gap_size=calculate_gap_size(score),
        business_impact=describe_business_impact(score),
        severity=prioritization.severity,
        priority=prioritization.priority,
        priority_score=prioritization.priority_score,
        estimated_effort=prioritization.effort,
        estimated_cost=prioritization.cost,
        suggested_actions=list(SUGGESTED_ACTIONS),
    )


def identify_gaps(
    overall: OverallScore,
    sections: Sequence[Section],
    threshold: float,
    answers_by_id: Optional[Mapping[str, Answer]] = None,
) -> list[Gap]:
    """Turn every question score below threshold into a classified gap, in template order."""
    answers_by_id = answers_by_id or {}
    sections_by_id = {s.id: s for s in sections}
    gaps = []

    for section_score in overall.section_scores:
        section = sections_by_id[section_score.section_id]
        questions_by_id = {q.id: q for q in section.questions}
        for question_score in section_score.question_scores:
            if question_score.final_score >= threshold:
                continue
            answer = answers_by_id.get(question_score.answer_id) if question_score.answer_id else None
            gaps.append(
                build_gap(
                    overall.assessment_id,
                    questions_by_id[question_score.question_id],
                    section,
                    question_score,
                    answer,
                )
            )
    return gaps


def prioritize_gaps(gaps: Sequence[Gap]) -> list[Gap]:
    """Rank gaps by priority score (highest first), then severity (CRITICAL first)."""
    return sorted(gaps, key=lambda g: (-g.priority_score, g.severity.rank))


class GapService:
    """Generates ranked gaps for stored assessments."""

    def __init__(self, scoring_service: WeightedScoringService):
        self.scoring_service = scoring_service

    def generate_gaps(self, assessment_id: str, threshold: Optional[float] = None) -> list[Gap]:
        """Score the assessment, then identify and rank its gaps."""
        threshold = threshold if threshold is not None else self.scoring_service.config.gap_threshold
        data_source = self.scoring_service.data_source

        overall = self.scoring_service.compute_overall_score(assessment_id)
        if not overall.section_scores:
            return []

        template = self.scoring_service.resolve_template(data_source.get_assessment(assessment_id).template_id)
        answered_ids = [
            qs.answer_id for ss in overall.section_scores for qs in ss.question_scores if qs.answer_id is not None
        ]
        answers_by_id = {}
        for answer_id in answered_ids:
            answer = data_source.get_answer(answer_id)
            if answer is not None:
                answers_by_id[answer_id] = answer

        gaps = identify_gaps(overall, template.sections, threshold, answers_by_id)
        self.scoring_service.logger.info(
            "Gaps identified",
            assessment_id=assessment_id,
            gap_count=len(gaps),
            threshold=threshold,
        )
        return prioritize_gaps(gaps)
