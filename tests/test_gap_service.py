"""Tests for gap identification and ranking."""

import pytest

from compliance_engine.config import ScoringConfig
from compliance_engine.errors import AssessmentNotFoundError
from compliance_engine.schemas.enums import CostRange, EffortRange, EvidenceTier, Priority, Severity
from compliance_engine.schemas.scoring import Question, QuestionScore, Section
from compliance_engine.services.gap_service import (
    DEFAULT_DESCRIPTION,
    GapService,
    build_gap,
    calculate_gap_size,
    describe_business_impact,
    identify_gaps,
    prioritize_gaps,
)
from compliance_engine.services.lookup import InMemoryScoringStore
from compliance_engine.services.scoring_service import WeightedScoringService


def _gap_service(store, scoring_logger, **config_overrides) -> GapService:
    service = WeightedScoringService(store, config=ScoringConfig(**config_overrides), logger=scoring_logger)
    return GapService(service)


def _question_score(question_id: str, final: float, answer_id: str | None = "ans") -> QuestionScore:
    return QuestionScore(
        answer_id=answer_id,
        question_id=question_id,
        raw_quality_score=final,
        evidence_tier=EvidenceTier.TIER_2,
        tier_multiplier=1.0,
    )


# ─── Helpers ──────────────────────────────────────────────────────────────────


class TestGapSizeAndImpact:
    def test_gap_size(self):
        assert calculate_gap_size(0) == 100
        assert calculate_gap_size(5) == 0
        assert calculate_gap_size(2.5) == 50
        assert calculate_gap_size(1.2) == 76

    def test_business_impact(self):
        assert describe_business_impact(0).startswith("Critical")
        assert describe_business_impact(1.9).startswith("Significant")
        assert describe_business_impact(2.0).startswith("Moderate")


class TestBuildGap:
    def test_title_truncated(self):
        question = Question(id="q1", section_id="s1", text="x" * 150, weight=1.0)
        section = Section(id="s1", template_id="t1", title="Governance", weight=1.0, questions=[question])

        gap = build_gap("asmt-1", question, section, _question_score("q1", 1.0))

        assert gap.title == "Gap in " + "x" * 100
        assert gap.category == "Governance"
        assert gap.description == DEFAULT_DESCRIPTION

    def test_category_tag_preferred(self):
        question = Question(id="q1", section_id="s1", text="Q", weight=1.0, category_tag="Sanctions")
        section = Section(id="s1", template_id="t1", title="Screening", weight=1.0, questions=[question])
        assert build_gap("asmt-1", question, section, _question_score("q1", 1.0)).category == "Sanctions"


class TestPrioritizeGaps:
    def test_priority_then_severity(self):
        """Equal priority score: the more severe gap ranks first."""
        q_critical = Question(id="q-crit", section_id="s1", text="A", weight=0.5)
        q_high = Question(id="q-high", section_id="s1", text="B", weight=0.5, is_foundational=True)
        section = Section(id="s1", template_id="t1", title="S", weight=0.5, questions=[q_critical, q_high])

        critical = build_gap("asmt-1", q_critical, section, _question_score("q-crit", 0.0))
        high = build_gap("asmt-1", q_high, section, _question_score("q-high", 1.6))
        assert critical.priority_score == high.priority_score == 10

        ranked = prioritize_gaps([high, critical])
        assert [g.question_id for g in ranked] == ["q-crit", "q-high"]

    def test_higher_priority_first(self):
        question = Question(id="q1", section_id="s1", text="A", weight=1.0)
        section = Section(id="s1", template_id="t1", title="S", weight=0.1, questions=[question])
        mild = build_gap("asmt-1", question, section, _question_score("q1", 2.9))
        severe = build_gap("asmt-1", question, section, _question_score("q1", 0.5))

        assert prioritize_gaps([mild, severe]) == [severe, mild]


class TestIdentifyGaps:
    def test_threshold_is_exclusive(self, two_section_store, scoring_logger):
        service = WeightedScoringService(two_section_store, config=ScoringConfig(), logger=scoring_logger)
        overall = service.compute_overall_score("asmt-2")
        sections = two_section_store.get_template("tpl-2").sections

        assert [g.question_id for g in identify_gaps(overall, sections, 3.0)] == ["q-2", "q-3"]
        # 1.2 is not below 1.2
        assert [g.question_id for g in identify_gaps(overall, sections, 1.2)] == []


# ─── GapService ───────────────────────────────────────────────────────────────


class TestGapService:
    def test_ranked_gaps(self, two_section_store, scoring_logger):
        gaps = _gap_service(two_section_store, scoring_logger).generate_gaps("asmt-2")

        assert [g.question_id for g in gaps] == ["q-3", "q-2"]

        training = gaps[0]
        assert training.score == pytest.approx(1.2)
        assert training.severity == Severity.CRITICAL
        assert training.priority_score == 10
        assert training.priority == Priority.IMMEDIATE
        assert training.estimated_effort == EffortRange.SMALL
        assert training.estimated_cost == CostRange.UNDER_10K
        assert training.gap_size == 76
        assert training.description == "Training exists for front office only."
        assert training.business_impact.startswith("Significant")
        assert training.category == "Training"
        assert training.answer_id == "ans-3"

        screening = gaps[1]
        assert screening.severity == Severity.HIGH
        assert screening.priority_score == 8
        assert screening.priority == Priority.SHORT_TERM
        assert screening.description == DEFAULT_DESCRIPTION

    def test_unanswered_question_is_gap(self, single_section_store, scoring_logger):
        gaps = _gap_service(single_section_store, scoring_logger).generate_gaps("asmt-1")

        assert len(gaps) == 1
        gap = gaps[0]
        assert gap.question_id == "q-b"
        assert gap.answer_id is None
        assert gap.score == 0
        assert gap.gap_size == 100
        assert gap.severity == Severity.CRITICAL
        assert gap.estimated_effort == EffortRange.LARGE
        assert gap.estimated_cost == CostRange.OVER_250K
        assert gap.title == "Gap in Is the MLRO formally appointed?"

    def test_configured_threshold(self, two_section_store, scoring_logger):
        gaps = _gap_service(two_section_store, scoring_logger, gap_threshold=2.0).generate_gaps("asmt-2")
        assert [g.question_id for g in gaps] == ["q-3"]

    def test_threshold_override(self, two_section_store, scoring_logger):
        gaps = _gap_service(two_section_store, scoring_logger).generate_gaps("asmt-2", threshold=1.0)
        assert gaps == []

    def test_empty_template_has_no_gaps(self, scoring_logger):
        store = InMemoryScoringStore.from_dict(
            {
                "templates": [{"id": "tpl-e", "name": "Empty"}],
                "assessments": [{"id": "asmt-e", "template_id": "tpl-e"}],
            }
        )
        assert _gap_service(store, scoring_logger).generate_gaps("asmt-e") == []

    def test_missing_assessment(self, single_section_store, scoring_logger):
        with pytest.raises(AssessmentNotFoundError):
            _gap_service(single_section_store, scoring_logger).generate_gaps("nope")
