"""Pydantic schemas for scoring inputs and derived scores.

Input records (Question, Section, Template, Answer, Assessment) are the
plain data the pure scorers consume; the lookup adapters build them from
database rows or YAML fixtures.

Derived records (QuestionScore, SectionScore, OverallScore) are recomputed
values. QuestionScore.final_score is computed from raw_quality_score and
tier_multiplier and cannot be set independently.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from compliance_engine.schemas.enums import (
    CostRange,
    EffortRange,
    EvidenceTier,
    Priority,
    RiskBand,
    Severity,
)

# =============================================================================
# Inputs
# =============================================================================


class EvidenceDocument(BaseModel):
    """A document linked to an answer as supporting evidence."""

    model_config = ConfigDict(frozen=True)

    id: str
    evidence_tier: Optional[EvidenceTier] = Field(
        default=None,
        description="Classified evidence tier; None if not yet classified",
    )

    @field_validator("evidence_tier", mode="before")
    @classmethod
    def unknown_tier_is_weakest(cls, value):
        # Tiers the engine does not know (new classifier output, typos) count as TIER_0
        if value is None:
            return None
        return EvidenceTier.parse(value) or EvidenceTier.TIER_0


class Answer(BaseModel):
    """An organization's answer to one question within one assessment."""

    model_config = ConfigDict(frozen=True)

    id: str
    assessment_id: str
    question_id: str
    raw_quality_score: Optional[float] = Field(
        default=None,
        ge=0,
        le=5,
        description="Externally produced quality score (0-5); None means not yet scored",
    )
    linked_documents: list[EvidenceDocument] = Field(default_factory=list)
    explanation: Optional[str] = None


class Question(BaseModel):
    """A weighted question within a template section."""

    model_config = ConfigDict(frozen=True)

    id: str
    section_id: str
    text: str = ""
    weight: float = Field(ge=0, description="Share of the section score (siblings sum to 1.0)")
    is_foundational: bool = False
    order: int = 0
    category_tag: Optional[str] = None


class Section(BaseModel):
    """A weighted section of a template, with its ordered questions."""

    model_config = ConfigDict(frozen=True)

    id: str
    template_id: str
    title: str = ""
    weight: float = Field(ge=0, description="Share of the overall score (siblings sum to 1.0)")
    order: int = 0
    questions: list[Question] = Field(default_factory=list)

    def ordered_questions(self) -> list[Question]:
        return sorted(self.questions, key=lambda q: q.order)


class Template(BaseModel):
    """A questionnaire template with its ordered sections."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    sections: list[Section] = Field(default_factory=list)

    def ordered_sections(self) -> list[Section]:
        return sorted(self.sections, key=lambda s: s.order)


class Assessment(BaseModel):
    """One organization's run through a template."""

    model_config = ConfigDict(frozen=True)

    id: str
    template_id: Optional[str] = None
    organization_id: Optional[str] = None


# =============================================================================
# Derived scores
# =============================================================================


class QuestionScore(BaseModel):
    """Tier-adjusted score for a single question."""

    model_config = ConfigDict(frozen=True)

    answer_id: Optional[str] = Field(default=None, description="None when the question is unanswered")
    question_id: str
    raw_quality_score: float
    evidence_tier: EvidenceTier
    tier_multiplier: float

    @computed_field
    @property
    def final_score(self) -> float:
        """raw_quality_score x tier_multiplier (0-5 scale)."""
        return self.raw_quality_score * self.tier_multiplier


class SectionScore(BaseModel):
    """Weighted aggregate of one section's question scores."""

    model_config = ConfigDict(frozen=True)

    section_id: str
    section_name: str = ""
    score: float = Field(description="0-5 scale")
    scaled_score: float = Field(description="0-100 scale")
    question_scores: list[QuestionScore] = Field(default_factory=list)
    total_weight: float = 0.0


class OverallScore(BaseModel):
    """Weighted aggregate of an assessment's section scores with a risk band."""

    model_config = ConfigDict(frozen=True)

    assessment_id: str
    overall_score: float = Field(description="0-100 scale, rounded to 2 decimals")
    risk_band: RiskBand
    methodology: str = "complete"
    section_scores: list[SectionScore] = Field(default_factory=list)
    calculated_at: datetime


# =============================================================================
# Gap prioritization
# =============================================================================


class GapPrioritizationInput(BaseModel):
    """Inputs for classifying a single gap."""

    score: float = Field(description="final_score of the gap's answer (0-5 scale)")
    is_foundational: bool = False
    section_weight: float = Field(default=0.0, description="Weight of the gap's section (0-1 scale)")
    section_name: Optional[str] = None
    question_text: Optional[str] = None


class GapPrioritization(BaseModel):
    """Classification of a single gap."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    priority_score: int = Field(ge=1, le=10)
    priority: Priority
    effort: EffortRange
    cost: CostRange


class Gap(BaseModel):
    """A low-scoring question annotated with its prioritization."""

    assessment_id: str
    question_id: str
    section_id: str
    answer_id: Optional[str] = None
    category: str
    title: str
    description: str
    current_state: str
    required_state: str = "Fully compliant and documented"
    score: float
    gap_size: int = Field(ge=0, le=100, description="0 = no gap, 100 = nothing in place")
    business_impact: str
    severity: Severity
    priority: Priority
    priority_score: int = Field(ge=1, le=10)
    estimated_effort: EffortRange
    estimated_cost: CostRange
    suggested_actions: list[str] = Field(default_factory=list)
    suggested_vendors: list[str] = Field(default_factory=list)
