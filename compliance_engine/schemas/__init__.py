"""Schemas for scoring inputs, derived scores, and gap classification."""

from compliance_engine.schemas.enums import (
    CostRange,
    EffortRange,
    EvidenceTier,
    Priority,
    RiskBand,
    Severity,
)
from compliance_engine.schemas.scoring import (
    Answer,
    Assessment,
    EvidenceDocument,
    Gap,
    GapPrioritization,
    GapPrioritizationInput,
    OverallScore,
    Question,
    QuestionScore,
    Section,
    SectionScore,
    Template,
)

__all__ = [
    # Enums
    "CostRange",
    "EffortRange",
    "EvidenceTier",
    "Priority",
    "RiskBand",
    "Severity",
    # Inputs
    "Answer",
    "Assessment",
    "EvidenceDocument",
    "Question",
    "Section",
    "Template",
    # Derived
    "OverallScore",
    "QuestionScore",
    "SectionScore",
    # Gaps
    "Gap",
    "GapPrioritization",
    "GapPrioritizationInput",
]
