"""Shared fixtures for compliance_engine tests.

Everything runs against InMemoryScoringStore; no database is needed.
Repository tests patch execute_query instead of connecting.
"""

import pytest

from compliance_engine.config import ScoringConfig, clear_cache
from compliance_engine.services.lookup import InMemoryScoringStore
from compliance_engine.utils.logger import ScoringLogger


@pytest.fixture(autouse=True)
def reset_scoring_config(monkeypatch):
    """Every test starts from built-in defaults, not a developer's config file."""
    monkeypatch.delenv("COMPLIANCE_SCORING_CONFIG", raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def config():
    return ScoringConfig()


@pytest.fixture
def scoring_logger():
    """Fresh logger so warning/error tracking starts empty."""
    return ScoringLogger(name="compliance_engine.test", log_level="DEBUG")


@pytest.fixture
def single_section_fixture():
    """One section (weight 1.0) with two half-weight questions.

    q-a is answered with raw 4 and system-generated evidence; q-b is unanswered.
    Expected: section 2.0 (0-5), overall 40.0, risk band High.
    """
    return {
        "templates": [
            {
                "id": "tpl-1",
                "name": "Financial Crime",
                "sections": [
                    {
                        "id": "sec-1",
                        "title": "Governance",
                        "weight": 1.0,
                        "questions": [
                            {"id": "q-a", "text": "Is there a board-approved AML policy?", "weight": 0.5},
                            {
                                "id": "q-b",
                                "text": "Is the MLRO formally appointed?",
                                "weight": 0.5,
                                "is_foundational": True,
                            },
                        ],
                    }
                ],
            }
        ],
        "assessments": [
            {
                "id": "asmt-1",
                "template_id": "tpl-1",
                "answers": [
                    {
                        "id": "ans-a",
                        "question_id": "q-a",
                        "raw_quality_score": 4,
                        "documents": [{"id": "doc-1", "evidence_tier": "TIER_2"}],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def two_section_fixture():
    """Two sections (0.6 / 0.4), all questions answered with mixed evidence."""
    return {
        "templates": [
            {
                "id": "tpl-2",
                "name": "Sanctions",
                "sections": [
                    {
                        "id": "sec-screening",
                        "title": "Screening",
                        "weight": 0.6,
                        "questions": [
                            {"id": "q-1", "text": "Onboarding screening", "weight": 0.7, "is_foundational": True},
                            {"id": "q-2", "text": "Ongoing screening", "weight": 0.3},
                        ],
                    },
                    {
                        "id": "sec-training",
                        "title": "Training",
                        "weight": 0.4,
                        "questions": [
                            {"id": "q-3", "text": "Annual staff training", "weight": 1.0},
                        ],
                    },
                ],
            }
        ],
        "assessments": [
            {
                "id": "asmt-2",
                "template_id": "tpl-2",
                "answers": [
                    {
                        "id": "ans-1",
                        "question_id": "q-1",
                        "raw_quality_score": 5,
                        "documents": [{"id": "d-1", "evidence_tier": "TIER_2"}],
                    },
                    {
                        "id": "ans-2",
                        "question_id": "q-2",
                        "raw_quality_score": 3,
                        "documents": [{"id": "d-2", "evidence_tier": "TIER_1"}],
                    },
                    {
                        "id": "ans-3",
                        "question_id": "q-3",
                        "raw_quality_score": 2,
                        "explanation": "Training exists for front office only.",
                    },
                ],
            }
        ],
    }


@pytest.fixture
def single_section_store(single_section_fixture):
    return InMemoryScoringStore.from_dict(single_section_fixture)


@pytest.fixture
def two_section_store(two_section_fixture):
    return InMemoryScoringStore.from_dict(two_section_fixture)
