"""
Lookup and persistence interfaces for the scoring adapter.

The scoring service depends only on these interfaces:
- ScoringDataSource: fetch assessments, templates, sections, answers
- ScoreSink: optional write-back of computed question scores

InMemoryScoringStore implements both over plain dicts. It backs the tests
and the CLI, and loads YAML fixtures of the form:

    templates:
      - id: tpl-1
        name: Financial Crime
        sections:
          - id: sec-1
            title: Governance
            weight: 1.0
            questions:
              - {id: q-1, text: "...", weight: 0.5, is_foundational: true}
              - {id: q-2, text: "...", weight: 0.5}
    assessments:
      - id: asmt-1
        template_id: tpl-1
        answers:
          - id: ans-1
            question_id: q-1
            raw_quality_score: 4
            documents:
              - {id: doc-1, evidence_tier: TIER_2}
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from compliance_engine.schemas.scoring import (
    Answer,
    Assessment,
    EvidenceDocument,
    Question,
    QuestionScore,
    Section,
    Template,
)


class ScoringDataSource(ABC):
    """Read-only access to the entities the scorers need."""

    @abstractmethod
    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        """Assessment by ID, or None."""
        ...

    @abstractmethod
    def get_template(self, template_id: str) -> Optional[Template]:
        """Template with its sections and their questions, or None."""
        ...

    @abstractmethod
    def get_section(self, section_id: str) -> Optional[Section]:
        """Section with its questions, or None."""
        ...

    @abstractmethod
    def get_answer(self, answer_id: str) -> Optional[Answer]:
        """Answer with its linked documents, or None."""
        ...

    @abstractmethod
    def get_answers(self, assessment_id: str, question_ids: Sequence[str]) -> list[Answer]:
        """Answers in an assessment for the given questions (missing ones are omitted)."""
        ...


class ScoreSink(ABC):
    """Optional write-back target for computed question scores."""

    @abstractmethod
    def save_question_score(self, score: QuestionScore) -> None:
        """Persist tier, multiplier and final score onto the answer."""
        ...


class InMemoryScoringStore(ScoringDataSource, ScoreSink):
    """Dict-backed data source and sink."""

    def __init__(self):
        self.templates: dict[str, Template] = {}
        self.sections: dict[str, Section] = {}
        self.assessments: dict[str, Assessment] = {}
        self.answers: dict[str, Answer] = {}
        self.saved_scores: dict[str, QuestionScore] = {}
        self._lock = threading.Lock()

    # --- Loading -------------------------------------------------------------

    def add_template(self, template: Template) -> None:
        self.templates[template.id] = template
        for section in template.sections:
            self.sections[section.id] = section

    def add_assessment(self, assessment: Assessment) -> None:
        self.assessments[assessment.id] = assessment

    def add_answer(self, answer: Answer) -> None:
        self.answers[answer.id] = answer

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryScoringStore":
        """Build a store from a fixture dict (see module docstring)."""
        store = cls()
        for raw_template in data.get("templates") or []:
            store.add_template(_build_template(raw_template))

        for raw_assessment in data.get("assessments") or []:
            assessment_id = str(raw_assessment["id"])
            store.add_assessment(
                Assessment(
                    id=assessment_id,
                    template_id=raw_assessment.get("template_id"),
                    organization_id=raw_assessment.get("organization_id"),
                )
            )
            for raw_answer in raw_assessment.get("answers") or []:
                store.add_answer(_build_answer(raw_answer, assessment_id))
        return store

    @classmethod
    def from_yaml(cls, path: Path) -> "InMemoryScoringStore":
        """Build a store from a YAML fixture file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    # --- ScoringDataSource ---------------------------------------------------

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        return self.assessments.get(assessment_id)

    def get_template(self, template_id: str) -> Optional[Template]:
        return self.templates.get(template_id)

    def get_section(self, section_id: str) -> Optional[Section]:
        return self.sections.get(section_id)

    def get_answer(self, answer_id: str) -> Optional[Answer]:
        return self.answers.get(answer_id)

    def get_answers(self, assessment_id: str, question_ids: Sequence[str]) -> list[Answer]:
        wanted = set(question_ids)
        return [a for a in self.answers.values() if a.assessment_id == assessment_id and a.question_id in wanted]

    # --- ScoreSink -----------------------------------------------------------

    def save_question_score(self, score: QuestionScore) -> None:
        if score.answer_id is None:
            return
        with self._lock:
            self.saved_scores[score.answer_id] = score


def _build_template(raw: dict[str, Any]) -> Template:
    template_id = str(raw["id"])
    sections = []
    for section_index, raw_section in enumerate(raw.get("sections") or []):
        section_id = str(raw_section["id"])
        questions = [
            Question(
                id=str(raw_question["id"]),
                section_id=section_id,
                text=raw_question.get("text", ""),
                weight=float(raw_question["weight"]),
                is_foundational=bool(raw_question.get("is_foundational", False)),
                order=int(raw_question.get("order", question_index)),
                category_tag=raw_question.get("category_tag"),
            )
            for question_index, raw_question in enumerate(raw_section.get("questions") or [])
        ]
        sections.append(
            Section(
                id=section_id,
                template_id=template_id,
                title=raw_section.get("title", ""),
                weight=float(raw_section["weight"]),
                order=int(raw_section.get("order", section_index)),
                questions=questions,
            )
        )
    return Template(id=template_id, name=raw.get("name", ""), sections=sections)


def _build_answer(raw: dict[str, Any], assessment_id: str) -> Answer:
    documents = [
        EvidenceDocument(id=str(doc["id"]), evidence_tier=doc.get("evidence_tier"))
        for doc in raw.get("documents") or []
    ]
    return Answer(
        id=str(raw["id"]),
        assessment_id=assessment_id,
        question_id=str(raw["question_id"]),
        raw_quality_score=raw.get("raw_quality_score"),
        linked_documents=documents,
        explanation=raw.get("explanation"),
    )
