"""Data access repositories for scoring inputs.

Simple read operations per table, plus write-back of computed question
scores onto answer rows. DatabaseScoringSource composes them into the
ScoringDataSource/ScoreSink interfaces used by the scoring service.
"""

from collections import defaultdict
from typing import Sequence

from compliance_engine.db.client import execute_query
from compliance_engine.schemas.scoring import (
    Answer,
    Assessment,
    EvidenceDocument,
    Question,
    QuestionScore,
    Section,
    Template,
)
from compliance_engine.services.lookup import ScoreSink, ScoringDataSource


def _placeholders(values: Sequence) -> str:
    return ", ".join(["%s"] * len(values))


def _row_to_question(row: dict) -> Question:
    return Question(
        id=row["id"],
        section_id=row["section_id"],
        text=row.get("text") or "",
        weight=float(row["weight"]),
        is_foundational=bool(row.get("is_foundational")),
        order=int(row.get("order") or 0),
        category_tag=row.get("category_tag"),
    )


def _row_to_section(row: dict, questions: list[Question]) -> Section:
    return Section(
        id=row["id"],
        template_id=row["template_id"],
        title=row.get("title") or "",
        weight=float(row["weight"]),
        order=int(row.get("order") or 0),
        questions=questions,
    )


class SectionRepository:
    """sections + questions table operations."""

    def _questions_for(self, section_ids: list[str]) -> dict[str, list[Question]]:
        by_section: dict[str, list[Question]] = defaultdict(list)
        if not section_ids:
            return by_section
        rows = (
            execute_query(
                f"SELECT * FROM questions WHERE section_id IN ({_placeholders(section_ids)}) ORDER BY `order` ASC",
                tuple(section_ids),
            )
            or []
        )
        for row in rows:
            by_section[row["section_id"]].append(_row_to_question(row))
        return by_section

    def get(self, section_id: str) -> Section | None:
        """Get section with its ordered questions."""
        row = execute_query("SELECT * FROM sections WHERE id = %s", (section_id,), fetch="one")
        if row is None:
            return None
        return _row_to_section(row, self._questions_for([section_id])[section_id])

    def get_for_template(self, template_id: str) -> list[Section]:
        """Get all sections of a template, ordered, with their questions."""
        rows = (
            execute_query(
                "SELECT * FROM sections WHERE template_id = %s ORDER BY `order` ASC",
                (template_id,),
            )
            or []
        )
        questions = self._questions_for([row["id"] for row in rows])
        return [_row_to_section(row, questions[row["id"]]) for row in rows]


class TemplateRepository:
    """templates table operations."""

    def __init__(self, sections: SectionRepository | None = None):
        self.sections = sections or SectionRepository()

    def get(self, template_id: str) -> Template | None:
        """Get template with sections and questions."""
        row = execute_query("SELECT * FROM templates WHERE id = %s", (template_id,), fetch="one")
        if row is None:
            return None
        return Template(
            id=row["id"],
            name=row.get("name") or "",
            sections=self.sections.get_for_template(template_id),
        )


class AssessmentRepository:
    """assessments table operations."""

    def get(self, assessment_id: str) -> Assessment | None:
        row = execute_query("SELECT * FROM assessments WHERE id = %s", (assessment_id,), fetch="one")
        if row is None:
            return None
        return Assessment(
            id=row["id"],
            template_id=row.get("template_id"),
            organization_id=row.get("organization_id"),
        )


class AnswerRepository:
    """answers + linked documents table operations."""

    DOCUMENTS_SQL = """
        SELECT ad.answer_id, d.id, d.evidence_tier
        FROM answer_documents ad
        JOIN documents d ON d.id = ad.document_id
        WHERE ad.answer_id IN ({placeholders})
    """

    def _documents_for(self, answer_ids: list[str]) -> dict[str, list[EvidenceDocument]]:
        by_answer: dict[str, list[EvidenceDocument]] = defaultdict(list)
        if not answer_ids:
            return by_answer
        rows = execute_query(self.DOCUMENTS_SQL.format(placeholders=_placeholders(answer_ids)), tuple(answer_ids)) or []
        for row in rows:
            by_answer[row["answer_id"]].append(EvidenceDocument(id=row["id"], evidence_tier=row.get("evidence_tier")))
        return by_answer

    def _build(self, rows: list[dict]) -> list[Answer]:
        documents = self._documents_for([row["id"] for row in rows])
        return [
            Answer(
                id=row["id"],
                assessment_id=row["assessment_id"],
                question_id=row["question_id"],
                raw_quality_score=row.get("raw_quality_score"),
                linked_documents=documents[row["id"]],
                explanation=row.get("explanation"),
            )
            for row in rows
        ]

    def get(self, answer_id: str) -> Answer | None:
        """Get answer with its linked documents."""
        row = execute_query("SELECT * FROM answers WHERE id = %s", (answer_id,), fetch="one")
        if row is None:
            return None
        return self._build([row])[0]

    def get_for_questions(self, assessment_id: str, question_ids: Sequence[str]) -> list[Answer]:
        """Get an assessment's answers to the given questions."""
        if not question_ids:
            return []
        rows = (
            execute_query(
                f"SELECT * FROM answers WHERE assessment_id = %s AND question_id IN ({_placeholders(question_ids)})",
                (assessment_id, *question_ids),
            )
            or []
        )
        return self._build(rows)

    def update_score(self, score: QuestionScore) -> None:
        """Write computed tier, multiplier and final score onto the answer row."""
        execute_query(
            "UPDATE answers SET evidence_tier = %s, tier_multiplier = %s, final_score = %s WHERE id = %s",
            (score.evidence_tier.value, score.tier_multiplier, score.final_score, score.answer_id),
            fetch="none",
        )


class DatabaseScoringSource(ScoringDataSource, ScoreSink):
    """Scoring data source and sink backed by the repositories above."""

    def __init__(self):
        self.assessments = AssessmentRepository()
        self.sections = SectionRepository()
        self.templates = TemplateRepository(self.sections)
        self.answers = AnswerRepository()

    def get_assessment(self, assessment_id: str) -> Assessment | None:
        return self.assessments.get(assessment_id)

    def get_template(self, template_id: str) -> Template | None:
        return self.templates.get(template_id)

    def get_section(self, section_id: str) -> Section | None:
        return self.sections.get(section_id)

    def get_answer(self, answer_id: str) -> Answer | None:
        return self.answers.get(answer_id)

    def get_answers(self, assessment_id: str, question_ids: Sequence[str]) -> list[Answer]:
        return self.answers.get_for_questions(assessment_id, question_ids)

    def save_question_score(self, score: QuestionScore) -> None:
        if score.answer_id is None:
            return
        self.answers.update_score(score)
