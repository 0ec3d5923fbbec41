"""
Weighted Scoring Service - adapter between data lookups and the pure scorers.

Performs every lookup, hands plain records to compliance_engine.scorers,
and optionally writes computed question scores back through a ScoreSink.

Error policy:
- Missing assessment/template/section/answer → NotFoundError subclass
- Bad sibling weights → InvalidWeightsError
Both propagate unchanged; an overall score is never returned partially.
Question scores reach the sink only after the whole computation succeeds,
so a failed run leaves stored scores untouched.
"""

import time
from typing import Iterable, Optional, Sequence

from compliance_engine.config import ScoringConfig, get_scoring_config
from compliance_engine.errors import (
    AnswerNotFoundError,
    AssessmentNotFoundError,
    SectionNotFoundError,
    TemplateNotFoundError,
)
from compliance_engine.schemas.scoring import (
    Answer,
    GapPrioritization,
    GapPrioritizationInput,
    OverallScore,
    QuestionScore,
    SectionScore,
    Template,
)
from compliance_engine.scorers.gap_prioritization import calculate_gap_prioritization
from compliance_engine.scorers.weighted_scorer import score_answer, score_section, score_template
from compliance_engine.services.lookup import ScoreSink, ScoringDataSource
from compliance_engine.utils.logger import ScoringLogger, get_logger
from compliance_engine.utils.worker_pool import WorkerPool


class WeightedScoringService:
    """Computes question, section and overall scores for stored assessments."""

    def __init__(
        self,
        data_source: ScoringDataSource,
        sink: Optional[ScoreSink] = None,
        config: Optional[ScoringConfig] = None,
        logger: Optional[ScoringLogger] = None,
    ):
        self.data_source = data_source
        self.sink = sink
        self.config = config or get_scoring_config()
        self.logger = logger or get_logger()

    def _answers_by_question(self, assessment_id: str, question_ids: Sequence[str]) -> dict[str, Answer]:
        answers = self.data_source.get_answers(assessment_id, question_ids)
        return {answer.question_id: answer for answer in answers}

    def _write_back(self, question_scores: Iterable[QuestionScore]) -> None:
        if self.sink is None:
            return
        for question_score in question_scores:
            # Unanswered questions have no row to update
            if question_score.answer_id is not None:
                self.sink.save_question_score(question_score)

    # =========================================================================
    # Question
    # =========================================================================

    def compute_question_score(self, answer_id: str) -> QuestionScore:
        """Score a single answer by ID and write the result back to the sink."""
        try:
            answer = self.data_source.get_answer(answer_id)
            if answer is None:
                raise AnswerNotFoundError(answer_id)
            question_score = score_answer(answer, self.config)
            self._write_back([question_score])
            return question_score
        except Exception as e:
            self.logger.error("Error calculating question score", exception=e, answer_id=answer_id)
            raise

    # =========================================================================
    # Section
    # =========================================================================

    def compute_section_score(self, section_id: str, assessment_id: str) -> SectionScore:
        """Score one section of an assessment."""
        with self.logger.time_operation("section score", section_id=section_id, assessment_id=assessment_id):
            section = self.data_source.get_section(section_id)
            if section is None:
                raise SectionNotFoundError(section_id)

            answers = self._answers_by_question(assessment_id, [q.id for q in section.questions])
            section_score = score_section(section, answers, self.config, log=self.logger)
            self._write_back(section_score.question_scores)
            return section_score

    # =========================================================================
    # Overall
    # =========================================================================

    def compute_overall_score(self, assessment_id: str) -> OverallScore:
        """Score a whole assessment and assign its risk band."""
        try:
            start_time = time.perf_counter()

            assessment = self.data_source.get_assessment(assessment_id)
            if assessment is None:
                raise AssessmentNotFoundError(assessment_id)

            template = self.resolve_template(assessment.template_id)
            question_ids = [q.id for section in template.sections for q in section.questions]
            answers = self._answers_by_question(assessment_id, question_ids)

            map_sections = None
            if self.config.parallel_sections and len(template.sections) > 1:
                pool = WorkerPool(max_workers=self.config.max_workers, logger=self.logger.logger)

                def map_sections(func, sections):
                    return pool.map_all_or_raise(func, sections, desc="Section scoring")

            overall = score_template(
                assessment_id,
                template,
                answers,
                self.config,
                log=self.logger,
                map_sections=map_sections,
            )
            for section_score in overall.section_scores:
                self._write_back(section_score.question_scores)

            self.logger.log_overall_score(
                assessment_id=assessment_id,
                overall_score=overall.overall_score,
                risk_band=overall.risk_band.value,
                execution_ms=(time.perf_counter() - start_time) * 1000,
                section_count=len(overall.section_scores),
            )
            return overall
        except Exception as e:
            self.logger.error("Error calculating overall score", exception=e, assessment_id=assessment_id)
            raise

    def resolve_template(self, template_id: Optional[str]) -> Template:
        """Template by ID, raising TemplateNotFoundError if absent or unset."""
        template = self.data_source.get_template(template_id) if template_id else None
        if template is None:
            raise TemplateNotFoundError(template_id or "<none>")
        return template

    # =========================================================================
    # Gaps
    # =========================================================================

    def classify_gap(self, gap_input: GapPrioritizationInput | dict) -> GapPrioritization:
        """Severity, priority, effort and cost for one identified gap."""
        return calculate_gap_prioritization(gap_input)
