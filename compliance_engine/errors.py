"""Error taxonomy for the scoring engine.

Two fatal families propagate unchanged through Question -> Section ->
Overall scoring:

- NotFoundError: a referenced entity does not exist (HTTP layer maps to 404)
- InvalidWeightsError: sibling weights do not sum to 1.0 (maps to 500)

Empty sections/templates are anomalies, logged rather than raised.
"""


class ComplianceEngineError(Exception):
    """Base class for all scoring engine errors."""

    error_code = "COMPLIANCE_ENGINE_ERROR"
    status_code = 500


class NotFoundError(ComplianceEngineError):
    """Raised when a referenced entity cannot be found."""

    entity = "Entity"
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class AssessmentNotFoundError(NotFoundError):
    entity = "Assessment"
    error_code = "ASSESSMENT_NOT_FOUND"


class TemplateNotFoundError(NotFoundError):
    entity = "Assessment template"
    error_code = "TEMPLATE_NOT_FOUND"


class SectionNotFoundError(NotFoundError):
    entity = "Section"
    error_code = "SECTION_NOT_FOUND"


class AnswerNotFoundError(NotFoundError):
    entity = "Answer"
    error_code = "ANSWER_NOT_FOUND"


class InvalidWeightsError(ComplianceEngineError, ValueError):
    """Raised when sibling weights fail to sum to 1.0 within tolerance."""

    error_code = "INVALID_WEIGHTS"
    status_code = 500

    def __init__(self, label: str, total: float, tolerance: float):
        self.label = label
        self.total = total
        self.tolerance = tolerance
        super().__init__(f"{label} sum to {total:.4f}, must equal 1.0 (±{tolerance})")
