"""Database client and repositories for scoring inputs.

Provides:
- Thread-local connection reuse (MySQL-compatible protocol)
- Repository classes for templates, sections, assessments and answers
- DatabaseScoringSource, the lookup/write-back adapter for the scoring service
"""

from .client import check_connection, close_connection, execute_query, get_connection, get_cursor
from .repository import (
    AnswerRepository,
    AssessmentRepository,
    DatabaseScoringSource,
    SectionRepository,
    TemplateRepository,
)

__all__ = [
    # Client
    "get_connection",
    "close_connection",
    "get_cursor",
    "execute_query",
    "check_connection",
    # Repositories
    "AnswerRepository",
    "AssessmentRepository",
    "SectionRepository",
    "TemplateRepository",
    "DatabaseScoringSource",
]
