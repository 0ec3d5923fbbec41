"""
Logging for scoring runs.

Messages carry structured context as trailing key=value pairs:

    2026-01-01 09:30:00.123 | WARNING  | scoring_service.py:88 | Empty section encountered [section_id=s1]

ScoringLogger also keeps every warning and error it emits, so a caller
scoring a batch of assessments can report anomalies (empty sections,
empty templates, failed computations) once the batch is done.
"""

import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"

QUIET_LIBRARIES = ("pymysql",)


class MillisecondsFormatter(logging.Formatter):
    """Timestamps as YYYY-MM-DD HH:MM:SS.mmm."""

    default_time_format = "%Y-%m-%d %H:%M:%S"
    default_msec_format = "%s.%03d"


def _with_fields(message: str, fields: dict[str, Any]) -> str:
    if not fields:
        return message
    return message + " [" + " ".join(f"{key}={value}" for key, value in fields.items()) + "]"


@dataclass
class LogEvent:
    """A tracked warning or error."""

    level: str
    message: str
    data: dict[str, Any]
    exception: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class ScoringLogger:
    """Structured logger that remembers its warnings and errors.

    Args:
        name: Logger name
        log_level: Console level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file name; the file receives every level
        log_dir: Directory for log_file (defaults to ./logs)
    """

    def __init__(
        self,
        name: str = "compliance_engine.scoring",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_dir: Optional[Path] = None,
    ):
        level = logging.getLevelName(log_level.upper())

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if log_file else level)
        # Own handlers only; the root logger would print everything twice
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = MillisecondsFormatter(LOG_FORMAT)

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(formatter)
        self.logger.addHandler(console)

        self.log_path: Optional[Path] = None
        if log_file:
            self.log_path = (log_dir or Path.cwd() / "logs") / log_file
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_path)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        self.events: list[LogEvent] = []

    @property
    def warnings(self) -> list[LogEvent]:
        return [e for e in self.events if e.level == "WARNING"]

    @property
    def errors(self) -> list[LogEvent]:
        return [e for e in self.events if e.level == "ERROR"]

    def debug(self, message: str, **kwargs):
        self.logger.debug(_with_fields(message, kwargs), stacklevel=2)

    def info(self, message: str, **kwargs):
        self.logger.info(_with_fields(message, kwargs), stacklevel=2)

    def warning(self, message: str, **kwargs):
        """Log a warning and keep it for the anomaly summary."""
        text = _with_fields(message, kwargs)
        self.logger.warning(text, stacklevel=2)
        self.events.append(LogEvent(level="WARNING", message=text, data=kwargs))

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log an error (with traceback when an exception is given) and keep it."""
        if exception is not None:
            message = f"{message} | Exception: {exception}"
        text = _with_fields(message, kwargs)
        self.logger.error(text, exc_info=exception, stacklevel=2)
        self.events.append(
            LogEvent(
                level="ERROR",
                message=text,
                data=kwargs,
                exception=str(exception) if exception is not None else None,
            )
        )

    def log_overall_score(
        self,
        assessment_id: str,
        overall_score: float,
        risk_band: str,
        execution_ms: float,
        section_count: int,
    ):
        self.info(
            "Overall score calculated",
            assessment_id=assessment_id,
            overall_score=overall_score,
            risk_band=risk_band,
            execution_ms=round(execution_ms, 2),
            section_count=section_count,
        )

    @contextmanager
    def time_operation(self, operation: str, **context):
        """Time a block, logging its duration; failures are logged and re-raised.

        Usage:
            with logger.time_operation("section score", section_id="s1"):
                ...
        """
        started = time.perf_counter()
        self.debug(f"Starting {operation}", **context)
        try:
            yield
        except Exception as e:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            self.error(f"Failed {operation}", exception=e, **context, duration_ms=elapsed_ms)
            raise
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        self.debug(f"Completed {operation}", **context, duration_ms=elapsed_ms)

    def get_error_summary(self) -> dict:
        """Counts plus the tracked warnings and errors, for end-of-run reports."""
        warnings, errors = self.warnings, self.errors
        return {
            "total_errors": len(errors),
            "total_warnings": len(warnings),
            "errors": errors,
            "warnings": warnings,
        }

    def clear_tracking(self):
        self.events = []


# ============================================================================
# Process-wide instance
# ============================================================================

_default_logger: Optional[ScoringLogger] = None


def get_logger(
    name: str = "compliance_engine.scoring",
    log_level: str = "INFO",
    log_file: Optional[str] = None,
) -> ScoringLogger:
    """The shared ScoringLogger, created on first call.

    Later calls return the same instance and ignore their arguments.
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = ScoringLogger(name=name, log_level=log_level, log_file=log_file)
    return _default_logger


def configure_global_logging(log_level: str = "INFO"):
    """Route module loggers (logging.getLogger(__name__)) through the same format.

    Call once at startup. Replaces any handlers already on the root logger.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(MillisecondsFormatter(LOG_FORMAT))
    logging.basicConfig(level=log_level.upper(), handlers=[handler], force=True)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
