"""Tests for ScoringLogger and WorkerPool."""

import logging
import threading

import pytest

from compliance_engine.utils.logger import LOG_FORMAT, MillisecondsFormatter, ScoringLogger
from compliance_engine.utils.worker_pool import WorkerPool

# ─── ScoringLogger ────────────────────────────────────────────────────────────


class TestScoringLogger:
    def test_warning_tracked_with_fields(self, scoring_logger):
        scoring_logger.warning("Empty section encountered", section_id="s1")

        summary = scoring_logger.get_error_summary()
        assert summary["total_warnings"] == 1
        assert summary["warnings"][0].message == "Empty section encountered [section_id=s1]"
        assert summary["warnings"][0].data == {"section_id": "s1"}

    def test_error_tracked_with_exception(self, scoring_logger):
        scoring_logger.error("Error calculating overall score", exception=ValueError("boom"), assessment_id="a1")

        error = scoring_logger.errors[0]
        assert error.exception == "boom"
        assert "Exception: boom" in error.message
        assert "assessment_id=a1" in error.message

    def test_time_operation_reraises(self, scoring_logger):
        with pytest.raises(RuntimeError):
            with scoring_logger.time_operation("section score", section_id="s1"):
                raise RuntimeError("fail")

        assert len(scoring_logger.errors) == 1
        assert scoring_logger.errors[0].data["section_id"] == "s1"
        assert "duration_ms" in scoring_logger.errors[0].data

    def test_time_operation_success(self, scoring_logger):
        with scoring_logger.time_operation("overall score"):
            pass
        assert scoring_logger.errors == []

    def test_log_overall_score_is_info(self, scoring_logger):
        scoring_logger.log_overall_score("a1", 40.0, "High", 1.234, 1)
        assert scoring_logger.warnings == []
        assert scoring_logger.errors == []

    def test_clear_tracking(self, scoring_logger):
        scoring_logger.warning("w")
        scoring_logger.error("e")
        scoring_logger.clear_tracking()
        assert scoring_logger.get_error_summary()["total_errors"] == 0
        assert scoring_logger.get_error_summary()["total_warnings"] == 0

    def test_does_not_duplicate_handlers(self):
        ScoringLogger(name="compliance_engine.dup")
        logger = ScoringLogger(name="compliance_engine.dup")
        assert len(logger.logger.handlers) == 1

    def test_log_file(self, tmp_path):
        logger = ScoringLogger(name="compliance_engine.file", log_file="scoring.log", log_dir=tmp_path)
        logger.info("Overall score calculated", assessment_id="a1")
        for handler in logger.logger.handlers:
            handler.flush()
        assert "assessment_id=a1" in (tmp_path / "scoring.log").read_text()


class TestMillisecondsFormatter:
    def test_milliseconds(self):
        formatter = MillisecondsFormatter(LOG_FORMAT)
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "Empty section encountered", None, None)
        record.msecs = 7

        assert formatter.formatTime(record).endswith(".007")
        assert "| WARNING  | test_logger_and_pool.py:1 | Empty section encountered" in formatter.format(record)


# ─── WorkerPool ───────────────────────────────────────────────────────────────


class TestWorkerPool:
    def test_results_in_input_order(self):
        pool = WorkerPool(max_workers=4)
        results = pool.map(lambda x: x * 2, list(range(20)))
        assert [value for _ok, _item, value in results] == [x * 2 for x in range(20)]

    def test_failures_captured(self):
        def work(x):
            if x == 3:
                raise ValueError("bad item")
            return x

        results = WorkerPool(max_workers=2).map(work, [1, 2, 3, 4])
        assert [ok for ok, _item, _value in results] == [True, True, False, True]
        assert isinstance(results[2][2], ValueError)

    def test_map_all_or_raise_returns_values(self):
        assert WorkerPool(max_workers=2).map_all_or_raise(str, [1, 2, 3]) == ["1", "2", "3"]

    def test_map_all_or_raise_raises_first_failure_in_input_order(self):
        def work(x):
            if x >= 2:
                raise KeyError(x)
            return x

        with pytest.raises(KeyError) as exc_info:
            WorkerPool(max_workers=4).map_all_or_raise(work, [0, 1, 2, 3])
        assert exc_info.value.args == (2,)

    def test_runs_concurrently(self):
        """Two workers meet at a barrier, which only happens if they run at the same time."""
        barrier = threading.Barrier(2, timeout=5)
        results = WorkerPool(max_workers=2).map_all_or_raise(lambda x: barrier.wait() >= 0, [1, 2])
        assert results == [True, True]

    def test_stats(self):
        pool = WorkerPool(max_workers=2)
        pool.map(lambda x: 1 / x, [1, 0, 2])
        stats = pool.get_stats()
        assert stats["total_submitted"] == 3
        assert stats["total_successful"] == 2
        assert stats["total_failed"] == 1
