"""Tests for sibling weight validation."""

import pytest

from compliance_engine.errors import ComplianceEngineError, InvalidWeightsError
from compliance_engine.scorers.weight_validator import (
    normalize_weights,
    require_valid_weights,
    sum_weights,
    validate_weights,
)


class TestValidateWeights:
    def test_exact_sum(self):
        assert validate_weights([0.5, 0.3, 0.2]) is True

    def test_within_tolerance(self):
        """Float noise from thirds is accepted."""
        assert validate_weights([1 / 3, 1 / 3, 1 / 3]) is True
        assert validate_weights([0.5, 0.50005]) is True

    def test_outside_tolerance(self):
        assert validate_weights([0.5, 0.4]) is False
        assert validate_weights([0.5, 0.5002]) is False

    def test_empty_is_invalid(self):
        assert validate_weights([]) is False

    def test_custom_tolerance(self):
        assert validate_weights([0.5, 0.45], tolerance=0.1) is True


class TestRequireValidWeights:
    def test_valid_passes(self):
        require_valid_weights([0.25, 0.25, 0.5], "Section weights")

    def test_invalid_raises_with_label_and_sum(self):
        with pytest.raises(InvalidWeightsError) as exc_info:
            require_valid_weights([0.5, 0.3], 'Question weights in section "Governance"')

        err = exc_info.value
        assert err.label == 'Question weights in section "Governance"'
        assert err.total == pytest.approx(0.8)
        assert "0.8000" in str(err)
        assert "Governance" in str(err)

    def test_error_taxonomy(self):
        """InvalidWeightsError is both an engine error and a ValueError."""
        with pytest.raises(ComplianceEngineError) as exc_info:
            require_valid_weights([2.0])
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.error_code == "INVALID_WEIGHTS"
        assert exc_info.value.status_code == 500

    def test_empty_raises(self):
        with pytest.raises(InvalidWeightsError):
            require_valid_weights([], "Section weights")


class TestSumAndNormalize:
    def test_sum_empty(self):
        assert sum_weights([]) == 0.0

    def test_sum(self):
        assert sum_weights([0.2, 0.3]) == pytest.approx(0.5)

    def test_normalize(self):
        assert normalize_weights([2, 1, 1]) == pytest.approx([0.5, 0.25, 0.25])

    def test_normalize_all_zero_distributes_equally(self):
        assert normalize_weights([0, 0, 0, 0]) == pytest.approx([0.25] * 4)

    def test_normalize_empty(self):
        assert normalize_weights([]) == []

    def test_normalized_weights_validate(self):
        assert validate_weights(normalize_weights([3, 7, 11])) is True
