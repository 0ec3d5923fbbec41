"""Weight validation - sibling weights must sum to 1.0.

Aggregation never runs on weights that fail this check; the weighted sum
would silently over- or understate the score. Renormalization is offered
as a separate helper for template authoring tools and is never applied
during scoring.
"""

from typing import Optional, Sequence

from compliance_engine.config import get_scoring_config
from compliance_engine.errors import InvalidWeightsError


def _tolerance(tolerance: Optional[float]) -> float:
    return tolerance if tolerance is not None else get_scoring_config().weight_tolerance


def sum_weights(weights: Sequence[float]) -> float:
    """Sum of weights (0 for an empty collection)."""
    if not weights:
        return 0.0
    return float(sum(weights))


def validate_weights(weights: Sequence[float], tolerance: Optional[float] = None) -> bool:
    """Check whether weights sum to 1.0 within tolerance. Empty collections are invalid."""
    if not weights:
        return False
    return abs(sum_weights(weights) - 1.0) <= _tolerance(tolerance)


def require_valid_weights(
    weights: Sequence[float],
    label: str = "weights",
    tolerance: Optional[float] = None,
) -> None:
    """Raise InvalidWeightsError unless weights sum to 1.0 within tolerance.

    Args:
        weights: Sibling weights (questions in a section, sections in a template)
        label: Description used in the error message
        tolerance: Allowed deviation; defaults to the configured tolerance

    Raises:
        InvalidWeightsError: carrying the label and the actual sum
    """
    tol = _tolerance(tolerance)
    total = sum_weights(weights)
    if abs(total - 1.0) > tol:
        raise InvalidWeightsError(label, total, tol)


def normalize_weights(weights: Sequence[float]) -> list[float]:
    """Rescale weights so they sum to 1.0.

    All-zero weights are distributed equally.
    """
    if not weights:
        return []
    total = sum_weights(weights)
    if total == 0:
        return [1.0 / len(weights)] * len(weights)
    return [w / total for w in weights]
