"""Score aggregation helpers: weighted sums, range scaling, summary stats."""

import math
import statistics
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ScoreStats:
    """Summary statistics for a set of scores."""

    min: float
    max: float
    mean: float
    median: float
    count: int


def weighted_sum(values: Sequence[float], weights: Sequence[float]) -> float:
    """Σ(values[i] × weights[i]).

    Returns 0 for empty inputs. Raises ValueError if lengths differ.
    """
    if not values or not weights:
        return 0.0
    if len(values) != len(weights):
        raise ValueError(f"Values length ({len(values)}) must match weights length ({len(weights)})")
    return float(sum(v * w for v, w in zip(values, weights)))


def weighted_average(values: Sequence[float], weights: Sequence[float]) -> float:
    """Weighted sum divided by total weight (0 if the total weight is 0)."""
    if not values or not weights:
        return 0.0
    total_weight = sum(weights)
    if total_weight == 0:
        return 0.0
    return weighted_sum(values, weights) / total_weight


def scale_score(
    value: float,
    from_min: float,
    from_max: float,
    to_min: float,
    to_max: float,
) -> float:
    """Linearly rescale a value from [from_min, from_max] to [to_min, to_max].

    The input is clamped to the source range first, so a 0-5 score never
    reports outside 0-100.

    Example:
        scale_score(2.5, 0, 5, 0, 100) → 50.0
    """
    if from_max == from_min:
        raise ValueError(f"Degenerate source range: from_min == from_max == {from_min}")
    clamped = max(from_min, min(from_max, value))
    return to_min + (clamped - from_min) / (from_max - from_min) * (to_max - to_min)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 → 3), unlike Python's banker's rounding."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def calculate_score_stats(scores: Sequence[float]) -> ScoreStats:
    """Min, max, mean and median of a set of scores (all zero when empty)."""
    if not scores:
        return ScoreStats(min=0.0, max=0.0, mean=0.0, median=0.0, count=0)
    return ScoreStats(
        min=min(scores),
        max=max(scores),
        mean=statistics.fmean(scores),
        median=statistics.median(scores),
        count=len(scores),
    )
