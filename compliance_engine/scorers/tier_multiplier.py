"""
Evidence Tier Multiplier - maps evidence tiers to score multipliers.

Tier hierarchy (weakest to strongest):
- TIER_0: Self-declared (0.6 - 40% reduction)
- TIER_1: Policy documents (0.8 - 20% reduction)
- TIER_2: System-generated (1.0 - no penalty)

The table itself lives in ScoringConfig so deployments can tune it;
lookups here never mutate it.
"""

from typing import Iterable, Optional, Union

from compliance_engine.config import get_scoring_config
from compliance_engine.schemas.enums import EvidenceTier

TierLike = Union[EvidenceTier, str]


def get_multiplier(tier: TierLike, multipliers: Optional[dict[str, float]] = None) -> float:
    """Get the score multiplier for an evidence tier.

    Unknown tiers fall back to the TIER_0 multiplier.

    Args:
        tier: Evidence tier (enum member or string value)
        multipliers: Optional tier table; defaults to the configured table

    Returns:
        Multiplier applied to the raw quality score
    """
    table = multipliers if multipliers is not None else get_scoring_config().tier_multipliers
    resolved = EvidenceTier.parse(tier)
    if resolved is None:
        return table[EvidenceTier.TIER_0.value]
    return table[resolved.value]


def get_best_tier(tiers: Iterable[TierLike]) -> EvidenceTier:
    """Pick the strongest tier from a collection.

    Callers drop null tiers before calling. Unknown strings are ignored.

    Returns:
        The highest-ranked tier, or TIER_0 if the collection is empty
    """
    best = EvidenceTier.TIER_0
    for tier in tiers:
        resolved = EvidenceTier.parse(tier)
        if resolved is not None and resolved.rank > best.rank:
            best = resolved
    return best
