"""Tests for evidence tier multipliers and best-tier selection."""

import pytest

from compliance_engine.config import ScoringConfig
from compliance_engine.schemas.enums import EvidenceTier
from compliance_engine.scorers.tier_multiplier import get_best_tier, get_multiplier


class TestGetMultiplier:
    """Tier → multiplier lookup."""

    def test_default_table(self):
        assert get_multiplier(EvidenceTier.TIER_0) == pytest.approx(0.6)
        assert get_multiplier(EvidenceTier.TIER_1) == pytest.approx(0.8)
        assert get_multiplier(EvidenceTier.TIER_2) == pytest.approx(1.0)

    def test_accepts_string_values(self):
        assert get_multiplier("TIER_1") == pytest.approx(0.8)

    def test_unknown_tier_falls_back_to_tier_0(self):
        """Unrecognized tier strings get the weakest multiplier."""
        assert get_multiplier("TIER_9") == pytest.approx(0.6)

    def test_custom_table(self):
        table = {"TIER_0": 0.5, "TIER_1": 0.75, "TIER_2": 1.0}
        assert get_multiplier(EvidenceTier.TIER_1, table) == pytest.approx(0.75)

    def test_lookup_does_not_mutate_table(self):
        config = ScoringConfig()
        before = dict(config.tier_multipliers)
        get_multiplier("bogus", config.tier_multipliers)
        get_multiplier(EvidenceTier.TIER_2, config.tier_multipliers)
        assert config.tier_multipliers == before

    def test_multipliers_increase_with_tier(self):
        values = [get_multiplier(t) for t in (EvidenceTier.TIER_0, EvidenceTier.TIER_1, EvidenceTier.TIER_2)]
        assert values == sorted(values)
        assert values[0] < values[1]


class TestGetBestTier:
    """Strongest tier among linked documents."""

    def test_empty_is_tier_0(self):
        assert get_best_tier([]) == EvidenceTier.TIER_0

    def test_picks_strongest(self):
        tiers = [EvidenceTier.TIER_1, EvidenceTier.TIER_0, EvidenceTier.TIER_2, EvidenceTier.TIER_1]
        assert get_best_tier(tiers) == EvidenceTier.TIER_2

    def test_order_independent(self):
        assert get_best_tier([EvidenceTier.TIER_1, EvidenceTier.TIER_0]) == EvidenceTier.TIER_1
        assert get_best_tier([EvidenceTier.TIER_0, EvidenceTier.TIER_1]) == EvidenceTier.TIER_1

    def test_string_values_and_unknowns(self):
        """Unknown strings are ignored rather than raising."""
        assert get_best_tier(["TIER_1", "garbage"]) == EvidenceTier.TIER_1
        assert get_best_tier(["garbage"]) == EvidenceTier.TIER_0

    def test_accepts_generators(self):
        assert get_best_tier(t for t in ["TIER_0", "TIER_2"]) == EvidenceTier.TIER_2
