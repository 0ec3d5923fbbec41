"""Enums for compliance scoring and gap prioritization.

Values match the strings stored on Answer, Document and Gap rows so that
enum members can be written back without translation.
"""

from enum import Enum
from typing import Optional


class EvidenceTier(str, Enum):
    """Strength of the documentation linked to an answer.

    Ordered TIER_0 < TIER_1 < TIER_2; TIER_2 is the strongest.
    """

    TIER_0 = "TIER_0"  # Self-declared
    TIER_1 = "TIER_1"  # Policy documents
    TIER_2 = "TIER_2"  # System-generated

    @property
    def rank(self) -> int:
        """Position in the tier ordering (0 = weakest)."""
        return {"TIER_0": 0, "TIER_1": 1, "TIER_2": 2}[self.value]

    @classmethod
    def parse(cls, value: "EvidenceTier | str") -> Optional["EvidenceTier"]:
        """The tier for a member or its stored string, or None if unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class RiskBand(str, Enum):
    """Qualitative label derived from the 0-100 overall score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class Severity(str, Enum):
    """Gap severity, driven by the raw 0-5 score."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort rank (0 = most severe)."""
        return {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3}[self.value]


class Priority(str, Enum):
    """Remediation priority bucket, driven by the boosted priority score."""

    IMMEDIATE = "IMMEDIATE"
    SHORT_TERM = "SHORT_TERM"
    MEDIUM_TERM = "MEDIUM_TERM"
    LONG_TERM = "LONG_TERM"

    @property
    def score(self) -> int:
        """Representative numeric priority score for this bucket."""
        return {"IMMEDIATE": 10, "SHORT_TERM": 7, "MEDIUM_TERM": 4, "LONG_TERM": 2}[self.value]


class EffortRange(str, Enum):
    """Estimated remediation effort."""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class CostRange(str, Enum):
    """Estimated remediation cost bucket (USD)."""

    UNDER_10K = "UNDER_10K"
    RANGE_10K_50K = "RANGE_10K_50K"
    RANGE_50K_100K = "RANGE_50K_100K"
    RANGE_100K_250K = "RANGE_100K_250K"
    OVER_250K = "OVER_250K"
