"""
Central configuration for the scoring engine.

Scoring parameters (tier multipliers, weight tolerance, gap threshold,
concurrency) come from an optional YAML file named by the
COMPLIANCE_SCORING_CONFIG environment variable. Without it, built-in
defaults from constants.py are used.

Database: MySQL-compatible. Configure via environment variables:
  - COMPLIANCE_DB_HOST (default: 127.0.0.1)
  - COMPLIANCE_DB_PORT (default: 3306)
  - COMPLIANCE_DB_USER (default: root)
  - COMPLIANCE_DB_PASSWORD (default: empty)
  - COMPLIANCE_DB_DATABASE (default: compliance)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from compliance_engine.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_TIER_MULTIPLIERS,
    GAP_SCORE_THRESHOLD,
    WEIGHT_TOLERANCE,
)
from compliance_engine.schemas.enums import EvidenceTier

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "COMPLIANCE_SCORING_CONFIG"


@dataclass
class ScoringConfig:
    """Tunable scoring parameters.

    Attributes:
        tier_multipliers: Multiplier per evidence tier value
        weight_tolerance: Allowed deviation of sibling weight sums from 1.0
        gap_threshold: final_score below this value is reported as a gap
        max_workers: Thread count when sections are scored concurrently
        parallel_sections: Score sections concurrently instead of in order
    """

    tier_multipliers: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TIER_MULTIPLIERS))
    weight_tolerance: float = WEIGHT_TOLERANCE
    gap_threshold: float = GAP_SCORE_THRESHOLD
    max_workers: int = DEFAULT_MAX_WORKERS
    parallel_sections: bool = False

    def __post_init__(self):
        _validate_tier_multipliers(self.tier_multipliers)
        if self.weight_tolerance < 0:
            raise ValueError(f"weight_tolerance must be non-negative, got {self.weight_tolerance}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")


def _validate_tier_multipliers(multipliers: dict[str, float]) -> None:
    """Validate that every tier is present and multipliers increase with tier."""
    expected = {tier.value for tier in EvidenceTier}
    missing = expected - set(multipliers.keys())
    if missing:
        raise ValueError(f"Tier multipliers missing tiers: {sorted(missing)}")
    extra = set(multipliers.keys()) - expected
    if extra:
        raise ValueError(f"Tier multipliers have unexpected tiers: {sorted(extra)}")
    if any(value <= 0 for value in multipliers.values()):
        raise ValueError(f"Tier multipliers must be positive: {multipliers}")
    if not multipliers["TIER_0"] < multipliers["TIER_1"] <= multipliers["TIER_2"]:
        raise ValueError(f"Tier multipliers must satisfy TIER_0 < TIER_1 <= TIER_2: {multipliers}")


# Module-level cache
_config_cache: Optional[ScoringConfig] = None


def _get_config_path() -> Optional[Path]:
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return None


def load_scoring_config(path: Path) -> ScoringConfig:
    """Load a ScoringConfig from a YAML file.

    Expected shape:

        tier_multipliers:
          TIER_0: 0.6
          TIER_1: 0.8
          TIER_2: 1.0
        weight_tolerance: 0.0001
        gap_threshold: 3.0
        max_workers: 4
        parallel_sections: false

    Every key is optional; omitted keys keep their defaults.
    """
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    defaults = ScoringConfig()
    multipliers = dict(defaults.tier_multipliers)
    multipliers.update({str(k): float(v) for k, v in (raw.get("tier_multipliers") or {}).items()})

    return ScoringConfig(
        tier_multipliers=multipliers,
        weight_tolerance=float(raw.get("weight_tolerance", defaults.weight_tolerance)),
        gap_threshold=float(raw.get("gap_threshold", defaults.gap_threshold)),
        max_workers=int(raw.get("max_workers", defaults.max_workers)),
        parallel_sections=bool(raw.get("parallel_sections", defaults.parallel_sections)),
    )


def get_scoring_config() -> ScoringConfig:
    """Get the process-wide ScoringConfig (cached)."""
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config_path = _get_config_path()
    if config_path is None:
        _config_cache = ScoringConfig()
    elif not config_path.exists():
        logger.warning(f"Scoring config not found at {config_path}, using defaults")
        _config_cache = ScoringConfig()
    else:
        _config_cache = load_scoring_config(config_path)
        logger.info(f"Loaded scoring config from {config_path}")
    return _config_cache


def clear_cache():
    """Clear the config cache (useful for testing)."""
    global _config_cache
    _config_cache = None


def get_database_config() -> dict:
    """Get database connection parameters from the environment."""
    return {
        "host": os.environ.get("COMPLIANCE_DB_HOST", "127.0.0.1"),
        "port": int(os.environ.get("COMPLIANCE_DB_PORT", "3306")),
        "user": os.environ.get("COMPLIANCE_DB_USER", "root"),
        "password": os.environ.get("COMPLIANCE_DB_PASSWORD", ""),
        "database": os.environ.get("COMPLIANCE_DB_DATABASE", "compliance"),
    }
