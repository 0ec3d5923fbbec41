"""
Global constants for compliance scoring.

Centralizes thresholds and default configuration values used by the
scorers so they can be tuned in one place.
"""

# Evidence tier multipliers (overridable via ScoringConfig)
DEFAULT_TIER_MULTIPLIERS = {
    "TIER_0": 0.6,  # 40% reduction for self-declared evidence
    "TIER_1": 0.8,  # 20% reduction for policy documents
    "TIER_2": 1.0,  # No penalty for system-generated evidence
}

# Weight validation
WEIGHT_TOLERANCE = 1e-4  # Sibling weights must sum to 1.0 within this

# Internal and reported score ranges
INTERNAL_SCORE_MIN = 0.0
INTERNAL_SCORE_MAX = 5.0
REPORTED_SCORE_MIN = 0.0
REPORTED_SCORE_MAX = 100.0

# Risk bands on the 0-100 overall score (lower bound inclusive)
RISK_BAND_LOW_THRESHOLD = 80
RISK_BAND_MEDIUM_THRESHOLD = 60
RISK_BAND_HIGH_THRESHOLD = 40

# Gap severity on the 0-5 raw score (upper bound exclusive)
SEVERITY_CRITICAL_BELOW = 1.5
SEVERITY_HIGH_BELOW = 2.5
SEVERITY_MEDIUM_BELOW = 3.5

# Priority score composition
PRIORITY_SCORE_MIN = 1
PRIORITY_SCORE_MAX = 10
FOUNDATIONAL_PRIORITY_BOOST = 2
SECTION_WEIGHT_PRIORITY_FACTOR = 5

# Priority buckets on the clamped priority score (lower bound inclusive)
PRIORITY_IMMEDIATE_THRESHOLD = 9
PRIORITY_SHORT_TERM_THRESHOLD = 6
PRIORITY_MEDIUM_TERM_THRESHOLD = 3

# Effort estimation
LARGE_EFFORT_MIN_SECTION_WEIGHT = 0.25  # exclusive
LARGE_EFFORT_MAX_SCORE = 2.0  # exclusive
MEDIUM_EFFORT_SECTION_WEIGHT_RANGE = (0.15, 0.25)  # inclusive

# Cost estimation
OVER_250K_MIN_SECTION_WEIGHT = 0.20  # exclusive

# Gap identification
GAP_SCORE_THRESHOLD = 3.0  # final_score below this is a gap
GAP_TITLE_MAX_CHARS = 100

# Concurrency
DEFAULT_MAX_WORKERS = 4
