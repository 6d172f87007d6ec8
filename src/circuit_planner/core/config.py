"""
Configuration constants for the workout generation and recovery model.

All adjustable parameters are centralized here for easy tuning.
User overrides for a subset of them are read by config_loader.py.
"""

from typing import Final

# =============================================================================
# SESSION DURATION
# =============================================================================

MIN_DURATION_MINUTES: Final[int] = 15
MAX_DURATION_MINUTES: Final[int] = 90
DEFAULT_DURATION_MINUTES: Final[int] = 30

# Fixed blocks, not scaled with total duration
WARMUP_MINUTES: Final[int] = 5
COOLDOWN_MINUTES: Final[int] = 5

# =============================================================================
# WARMUP / COOLDOWN SHAPE
# =============================================================================

WARMUP_CATEGORIES: Final[tuple[str, ...]] = ("mobility", "cardio")
WARMUP_WORK_SECONDS: Final[int] = 45  # Also the fallback target duration
WARMUP_REST_SECONDS: Final[int] = 15

COOLDOWN_CATEGORIES: Final[tuple[str, ...]] = ("mobility",)
COOLDOWN_HOLD_SECONDS: Final[int] = 60  # Also the fallback hold duration
COOLDOWN_REST_SECONDS: Final[int] = 10

MIN_BLOCK_EXERCISES: Final[int] = 2  # Lower clamp for warmup/cooldown count

# =============================================================================
# MAIN WORK
# =============================================================================

MAIN_SECONDS_PER_EXERCISE: Final[int] = 180  # ~3 minutes budgeted per exercise
MAIN_REST_SECONDS: Final[int] = 60  # Inter-set rest

# =============================================================================
# DURATION OPTIMIZER
# =============================================================================

SECONDS_PER_REP: Final[int] = 3
MIN_SETS_AFTER_TRIM: Final[int] = 2  # Sets are never trimmed below this

# =============================================================================
# DIFFICULTY
# =============================================================================

# One-directional leniency: intermediate also draws from beginner entries
ACCEPTED_DIFFICULTIES: Final[dict[str, tuple[str, ...]]] = {
    "beginner": ("beginner",),
    "intermediate": ("intermediate", "beginner"),
    "advanced": ("advanced",),
}

# =============================================================================
# MUSCLE RECOVERY
# =============================================================================

RECOVERY_TIMES: Final[dict[str, int]] = {
    # Large muscle groups
    "chest": 48,
    "lats": 48,
    "quads": 48,
    "hamstrings": 48,
    "glutes": 48,
    "legs": 48,
    # Medium muscle groups
    "shoulders": 36,
    "upper_back": 36,
    "lower_back": 48,
    "core": 24,
    "abs": 24,
    "obliques": 24,
    # Small muscle groups
    "biceps": 24,
    "triceps": 24,
    "forearms": 24,
    "calves": 24,
    # Joints and mobility
    "hip_flexors": 24,
    "ankles": 24,
    "wrists": 24,
    "spine": 48,
    "hips": 36,
    # Whole-body / qualities
    "full_body": 48,
    "cardiovascular": 24,
    "coordination": 24,
    "balance": 24,
}

# Primary muscles only; secondaries and stabilisers are ignored
CATEGORY_TO_MUSCLES: Final[dict[str, tuple[str, ...]]] = {
    "upper_push": ("chest", "shoulders", "triceps"),
    "upper_pull": ("lats", "upper_back", "biceps"),
    "lower_body": ("quads", "hamstrings", "glutes"),
    "core": ("abs", "core"),
    "cardio": ("cardiovascular",),
    "skills": ("coordination",),
    "mobility": ("hips", "spine"),
}

# =============================================================================
# MUSCLE INFERENCE FROM HISTORY
# =============================================================================

SHORT_WORKOUT_MINUTES: Final[int] = 30  # duration < 30 -> short
LONG_WORKOUT_MINUTES: Final[int] = 45  # duration >= 45 -> long, else medium

PUSH_MUSCLES: Final[tuple[str, ...]] = ("chest", "shoulders", "triceps")
PULL_MUSCLES: Final[tuple[str, ...]] = ("lats", "upper_back", "biceps", "core")
LEG_MUSCLES: Final[tuple[str, ...]] = ("quads", "hamstrings", "glutes", "calves")
UPPER_MUSCLES: Final[tuple[str, ...]] = (
    "chest", "shoulders", "triceps", "lats", "biceps", "upper_back",
)

HOME_MUSCLES: Final[dict[str, tuple[str, ...]]] = {
    "short": ("core", "abs", "cardiovascular"),
    "medium": ("chest", "shoulders", "triceps", "core", "abs"),
    "long": ("chest", "shoulders", "triceps", "core", "abs", "quads", "glutes"),
}

GYM_SHORT_MUSCLES: Final[tuple[str, ...]] = PUSH_MUSCLES
# Medium gym sessions alternate upper/lower by day-of-month parity
GYM_MEDIUM_SPLIT: Final[tuple[tuple[str, ...], ...]] = (UPPER_MUSCLES, LEG_MUSCLES)
# Long gym sessions rotate push/pull/legs by day-of-month mod 3
GYM_LONG_ROTATION: Final[tuple[tuple[str, ...], ...]] = (
    PUSH_MUSCLES,
    PULL_MUSCLES,
    LEG_MUSCLES,
)

FALLBACK_MUSCLES: Final[tuple[str, ...]] = ("cardiovascular", "legs")

# Recovery messages
ALMOST_RECOVERED_HOURS: Final[int] = 6
