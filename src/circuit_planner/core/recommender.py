"""
Category recommendations from muscle recovery status.

A category is trainable when enough of its primary muscles are recovered:

    n <= 2 primary muscles  ->  at least 1 recovered
    n >= 3 primary muscles  ->  at least ceil(n / 3) recovered

The threshold is deliberately lenient: telling the user not to train a
ready muscle is treated as worse than the opposite mistake.
"""

import math
from datetime import datetime

from .config import CATEGORY_TO_MUSCLES
from .models import CATEGORIES, CompletedWorkout, MuscleRecoveryStatus
from .recovery import estimate_recovery


def recovered_threshold(muscle_count: int) -> int:
    """Number of recovered primary muscles required for a category."""
    if muscle_count <= 2:
        return 1
    return math.ceil(muscle_count / 3)


def can_train_category(category: str, statuses: list[MuscleRecoveryStatus]) -> bool:
    """
    Check whether a category can be trained given recovery statuses.

    Categories without a muscle mapping are always trainable.
    """
    muscles = CATEGORY_TO_MUSCLES.get(category, ())
    if not muscles:
        return True

    recovered = {s.muscle for s in statuses if s.is_recovered}
    recovered_count = sum(1 for m in muscles if m in recovered)
    return recovered_count >= recovered_threshold(len(muscles))


def categories_from_statuses(statuses: list[MuscleRecoveryStatus]) -> list[str]:
    """Trainable categories, in catalog category order."""
    return [c for c in CATEGORIES if can_train_category(c, statuses)]


def recommend_categories(
    history: list[CompletedWorkout],
    now: datetime | None = None,
    recovery_times: dict[str, float] | None = None,
) -> list[str]:
    """
    Recommend exercise categories to train based on workout history.

    Args:
        history: Completed-workout history
        now: Reference time (default: current UTC time)
        recovery_times: Per-muscle recovery overrides (hours)

    Returns:
        Recommended categories, in catalog category order
    """
    statuses = estimate_recovery(history, now=now, recovery_times=recovery_times)
    return categories_from_statuses(statuses)
