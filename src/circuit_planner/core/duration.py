"""
Workout duration estimation and greedy trimming.

Duration of one prescribed exercise:

    work  = reps * SECONDS_PER_REP      (reps-based)
          = target_duration_seconds     (timed)
    rest  = rest_seconds * (sets - 1)   (no rest after the last set)
    total = work * sets + rest
"""

from .config import MIN_SETS_AFTER_TRIM, SECONDS_PER_REP
from .models import GeneratedWorkoutExercise


def exercise_duration_seconds(entry: GeneratedWorkoutExercise) -> int:
    """
    Estimated wall-clock time of one prescribed exercise.

    Args:
        entry: Prescribed exercise slot

    Returns:
        Duration in seconds
    """
    if entry.target_reps:
        work = entry.target_reps * SECONDS_PER_REP
    else:
        work = entry.target_duration_seconds or 0
    rest = entry.rest_seconds * (entry.sets - 1)
    return work * entry.sets + rest


def workout_duration_seconds(entries: list[GeneratedWorkoutExercise]) -> int:
    """Sum of exercise_duration_seconds over a list of entries."""
    return sum(exercise_duration_seconds(e) for e in entries)


def optimize_duration(
    entries: list[GeneratedWorkoutExercise],
    target_minutes: float,
) -> list[GeneratedWorkoutExercise]:
    """
    Trim a list of entries until it fits the time budget.

    Greedy loop while over budget:
      1. If any entry has more than MIN_SETS_AFTER_TRIM sets, take one set
         off the first such entry (keeps exercise variety).
      2. Otherwise drop the last entry.

    The list is modified in place and also returned.  An empty result is
    valid output when nothing fits.

    Args:
        entries: Main-work entries in order
        target_minutes: Time budget in minutes

    Returns:
        The same list, trimmed
    """
    target_seconds = target_minutes * 60
    current = workout_duration_seconds(entries)

    while current > target_seconds and entries:
        reducible = next((e for e in entries if e.sets > MIN_SETS_AFTER_TRIM), None)
        if reducible is not None:
            reducible.sets -= 1
        else:
            entries.pop()
        current = workout_duration_seconds(entries)

    return entries
