"""
Swap one exercise of a generated workout for a compatible alternative.

Candidates share the replaced exercise's category, have an accepted
difficulty, share at least one equipment tag with the available
equipment, and are not used anywhere in the workout yet.

Equipment matching here is "any overlap", looser than the "requires all"
rule used at generation time.
"""

import random
from dataclasses import dataclass

from .generator import accepted_difficulties
from .models import (
    PHASES,
    Exercise,
    GeneratedWorkout,
    GeneratedWorkoutExercise,
    WorkoutGenerationOptions,
)


@dataclass
class SubstitutionResult:
    """
    Outcome of a substitution request.

    When no candidate exists ``replacement`` is None and ``workout`` is the
    unchanged input workout.
    """

    workout: GeneratedWorkout
    phase: str
    replaced: GeneratedWorkoutExercise
    replacement: GeneratedWorkoutExercise | None

    @property
    def found(self) -> bool:
        return self.replacement is not None


def _slot(workout: GeneratedWorkout, phase: str, index: int) -> GeneratedWorkoutExercise:
    if phase not in PHASES:
        raise ValueError(f"Invalid phase: {phase}. Must be one of {PHASES}")
    entries = workout.phase(phase)
    if index < 0 or index >= len(entries):
        raise IndexError(
            f"No exercise #{index} in {phase} ({len(entries)} exercise(s))"
        )
    return entries[index]


def find_substitutes(
    workout: GeneratedWorkout,
    phase: str,
    index: int,
    catalog: list[Exercise],
    options: WorkoutGenerationOptions,
) -> list[Exercise]:
    """
    List every valid replacement for one slot.

    Args:
        workout: Current workout
        phase: "warmup", "main_work" or "cooldown"
        index: Position within the phase
        catalog: Full exercise catalog
        options: Options the workout was generated with

    Returns:
        Candidate exercises in catalog order (possibly empty)

    Raises:
        ValueError: If phase is unknown
        IndexError: If index is out of range
    """
    current = _slot(workout, phase, index).exercise
    used_ids = workout.exercise_ids()
    allowed = accepted_difficulties(options.difficulty)
    equipment = set(options.available_equipment)

    return [
        e
        for e in catalog
        if e.category == current.category
        and e.exercise_id not in used_ids
        and e.difficulty in allowed
        and any(item in equipment for item in e.equipment)
    ]


def build_replacement(
    current: GeneratedWorkoutExercise,
    exercise: Exercise,
    phase: str,
) -> GeneratedWorkoutExercise:
    """
    Build the replacement entry for a slot.

    Sets, rest and order_index stay with the slot.  Warmup and cooldown
    slots are timed: the new exercise's default duration is used, or the
    slot's previous duration when it has none.  Main-work slots take the
    new exercise's own reps or duration so exactly one target is set.
    """
    if phase == "main_work":
        target_reps = exercise.default_reps
        target_duration = exercise.default_duration_seconds
    else:
        target_reps = None
        target_duration = exercise.default_duration_seconds or current.target_duration_seconds

    return GeneratedWorkoutExercise(
        exercise=exercise,
        sets=current.sets,
        target_reps=target_reps,
        target_duration_seconds=target_duration,
        rest_seconds=current.rest_seconds,
        order_index=current.order_index,
    )


def substitute_exercise(
    workout: GeneratedWorkout,
    phase: str,
    index: int,
    catalog: list[Exercise],
    options: WorkoutGenerationOptions,
    rng: random.Random | None = None,
) -> SubstitutionResult:
    """
    Replace one exercise with a random compatible alternative.

    The input workout is never modified; a successful substitution returns
    a new workout value with only the chosen slot changed.

    Args:
        workout: Current workout
        phase: "warmup", "main_work" or "cooldown"
        index: Position within the phase
        catalog: Full exercise catalog
        options: Options the workout was generated with
        rng: Random source (default: a fresh unseeded random.Random)

    Returns:
        SubstitutionResult (``found`` is False when no alternative exists)
    """
    current = _slot(workout, phase, index)
    candidates = find_substitutes(workout, phase, index, catalog, options)

    if not candidates:
        return SubstitutionResult(
            workout=workout, phase=phase, replaced=current, replacement=None
        )

    if rng is None:
        rng = random.Random()
    chosen = candidates[rng.randrange(len(candidates))]
    replacement = build_replacement(current, chosen, phase)

    entries = list(workout.phase(phase))
    entries[index] = replacement
    return SubstitutionResult(
        workout=workout.with_phase(phase, entries),
        phase=phase,
        replaced=current,
        replacement=replacement,
    )
