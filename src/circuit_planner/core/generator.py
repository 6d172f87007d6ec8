"""
Workout generation for circuit-planner.

Builds a three-phase workout (warmup, main work, cooldown) from an
exercise catalog and the user's constraints.  Generation is a set of
stateless functions; all randomness goes through an injectable
``random.Random`` so a seeded generator reproduces the same workout,
while the default unseeded one gives a fresh workout on every call.

Sampling never repeats an exercise within one phase.  Phases are sampled
independently, so the same exercise may show up in warmup and main work.
"""

import random

from .config import (
    ACCEPTED_DIFFICULTIES,
    COOLDOWN_CATEGORIES,
    COOLDOWN_HOLD_SECONDS,
    COOLDOWN_MINUTES,
    COOLDOWN_REST_SECONDS,
    MAIN_REST_SECONDS,
    MAIN_SECONDS_PER_EXERCISE,
    MIN_BLOCK_EXERCISES,
    WARMUP_CATEGORIES,
    WARMUP_MINUTES,
    WARMUP_REST_SECONDS,
    WARMUP_WORK_SECONDS,
)
from .duration import optimize_duration, workout_duration_seconds
from .models import (
    Exercise,
    GeneratedWorkout,
    GeneratedWorkoutExercise,
    WorkoutGenerationOptions,
)


def accepted_difficulties(difficulty: str) -> tuple[str, ...]:
    """
    Difficulty levels eligible for a requested difficulty.

    Intermediate also accepts beginner entries; beginner and advanced
    accept only themselves.
    """
    return ACCEPTED_DIFFICULTIES.get(difficulty, (difficulty,))


def is_location_match(exercise: Exercise, workout_type: str) -> bool:
    """Home workouts need home/both exercises; gym workouts accept any."""
    if workout_type == "home":
        return exercise.location in ("home", "both")
    return True


def filter_exercises(
    exercises: list[Exercise],
    difficulty: str,
    available_equipment: list[str],
    workout_type: str,
) -> list[Exercise]:
    """
    Eligibility filter applied once before any phase-specific selection.

    An exercise is eligible when its difficulty is accepted, every piece
    of equipment it requires is available, and its location suits the
    workout type.

    Args:
        exercises: Catalog to filter
        difficulty: Requested difficulty
        available_equipment: Equipment the user has
        workout_type: "home" or "gym"

    Returns:
        Eligible exercises in catalog order
    """
    allowed = accepted_difficulties(difficulty)
    equipment = set(available_equipment)
    return [
        e
        for e in exercises
        if e.difficulty in allowed
        and all(item in equipment for item in e.equipment)
        and is_location_match(e, workout_type)
    ]


def sample_exercises(
    pool: list[Exercise],
    count: int,
    rng: random.Random,
) -> list[Exercise]:
    """Pick up to ``count`` distinct exercises from ``pool`` at random."""
    shuffled = list(pool)
    rng.shuffle(shuffled)
    return shuffled[: max(0, min(count, len(shuffled)))]


def _block_count(seconds: int, per_exercise: int, pool_size: int) -> int:
    """floor(seconds / per_exercise) clamped to [MIN_BLOCK_EXERCISES, pool_size]."""
    return max(MIN_BLOCK_EXERCISES, min(seconds // per_exercise, pool_size))


def generate_warmup(
    eligible: list[Exercise],
    duration_minutes: int,
    rng: random.Random,
) -> list[GeneratedWorkoutExercise]:
    """
    Warmup block: single timed sets of mobility and cardio movements.

    count = floor(seconds / (45 + 15)), clamped to [2, pool size]
    """
    pool = [e for e in eligible if e.category in WARMUP_CATEGORIES]
    per_exercise = WARMUP_WORK_SECONDS + WARMUP_REST_SECONDS
    count = _block_count(duration_minutes * 60, per_exercise, len(pool))

    return [
        GeneratedWorkoutExercise(
            exercise=exercise,
            sets=1,
            target_reps=None,
            target_duration_seconds=exercise.default_duration_seconds or WARMUP_WORK_SECONDS,
            rest_seconds=WARMUP_REST_SECONDS,
            order_index=i,
        )
        for i, exercise in enumerate(sample_exercises(pool, count, rng))
    ]


def generate_main_work(
    eligible: list[Exercise],
    categories: list[str],
    duration_minutes: int,
    rng: random.Random,
) -> list[GeneratedWorkoutExercise]:
    """
    Main work block, balanced across the requested categories.

    per_category = floor(seconds / (n_categories * 180)), at least 1.
    Categories are processed in the caller's order; an empty category pool
    is skipped.  The result is trimmed to the time budget.

    Args:
        eligible: Exercises that passed the eligibility filter
        categories: Requested categories, in order
        duration_minutes: Main-work budget
        rng: Random source

    Returns:
        Main-work entries with order_index increasing across categories
    """
    requested = set(categories)
    category_exercises = [e for e in eligible if e.category in requested]
    per_category = (duration_minutes * 60) // (len(categories) * MAIN_SECONDS_PER_EXERCISE)

    entries: list[GeneratedWorkoutExercise] = []
    order_index = 0

    for category in categories:
        pool = [e for e in category_exercises if e.category == category]
        if not pool:
            continue

        for exercise in sample_exercises(pool, max(1, per_category), rng):
            entries.append(
                GeneratedWorkoutExercise(
                    exercise=exercise,
                    sets=exercise.default_sets,
                    target_reps=exercise.default_reps,
                    target_duration_seconds=exercise.default_duration_seconds,
                    rest_seconds=MAIN_REST_SECONDS,
                    order_index=order_index,
                )
            )
            order_index += 1

    return optimize_duration(entries, duration_minutes)


def generate_cooldown(
    eligible: list[Exercise],
    duration_minutes: int,
    rng: random.Random,
) -> list[GeneratedWorkoutExercise]:
    """
    Cooldown block: single held stretches from the mobility pool.

    count = floor(seconds / (60 + 10)), clamped to [2, pool size]
    """
    pool = [e for e in eligible if e.category in COOLDOWN_CATEGORIES]
    per_exercise = COOLDOWN_HOLD_SECONDS + COOLDOWN_REST_SECONDS
    count = _block_count(duration_minutes * 60, per_exercise, len(pool))

    return [
        GeneratedWorkoutExercise(
            exercise=exercise,
            sets=1,
            target_reps=None,
            target_duration_seconds=exercise.default_duration_seconds or COOLDOWN_HOLD_SECONDS,
            rest_seconds=COOLDOWN_REST_SECONDS,
            order_index=i,
        )
        for i, exercise in enumerate(sample_exercises(pool, count, rng))
    ]


def workout_name(categories: list[str], difficulty: str) -> str:
    """
    Descriptive workout name.

    e.g. ("upper_push", "core"), "intermediate" -> "Intermediate upper push, core Workout"
    """
    category_names = ", ".join(c.replace("_", " ") for c in categories)
    return f"{difficulty[:1].upper()}{difficulty[1:]} {category_names} Workout"


def generate_workout(
    exercises: list[Exercise],
    options: WorkoutGenerationOptions,
    rng: random.Random | None = None,
) -> GeneratedWorkout:
    """
    Generate a complete workout.

    Args:
        exercises: Exercise catalog (typically the default exercises)
        options: Generation constraints
        rng: Random source (default: a fresh unseeded random.Random)

    Returns:
        GeneratedWorkout with warmup, main work and cooldown

    Raises:
        InvalidOptionsError: If the options are invalid
    """
    options.validate()
    if rng is None:
        rng = random.Random()

    warmup_minutes = WARMUP_MINUTES if options.include_warmup else 0
    cooldown_minutes = COOLDOWN_MINUTES if options.include_cooldown else 0
    main_minutes = options.duration_minutes - warmup_minutes - cooldown_minutes

    eligible = filter_exercises(
        exercises,
        options.difficulty,
        options.available_equipment,
        options.workout_type,
    )

    warmup = generate_warmup(eligible, warmup_minutes, rng) if options.include_warmup else []
    main_work = generate_main_work(eligible, options.categories, main_minutes, rng)
    cooldown = (
        generate_cooldown(eligible, cooldown_minutes, rng) if options.include_cooldown else []
    )

    return GeneratedWorkout(
        name=workout_name(options.categories, options.difficulty),
        workout_type=options.workout_type,
        warmup=warmup,
        main_work=main_work,
        cooldown=cooldown,
        total_duration_minutes=options.duration_minutes,
    )


def estimate_workout_seconds(workout: GeneratedWorkout) -> int:
    """Estimated duration of all three phases, in seconds."""
    return workout_duration_seconds(workout.all_exercises())
