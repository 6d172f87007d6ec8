"""
Data models for circuit-planner.

All core dataclasses: catalog exercises, generation options, the generated
three-phase workout, completed-workout history records and the derived
per-muscle recovery status.
"""

from dataclasses import dataclass, field, replace
from typing import Literal, get_args

from .config import COOLDOWN_MINUTES, WARMUP_MINUTES

Category = Literal[
    "upper_push", "upper_pull", "lower_body", "core", "cardio", "skills", "mobility"
]
Location = Literal["home", "gym", "both"]
WorkoutType = Literal["home", "gym"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
Phase = Literal["warmup", "main_work", "cooldown"]
MuscleGroup = str

CATEGORIES: tuple[str, ...] = get_args(Category)
LOCATIONS: tuple[str, ...] = get_args(Location)
WORKOUT_TYPES: tuple[str, ...] = get_args(WorkoutType)
DIFFICULTIES: tuple[str, ...] = get_args(Difficulty)
PHASES: tuple[str, ...] = get_args(Phase)

EQUIPMENT: tuple[str, ...] = (
    "bodyweight_only",
    "pull_up_bar",
    "parallettes",
    "dip_bars",
    "rings",
    "resistance_bands",
    "yoga_mat",
    "wall",
    "bench",
    "barbell",
    "dumbbells",
    "kettlebell",
    "ab_roller",
    "jump_rope",
)

MUSCLE_GROUPS: tuple[MuscleGroup, ...] = (
    "chest",
    "shoulders",
    "triceps",
    "biceps",
    "forearms",
    "lats",
    "upper_back",
    "lower_back",
    "abs",
    "obliques",
    "core",
    "quads",
    "hamstrings",
    "glutes",
    "calves",
    "hip_flexors",
    "ankles",
    "wrists",
    "spine",
    "hips",
    "legs",
    "full_body",
    "cardiovascular",
    "coordination",
    "balance",
)


class InvalidOptionsError(ValueError):
    """Raised when workout generation options cannot produce a workout."""


@dataclass(frozen=True)
class Exercise:
    """
    A catalog exercise.

    Exactly one of ``default_reps`` / ``default_duration_seconds`` is set:
    holds and cardio are timed, everything else is counted in reps.
    """

    exercise_id: str
    name: str
    category: Category
    location: Location
    difficulty: Difficulty
    equipment: tuple[str, ...]
    default_sets: int
    default_reps: int | None = None
    default_duration_seconds: int | None = None
    muscles_primary: tuple[MuscleGroup, ...] = ()
    muscles_secondary: tuple[MuscleGroup, ...] = ()
    description: str = ""
    form_cues: tuple[str, ...] = ()
    is_default: bool = True
    progression_id: str | None = None  # harder variant, same category
    regression_id: str | None = None   # easier variant, same category

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.exercise_id:
            raise ValueError("exercise_id must be non-empty")
        if self.category not in CATEGORIES:
            raise ValueError(f"Invalid category: {self.category}")
        if self.location not in LOCATIONS:
            raise ValueError(f"Invalid location: {self.location}")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Invalid difficulty: {self.difficulty}")
        if self.default_sets < 1:
            raise ValueError("default_sets must be at least 1")
        if (self.default_reps is None) == (self.default_duration_seconds is None):
            raise ValueError(
                f"Exercise {self.exercise_id!r} must define exactly one of "
                "default_reps or default_duration_seconds"
            )
        if self.default_reps is not None and self.default_reps <= 0:
            raise ValueError("default_reps must be positive")
        if self.default_duration_seconds is not None and self.default_duration_seconds <= 0:
            raise ValueError("default_duration_seconds must be positive")
        for tag in self.equipment:
            if not isinstance(tag, str) or not tag.strip():
                raise ValueError(f"Invalid equipment tag: {tag!r}")
        for muscle in (*self.muscles_primary, *self.muscles_secondary):
            if muscle not in MUSCLE_GROUPS:
                raise ValueError(f"Unknown muscle group: {muscle}")

    @property
    def is_timed(self) -> bool:
        """True for holds/cardio prescribed by duration rather than reps."""
        return self.default_duration_seconds is not None


@dataclass
class WorkoutGenerationOptions:
    """
    User constraints for one generation call.

    ``categories`` keeps the caller's order (main work is assembled in that
    order); duplicates are dropped.
    """

    duration_minutes: int
    difficulty: Difficulty | None
    categories: list[Category]
    workout_type: WorkoutType
    available_equipment: list[str]
    include_warmup: bool = True
    include_cooldown: bool = True

    def __post_init__(self) -> None:
        self.categories = list(dict.fromkeys(self.categories))
        self.available_equipment = list(dict.fromkeys(self.available_equipment))

    def validate(self) -> None:
        """
        Check the options can produce a workout.

        Raises:
            InvalidOptionsError: On empty categories/equipment, a missing or
                unknown difficulty, an unknown category or workout type, or
                warmup+cooldown blocks that leave no main-work time.
        """
        if not self.difficulty:
            raise InvalidOptionsError("A difficulty level must be selected")
        if self.difficulty not in DIFFICULTIES:
            raise InvalidOptionsError(f"Invalid difficulty: {self.difficulty}")
        if not self.categories:
            raise InvalidOptionsError("Select at least one exercise category")
        for category in self.categories:
            if category not in CATEGORIES:
                raise InvalidOptionsError(f"Invalid category: {category}")
        if not self.available_equipment:
            raise InvalidOptionsError("Select at least one piece of equipment")
        if self.workout_type not in WORKOUT_TYPES:
            raise InvalidOptionsError(f"Invalid workout type: {self.workout_type}")

        blocks = (WARMUP_MINUTES if self.include_warmup else 0) + (
            COOLDOWN_MINUTES if self.include_cooldown else 0
        )
        if self.duration_minutes <= blocks:
            raise InvalidOptionsError(
                f"duration_minutes ({self.duration_minutes}) must exceed the "
                f"warmup + cooldown time ({blocks} min)"
            )


@dataclass
class GeneratedWorkoutExercise:
    """
    One prescribed exercise slot inside a generated workout phase.

    ``order_index`` is unique within its phase and survives substitution.
    """

    exercise: Exercise
    sets: int
    target_reps: int | None
    target_duration_seconds: int | None
    rest_seconds: int
    order_index: int

    def __post_init__(self) -> None:
        """Validate slot data."""
        if self.sets < 1:
            raise ValueError("sets must be at least 1")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
        if self.order_index < 0:
            raise ValueError("order_index must be non-negative")


@dataclass
class GeneratedWorkout:
    """A three-phase workout ready for review, substitution and saving."""

    name: str
    workout_type: WorkoutType
    warmup: list[GeneratedWorkoutExercise] = field(default_factory=list)
    main_work: list[GeneratedWorkoutExercise] = field(default_factory=list)
    cooldown: list[GeneratedWorkoutExercise] = field(default_factory=list)
    total_duration_minutes: int = 0

    def phase(self, phase: str) -> list[GeneratedWorkoutExercise]:
        """Return the entries of one phase."""
        if phase not in PHASES:
            raise ValueError(f"Invalid phase: {phase}. Must be one of {PHASES}")
        return getattr(self, phase)

    def all_exercises(self) -> list[GeneratedWorkoutExercise]:
        """All entries in phase order (warmup, main work, cooldown)."""
        return [*self.warmup, *self.main_work, *self.cooldown]

    def exercise_ids(self) -> set[str]:
        """Ids of every exercise currently used in any phase."""
        return {e.exercise.exercise_id for e in self.all_exercises()}

    def with_phase(
        self, phase: str, entries: list[GeneratedWorkoutExercise]
    ) -> "GeneratedWorkout":
        """Return a copy of this workout with one phase replaced."""
        self.phase(phase)
        phases = {name: list(getattr(self, name)) for name in PHASES}
        phases[phase] = list(entries)
        return replace(self, **phases)


@dataclass
class CompletedWorkout:
    """
    A workout record from history.

    ``workout_type`` is kept as a free string: records written by other
    clients may carry types the recovery estimator does not recognise.
    """

    workout_id: str
    name: str
    workout_type: str
    duration_minutes: int
    date: str  # ISO format: YYYY-MM-DD
    completed_at: str | None = None  # ISO timestamp; None = not completed
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate workout record."""
        if not self.workout_id:
            raise ValueError("workout_id must be non-empty")
        if self.duration_minutes < 0:
            raise ValueError("duration_minutes must be non-negative")
        _validate_date(self.date)
        if self.completed_at is not None:
            _validate_timestamp(self.completed_at)


@dataclass
class MuscleRecoveryStatus:
    """Derived recovery state of one muscle group."""

    muscle: MuscleGroup
    is_recovered: bool
    percent_recovered: float  # 0-100
    hours_until_recovered: int
    last_trained: str | None = None


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    import re
    from datetime import datetime

    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


def _validate_timestamp(value: str) -> None:
    """Validate an ISO 8601 timestamp."""
    from datetime import datetime

    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value}") from e
