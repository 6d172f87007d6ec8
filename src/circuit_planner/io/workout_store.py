"""
JSONL-based storage for workout history and the workout under review.

Files, all in one directory:
- history.jsonl: one completed workout per line
- draft.json:    the generated workout currently being reviewed, with the
                 options it was generated from
- plans.jsonl:   committed workout plans, one per line, with one record per
                 exercise tagged by phase
"""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.models import CompletedWorkout, Exercise, GeneratedWorkout, WorkoutGenerationOptions
from .serializers import (
    ValidationError,
    completed_workout_to_json_line,
    dict_to_generated_workout,
    dict_to_options,
    generated_workout_to_dict,
    json_line_to_completed_workout,
    options_to_dict,
    workout_to_records,
)


class WorkoutStore:
    """
    Record store for completed workouts and generated plans.

    Completed workouts are kept in a JSONL file sorted by completion time;
    records are addressed by their ``id``.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)
        self.draft_path = self.history_path.parent / "draft.json"
        self.plans_path = self.history_path.parent / "plans.jsonl"

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def init(self) -> None:
        """
        Initialize empty history file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.history_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    # ------------------------------------------------------------------
    # Completed workouts
    # ------------------------------------------------------------------

    def load_history(self) -> list[CompletedWorkout]:
        """
        Load all completed workouts.

        Returns:
            Workouts sorted by completion time, oldest first (workouts
            without a completion time sort by date, before completed ones
            of the same day)

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        workouts: list[CompletedWorkout] = []

        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    workouts.append(json_line_to_completed_workout(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        workouts.sort(key=_history_sort_key)
        return workouts

    def _write_history(self, workouts: list[CompletedWorkout]) -> None:
        with open(self.history_path, "w", encoding="utf-8") as f:
            for workout in workouts:
                f.write(completed_workout_to_json_line(workout) + "\n")

    def append_workout(self, workout: CompletedWorkout) -> None:
        """
        Add a workout to history, replacing any record with the same id.

        Raises:
            FileNotFoundError: If history file doesn't exist
        """
        workouts = [w for w in self.load_history() if w.workout_id != workout.workout_id]
        workouts.append(workout)
        workouts.sort(key=_history_sort_key)
        self._write_history(workouts)

    def get_workout(self, workout_id: str) -> CompletedWorkout | None:
        """Return the workout with the given id, or None."""
        for workout in self.load_history():
            if workout.workout_id == workout_id:
                return workout
        return None

    def update_workout(self, workout: CompletedWorkout) -> None:
        """
        Replace an existing workout record.

        Raises:
            KeyError: If no workout has this id
        """
        workouts = self.load_history()
        for i, existing in enumerate(workouts):
            if existing.workout_id == workout.workout_id:
                workouts[i] = workout
                workouts.sort(key=_history_sort_key)
                self._write_history(workouts)
                return
        raise KeyError(f"No workout with id {workout.workout_id!r}")

    def delete_workout(self, workout_id: str) -> CompletedWorkout:
        """
        Delete a workout by id.

        Returns:
            The deleted workout

        Raises:
            KeyError: If no workout has this id
        """
        workouts = self.load_history()
        for i, existing in enumerate(workouts):
            if existing.workout_id == workout_id:
                del workouts[i]
                self._write_history(workouts)
                return existing
        raise KeyError(f"No workout with id {workout_id!r}")

    # ------------------------------------------------------------------
    # Draft workout under review
    # ------------------------------------------------------------------

    def save_draft(self, workout: GeneratedWorkout, options: WorkoutGenerationOptions) -> None:
        """Store the workout under review together with its generation options."""
        self.draft_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "workout": generated_workout_to_dict(workout),
            "options": options_to_dict(options),
        }
        with open(self.draft_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def load_draft(
        self, catalog: list[Exercise]
    ) -> tuple[GeneratedWorkout, WorkoutGenerationOptions] | None:
        """
        Load the workout under review.

        Returns:
            (workout, options) or None if there is no draft

        Raises:
            ValidationError: If the draft file is corrupt
        """
        if not self.draft_path.exists():
            return None
        try:
            with open(self.draft_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return (
                dict_to_generated_workout(data["workout"], catalog),
                dict_to_options(data["options"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValidationError(f"Corrupt draft file {self.draft_path}: {e}") from e

    def clear_draft(self) -> None:
        """Discard the workout under review."""
        if self.draft_path.exists():
            self.draft_path.unlink()

    # ------------------------------------------------------------------
    # Committed plans
    # ------------------------------------------------------------------

    def save_plan(self, workout_id: str, workout: GeneratedWorkout) -> None:
        """Append a committed plan with one record per exercise."""
        self.plans_path.parent.mkdir(parents=True, exist_ok=True)
        entry: dict[str, Any] = {
            "workout_id": workout_id,
            "name": workout.name,
            "type": workout.workout_type,
            "duration_minutes": workout.total_duration_minutes,
            "exercises": workout_to_records(workout),
        }
        with open(self.plans_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, separators=(",", ":")) + "\n")

    def load_plans(self) -> list[dict[str, Any]]:
        """Load all committed plans (raw dicts); [] if none."""
        if not self.plans_path.exists():
            return []
        plans: list[dict[str, Any]] = []
        with open(self.plans_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    plans.append(json.loads(line))
                except json.JSONDecodeError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.plans_path}: {e}"
                    ) from e
        return plans

    def commit_draft(self, catalog: list[Exercise], completed_at: str | None = None) -> CompletedWorkout:
        """
        Turn the draft into a history record and a committed plan.

        Args:
            catalog: Catalog used to resolve draft exercises
            completed_at: Completion timestamp (default: now, UTC)

        Returns:
            The new CompletedWorkout

        Raises:
            FileNotFoundError: If there is no draft
        """
        draft = self.load_draft(catalog)
        if draft is None:
            raise FileNotFoundError(f"No workout under review: {self.draft_path}")
        workout, _options = draft

        finished = completed_at or datetime.now(timezone.utc).isoformat(timespec="seconds")
        record = CompletedWorkout(
            workout_id=new_workout_id(),
            name=workout.name,
            workout_type=workout.workout_type,
            duration_minutes=workout.total_duration_minutes,
            date=finished[:10],
            completed_at=finished,
        )
        self.append_workout(record)
        self.save_plan(record.workout_id, workout)
        self.clear_draft()
        return record


def new_workout_id() -> str:
    """Short random id for a new workout record."""
    return uuid.uuid4().hex[:8]


def _history_sort_key(workout: CompletedWorkout) -> tuple[str, str]:
    return (workout.date, workout.completed_at or "")


def get_default_history_path() -> Path:
    """Default history file: ~/.circuit-planner/history.jsonl."""
    return Path.home() / ".circuit-planner" / "history.jsonl"
