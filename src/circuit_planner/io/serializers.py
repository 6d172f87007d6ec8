"""
JSON serialization for workout data models.

Handles conversion between dataclasses and JSON-compatible dicts, and the
flat per-exercise records written when a generated workout is committed.
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.catalog import get_exercise
from ..core.models import (
    DIFFICULTIES,
    PHASES,
    WORKOUT_TYPES,
    CompletedWorkout,
    Exercise,
    GeneratedWorkout,
    GeneratedWorkoutExercise,
    WorkoutGenerationOptions,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_timestamp(value: str) -> str:
    """
    Validate an ISO 8601 timestamp (a trailing ``Z`` is accepted).

    Raises:
        ValidationError: If the timestamp cannot be parsed
    """
    if not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp: {value}") from e
    return value


def validate_phase(phase: str) -> str:
    """
    Validate phase name.

    Raises:
        ValidationError: If phase is not warmup, main_work or cooldown
    """
    if phase not in PHASES:
        raise ValidationError(f"Invalid phase: {phase}. Must be one of {PHASES}")
    return phase


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


# ---------------------------------------------------------------------------
# Completed workouts (history)
# ---------------------------------------------------------------------------


def completed_workout_to_dict(workout: CompletedWorkout) -> dict[str, Any]:
    """Convert CompletedWorkout to JSON-compatible dict."""
    d: dict[str, Any] = {
        "id": workout.workout_id,
        "name": workout.name,
        "type": workout.workout_type,
        "duration_minutes": workout.duration_minutes,
        "date": workout.date,
        "completed_at": workout.completed_at,
    }
    if workout.notes:
        d["notes"] = workout.notes
    return d


def dict_to_completed_workout(data: dict[str, Any]) -> CompletedWorkout:
    """
    Convert dict to CompletedWorkout.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        workout_id = str(data["id"])
        duration = int(data["duration_minutes"])
        date = str(data["date"])
    except KeyError as e:
        raise ValidationError(f"Workout record missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid duration_minutes: {data['duration_minutes']!r}") from e

    validate_date(date)
    validate_non_negative(duration, "duration_minutes")
    completed_at = data.get("completed_at")
    if completed_at is not None:
        validate_timestamp(completed_at)

    try:
        return CompletedWorkout(
            workout_id=workout_id,
            name=str(data.get("name", "")),
            workout_type=str(data.get("type", "")),
            duration_minutes=int(duration),
            date=date,
            completed_at=completed_at,
            notes=data.get("notes"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def completed_workout_to_json_line(workout: CompletedWorkout) -> str:
    """Convert CompletedWorkout to a single JSON line (no trailing newline)."""
    return json.dumps(completed_workout_to_dict(workout), separators=(",", ":"))


def json_line_to_completed_workout(line: str) -> CompletedWorkout:
    """
    Parse one JSONL line into a CompletedWorkout.

    Raises:
        ValidationError: If the line is not valid JSON or data is invalid
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Workout record must be a JSON object")
    return dict_to_completed_workout(data)


# ---------------------------------------------------------------------------
# Generated workouts (draft under review)
# ---------------------------------------------------------------------------


def generated_exercise_to_dict(entry: GeneratedWorkoutExercise) -> dict[str, Any]:
    """Convert one prescribed slot to a dict; the exercise is stored by id."""
    return {
        "exercise_id": entry.exercise.exercise_id,
        "sets": entry.sets,
        "target_reps": entry.target_reps,
        "target_duration_seconds": entry.target_duration_seconds,
        "rest_seconds": entry.rest_seconds,
        "order_index": entry.order_index,
    }


def dict_to_generated_exercise(
    data: dict[str, Any],
    catalog: list[Exercise],
) -> GeneratedWorkoutExercise:
    """
    Convert dict to GeneratedWorkoutExercise, resolving the exercise id.

    Raises:
        ValidationError: If data is invalid or the exercise is unknown
    """
    try:
        exercise = get_exercise(catalog, str(data["exercise_id"]))
        sets = int(data["sets"])
        rest = int(data["rest_seconds"])
        order_index = int(data["order_index"])
    except KeyError as e:
        raise ValidationError(f"Workout exercise missing field: {e.args[0]}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e

    validate_positive(sets, "sets")
    validate_non_negative(rest, "rest_seconds")
    validate_non_negative(order_index, "order_index")

    reps = data.get("target_reps")
    duration = data.get("target_duration_seconds")
    return GeneratedWorkoutExercise(
        exercise=exercise,
        sets=sets,
        target_reps=int(reps) if reps is not None else None,
        target_duration_seconds=int(duration) if duration is not None else None,
        rest_seconds=rest,
        order_index=order_index,
    )


def generated_workout_to_dict(workout: GeneratedWorkout) -> dict[str, Any]:
    """Convert GeneratedWorkout to JSON-compatible dict."""
    d: dict[str, Any] = {
        "name": workout.name,
        "type": workout.workout_type,
        "total_duration_minutes": workout.total_duration_minutes,
    }
    for phase in PHASES:
        d[phase] = [generated_exercise_to_dict(e) for e in workout.phase(phase)]
    return d


def dict_to_generated_workout(
    data: dict[str, Any],
    catalog: list[Exercise],
) -> GeneratedWorkout:
    """
    Convert dict to GeneratedWorkout.

    Raises:
        ValidationError: If data is invalid
    """
    workout_type = data.get("type")
    if workout_type not in WORKOUT_TYPES:
        raise ValidationError(f"Invalid workout type: {workout_type}")

    phases = {
        phase: [dict_to_generated_exercise(e, catalog) for e in data.get(phase, [])]
        for phase in PHASES
    }
    return GeneratedWorkout(
        name=str(data.get("name", "")),
        workout_type=workout_type,
        total_duration_minutes=int(data.get("total_duration_minutes", 0)),
        **phases,
    )


def options_to_dict(options: WorkoutGenerationOptions) -> dict[str, Any]:
    """Convert WorkoutGenerationOptions to JSON-compatible dict."""
    return {
        "duration_minutes": options.duration_minutes,
        "difficulty": options.difficulty,
        "categories": list(options.categories),
        "workout_type": options.workout_type,
        "available_equipment": list(options.available_equipment),
        "include_warmup": options.include_warmup,
        "include_cooldown": options.include_cooldown,
    }


def dict_to_options(data: dict[str, Any]) -> WorkoutGenerationOptions:
    """
    Convert dict to WorkoutGenerationOptions.

    Raises:
        ValidationError: If data is invalid
    """
    difficulty = data.get("difficulty")
    if difficulty not in DIFFICULTIES:
        raise ValidationError(f"Invalid difficulty: {difficulty}")
    try:
        return WorkoutGenerationOptions(
            duration_minutes=int(data["duration_minutes"]),
            difficulty=difficulty,
            categories=list(data["categories"]),
            workout_type=data["workout_type"],
            available_equipment=list(data["available_equipment"]),
            include_warmup=bool(data.get("include_warmup", True)),
            include_cooldown=bool(data.get("include_cooldown", True)),
        )
    except KeyError as e:
        raise ValidationError(f"Options missing field: {e.args[0]}") from e


def workout_to_records(workout: GeneratedWorkout) -> list[dict[str, Any]]:
    """
    Flatten a generated workout into one record per exercise.

    Each record carries the phase tag alongside the prescription, in phase
    order, ready to be stored as child rows of a workout record.
    """
    records: list[dict[str, Any]] = []
    for phase in PHASES:
        for entry in workout.phase(phase):
            record = generated_exercise_to_dict(entry)
            record["phase"] = phase
            records.append(record)
    return records


def records_to_workout(
    records: list[dict[str, Any]],
    catalog: list[Exercise],
    name: str,
    workout_type: str,
    total_duration_minutes: int,
) -> GeneratedWorkout:
    """
    Rebuild a GeneratedWorkout from flat per-exercise records.

    Entries are grouped by their phase tag and ordered by order_index.

    Raises:
        ValidationError: If a record is invalid
    """
    phases: dict[str, list[GeneratedWorkoutExercise]] = {p: [] for p in PHASES}
    for record in records:
        phase = validate_phase(record.get("phase", ""))
        phases[phase].append(dict_to_generated_exercise(record, catalog))
    for entries in phases.values():
        entries.sort(key=lambda e: e.order_index)

    if workout_type not in WORKOUT_TYPES:
        raise ValidationError(f"Invalid workout type: {workout_type}")
    return GeneratedWorkout(
        name=name,
        workout_type=workout_type,  # type: ignore[arg-type]
        total_duration_minutes=total_duration_minutes,
        **phases,
    )
