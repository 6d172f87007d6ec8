"""
YAML → Exercise catalog loader.

Loads the exercise catalog from the bundled ``src/circuit_planner/exercises/``
directory, one file per category (e.g. upper_push.yaml), each holding a
list of records under ``exercises:``.

User overrides: place YAML files in ``~/.circuit-planner/exercises/``.  A
user record whose exercise_id matches a bundled one is deep-merged over it,
so only changed keys need to be listed; any other user record is added to
the catalog.  Invalid records are skipped with a warning.

Usage:
    from circuit_planner.core.catalog import default_exercises, load_catalog
    catalog = load_catalog()
    pool = default_exercises(catalog)
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from .models import Exercise

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "exercise_id",
        "name",
        "category",
        "location",
        "difficulty",
        "equipment",
        "default_sets",
    }
)


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent or a value is invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    equipment = d["equipment"]
    if not isinstance(equipment, list):
        raise ValueError(f"equipment must be a list, got {equipment!r}")

    reps = d.get("default_reps")
    duration = d.get("default_duration_seconds")

    return Exercise(
        exercise_id=str(d["exercise_id"]),
        name=str(d["name"]),
        category=str(d["category"]),  # type: ignore[arg-type]
        location=str(d["location"]),  # type: ignore[arg-type]
        difficulty=str(d["difficulty"]),  # type: ignore[arg-type]
        equipment=tuple(str(e) for e in equipment),
        default_sets=int(d["default_sets"]),
        default_reps=int(reps) if reps is not None else None,
        default_duration_seconds=int(duration) if duration is not None else None,
        muscles_primary=tuple(d.get("muscles_primary") or ()),
        muscles_secondary=tuple(d.get("muscles_secondary") or ()),
        description=str(d.get("description", "")),
        form_cues=tuple(d.get("form_cues") or ()),
        is_default=bool(d.get("is_default", True)),
        progression_id=d.get("progression_id"),
        regression_id=d.get("regression_id"),
    )


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert an Exercise to a YAML/JSON-compatible dict."""
    d: dict[str, Any] = {
        "exercise_id": exercise.exercise_id,
        "name": exercise.name,
        "category": exercise.category,
        "location": exercise.location,
        "difficulty": exercise.difficulty,
        "equipment": list(exercise.equipment),
        "default_sets": exercise.default_sets,
    }
    if exercise.default_reps is not None:
        d["default_reps"] = exercise.default_reps
    if exercise.default_duration_seconds is not None:
        d["default_duration_seconds"] = exercise.default_duration_seconds
    d["muscles_primary"] = list(exercise.muscles_primary)
    d["muscles_secondary"] = list(exercise.muscles_secondary)
    if exercise.description:
        d["description"] = exercise.description
    if exercise.form_cues:
        d["form_cues"] = list(exercise.form_cues)
    d["is_default"] = exercise.is_default
    if exercise.progression_id:
        d["progression_id"] = exercise.progression_id
    if exercise.regression_id:
        d["regression_id"] = exercise.regression_id
    return d


def _load_records(path: Path) -> list[dict]:
    """Load the ``exercises:`` list of one YAML file; [] with a warning on error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"circuit-planner: cannot read {path} ({exc})", stacklevel=3)
        return []
    if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
        warnings.warn(
            f"circuit-planner: {path} has no 'exercises' list; ignored", stacklevel=3
        )
        return []
    return [r for r in data["exercises"] if isinstance(r, dict)]


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # catalog.py lives at src/circuit_planner/core/catalog.py
    candidate = Path(__file__).parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def get_user_exercises_dir() -> Path | None:
    """Return ~/.circuit-planner/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".circuit-planner" / "exercises"
    return p if p.is_dir() else None


def load_catalog(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[Exercise]:
    """
    Load the exercise catalog from bundled and user YAML files.

    Args:
        bundled_dir: Directory of bundled YAML files (default: package data)
        user_dir: Directory of user overrides (default: ~/.circuit-planner/exercises)

    Returns:
        Exercises in file order (bundled first, then user-only records)

    Raises:
        RuntimeError: If no exercise could be loaded at all
    """
    if bundled_dir is None:
        bundled_dir = get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = get_user_exercises_dir()

    raw: dict[str, dict] = {}
    for directory in (bundled_dir, user_dir):
        if directory is None:
            continue
        for path in sorted(directory.glob("*.yaml")):
            for record in _load_records(path):
                key = str(record.get("exercise_id", ""))
                if key in raw:
                    raw[key] = _deep_merge(raw[key], record)
                else:
                    raw[key] = record

    catalog: list[Exercise] = []
    for key, record in raw.items():
        try:
            catalog.append(exercise_from_dict(record))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"circuit-planner: skipping exercise '{key or '?'}': {exc}",
                stacklevel=2,
            )

    if not catalog:
        raise RuntimeError(
            "circuit-planner: no exercises could be loaded. "
            "Check that src/circuit_planner/exercises/*.yaml files are present and valid."
        )
    return catalog


def default_exercises(catalog: list[Exercise]) -> list[Exercise]:
    """Exercises flagged ``is_default`` (the pool used for generation)."""
    return [e for e in catalog if e.is_default]


def get_exercise(catalog: list[Exercise], exercise_id: str) -> Exercise:
    """
    Return the Exercise with the given id.

    Raises:
        ValueError: If exercise_id is not in the catalog
    """
    for exercise in catalog:
        if exercise.exercise_id == exercise_id:
            return exercise
    valid = ", ".join(e.exercise_id for e in catalog)
    raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")


def _linked(catalog: list[Exercise], exercise: Exercise, linked_id: str | None) -> Exercise | None:
    if not linked_id:
        return None
    for candidate in catalog:
        if candidate.exercise_id == linked_id and candidate.category == exercise.category:
            return candidate
    return None


def progression_of(catalog: list[Exercise], exercise: Exercise) -> Exercise | None:
    """Harder variant of the same movement, or None."""
    return _linked(catalog, exercise, exercise.progression_id)


def regression_of(catalog: list[Exercise], exercise: Exercise) -> Exercise | None:
    """Easier variant of the same movement, or None."""
    return _linked(catalog, exercise, exercise.regression_id)
