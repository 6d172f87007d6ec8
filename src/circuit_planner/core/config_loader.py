"""
YAML → user configuration loader.

Merges optional user settings from ~/.circuit-planner/config.yaml over the
built-in defaults.

Usage:
    from circuit_planner.core.config_loader import load_user_config
    cfg = load_user_config()
    overrides = cfg["recovery_times"]

Recognised sections:
    recovery_times:  {muscle_group: hours}
    generation:      default_duration_minutes, default_difficulty,
                     default_workout_type, default_equipment

If the user file has parse errors or invalid values, a warning is issued
and the offending file or keys are ignored.
"""

from __future__ import annotations

import copy
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from .config import DEFAULT_DURATION_MINUTES
from .models import DIFFICULTIES, MUSCLE_GROUPS, WORKOUT_TYPES

DEFAULT_CONFIG: dict[str, Any] = {
    "recovery_times": {},
    "generation": {
        "default_duration_minutes": DEFAULT_DURATION_MINUTES,
        "default_difficulty": "beginner",
        "default_workout_type": "home",
        "default_equipment": ["bodyweight_only"],
    },
}


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} with a warning on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"circuit-planner: ignoring {path} ({exc})", stacklevel=3)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"circuit-planner: ignoring {path} (not a mapping)", stacklevel=3)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _clean_recovery_times(raw: Any) -> dict[str, float]:
    """Keep only known muscle groups with positive numeric hours."""
    if not isinstance(raw, dict):
        return {}
    cleaned: dict[str, float] = {}
    for muscle, hours in raw.items():
        if muscle not in MUSCLE_GROUPS:
            warnings.warn(f"circuit-planner: unknown muscle group '{muscle}' in config", stacklevel=3)
            continue
        try:
            value = float(hours)
        except (TypeError, ValueError):
            value = 0.0
        if value <= 0:
            warnings.warn(
                f"circuit-planner: recovery time for '{muscle}' must be positive; ignored",
                stacklevel=3,
            )
            continue
        cleaned[muscle] = value
    return cleaned


def _clean_generation(raw: dict[str, Any]) -> dict[str, Any]:
    """Drop generation defaults with invalid values, falling back to built-ins."""
    cleaned = dict(raw)
    builtin = DEFAULT_CONFIG["generation"]
    if cleaned.get("default_difficulty") not in DIFFICULTIES:
        cleaned["default_difficulty"] = builtin["default_difficulty"]
    if cleaned.get("default_workout_type") not in WORKOUT_TYPES:
        cleaned["default_workout_type"] = builtin["default_workout_type"]
    if not isinstance(cleaned.get("default_duration_minutes"), int):
        cleaned["default_duration_minutes"] = builtin["default_duration_minutes"]
    equipment = cleaned.get("default_equipment")
    if not isinstance(equipment, list) or not equipment:
        cleaned["default_equipment"] = list(builtin["default_equipment"])
    return cleaned


def get_user_config_path() -> Path | None:
    """Return ~/.circuit-planner/config.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".circuit-planner" / "config.yaml"
    return p if p.exists() else None


def load_user_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge user configuration.

    Args:
        path: Config file to read (default: ~/.circuit-planner/config.yaml)

    Returns:
        Dict with "recovery_times" and "generation" sections, always present
    """
    if path is None:
        path = get_user_config_path()

    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None and path.exists():
        config = _deep_merge(config, _load_yaml_file(path))

    config["recovery_times"] = _clean_recovery_times(config.get("recovery_times"))
    generation = config.get("generation")
    config["generation"] = _clean_generation(
        generation if isinstance(generation, dict) else DEFAULT_CONFIG["generation"]
    )
    return config
