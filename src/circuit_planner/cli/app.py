"""Shared Typer app object, shared option types, and store/catalog utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.catalog import load_catalog
from ..core.models import Exercise
from ..io.workout_store import WorkoutStore, get_default_history_path

# Shared --history-path option type used across all commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to workout history JSONL file"),
]

app = typer.Typer(
    name="circuit-planner",
    help="Workout generator with muscle-recovery aware category suggestions.",
    no_args_is_help=True,
)


def get_store(history_path: Path | None) -> WorkoutStore:
    """Get workout store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return WorkoutStore(history_path)


def get_catalog() -> list[Exercise]:
    """Load the exercise catalog (bundled + user overrides)."""
    return load_catalog()
