"""History commands: init, log-workout, show-history, delete-workout."""

import json
from datetime import datetime, timezone
from typing import Annotated, Optional

import typer

from ...core.models import CompletedWorkout
from ...core.recovery import parse_timestamp
from ...io.serializers import ValidationError, completed_workout_to_dict, validate_timestamp
from ...io.workout_store import new_workout_id
from .. import views
from ..app import HistoryPathOption, app, get_store


def _local_timestamp(value: str | None) -> str:
    """ISO timestamp for a workout; values without an offset are local time."""
    if value is None:
        return datetime.now(timezone.utc).isoformat(timespec="seconds")
    validate_timestamp(value)
    moment = parse_timestamp(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.now().astimezone().tzinfo)
    return moment.isoformat()


@app.command("init")
def init(history_path: HistoryPathOption = None) -> None:
    """
    Create the workout history file.
    """
    store = get_store(history_path)
    if store.exists():
        views.print_info(f"History already exists: {store.history_path}")
        return
    store.init()
    views.print_success(f"Created {store.history_path}")


@app.command("log-workout")
def log_workout(
    duration: Annotated[
        int,
        typer.Option("--duration", "-d", help="Workout duration in minutes"),
    ],
    workout_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Workout location: home | gym"),
    ] = "home",
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Workout name"),
    ] = None,
    completed_at: Annotated[
        Optional[str],
        typer.Option("--completed-at", help="ISO timestamp, e.g. 2026-03-01T18:30+01:00; no offset means local time (default: now)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Free-text notes"),
    ] = None,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Log a workout done outside the generator.
    """
    store = get_store(history_path)
    if not store.exists():
        store.init()

    try:
        finished = _local_timestamp(completed_at)
        record = CompletedWorkout(
            workout_id=new_workout_id(),
            name=name or f"{workout_type.title()} workout",
            workout_type=workout_type,
            duration_minutes=duration,
            date=finished[:10],
            completed_at=finished,
            notes=notes,
        )
        store.append_workout(record)
    except (ValidationError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Logged workout {record.workout_id} ({duration} min, {workout_type})")


@app.command("show-history")
def show_history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Only the most recent N workouts"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Display workout history as a table.
    """
    store = get_store(history_path)
    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Run 'init' first.")
        raise typer.Exit(1)

    try:
        workouts = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None and limit > 0:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps([completed_workout_to_dict(w) for w in workouts], indent=2))
        return
    views.print_history(workouts)


@app.command("delete-workout")
def delete_workout(
    workout_id: Annotated[
        str,
        typer.Argument(help="Workout ID (see ID column in show-history)"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Remove a workout from history by its ID.
    """
    store = get_store(history_path)
    try:
        target = store.get_workout(workout_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if target is None:
        views.print_error(f"No workout with ID {workout_id}")
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete {target.date} {target.name}?"):
        views.print_info("Cancelled.")
        return

    store.delete_workout(workout_id)
    views.print_success(f"Deleted workout {workout_id}: {target.name}")
