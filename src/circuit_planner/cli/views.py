"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, history and recovery.
"""

from rich.console import Console
from rich.table import Table

from ..core.generator import estimate_workout_seconds
from ..core.models import PHASES, CompletedWorkout, Exercise, GeneratedWorkout, GeneratedWorkoutExercise, MuscleRecoveryStatus
from ..core.recovery import fatigued_muscles, recovered_muscles, recovery_message

console = Console()

PHASE_TITLES = {
    "warmup": "Warmup",
    "main_work": "Main work",
    "cooldown": "Cooldown",
}


def format_duration(seconds: int) -> str:
    """
    Format seconds as a short human-readable duration.

    e.g. 65 -> "1m 5s", 3661 -> "1h 1m", 42 -> "42s"
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_category(category: str) -> str:
    """upper_push -> Upper Push"""
    return category.replace("_", " ").title()


def _fmt_target(entry: GeneratedWorkoutExercise) -> str:
    if entry.target_reps:
        return f"{entry.target_reps} reps"
    if entry.target_duration_seconds:
        return f"{entry.target_duration_seconds}s"
    return "-"


def format_workout_table(workout: GeneratedWorkout) -> Table:
    """
    Create a Rich table for a generated workout, one section per phase.

    The # column is the 1-based position within the phase (used by 'swap').
    """
    table = Table(title=workout.name)

    table.add_column("Phase", style="magenta")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Sets", justify="right")
    table.add_column("Target", justify="right", style="bold")
    table.add_column("Rest", justify="right")

    for phase in PHASES:
        entries = workout.phase(phase)
        for i, entry in enumerate(entries, 1):
            table.add_row(
                PHASE_TITLES[phase] if i == 1 else "",
                str(i),
                entry.exercise.name,
                format_category(entry.exercise.category),
                str(entry.sets),
                _fmt_target(entry),
                f"{entry.rest_seconds}s",
            )
        if entries and phase != PHASES[-1]:
            table.add_section()

    return table


def print_workout(workout: GeneratedWorkout) -> None:
    """Print a generated workout with its duration summary."""
    if not workout.all_exercises():
        print_warning("The workout is empty: no eligible exercises for these settings.")
        return

    console.print(format_workout_table(workout))
    estimated = estimate_workout_seconds(workout)
    console.print(
        f"Type: [bold]{workout.workout_type}[/bold]   "
        f"Target: {workout.total_duration_minutes} min   "
        f"Estimated work: {format_duration(estimated)}"
    )
    if not workout.main_work:
        print_warning("No main-work exercises matched the selected categories.")


def format_history_table(workouts: list[CompletedWorkout]) -> Table:
    """Create a Rich table displaying workout history."""
    table = Table(title="Workout History")

    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Name")
    table.add_column("Type", style="magenta")
    table.add_column("Min", justify="right")
    table.add_column("Completed", style="green")

    for workout in workouts:
        table.add_row(
            workout.workout_id,
            workout.date,
            workout.name,
            workout.workout_type,
            str(workout.duration_minutes),
            workout.completed_at or "-",
        )

    return table


def print_history(workouts: list[CompletedWorkout]) -> None:
    """Print workout history to console."""
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(workouts))


def _recovery_bar(percent: float, width: int = 10) -> str:
    filled = int(percent / 100 * width)
    return "█" * filled + "░" * (width - filled)


def format_recovery_table(statuses: list[MuscleRecoveryStatus]) -> Table:
    """Create a Rich table of muscle recovery statuses."""
    table = Table(title="Muscle Recovery")

    table.add_column("Muscle", style="cyan")
    table.add_column("Recovered", justify="right")
    table.add_column("", width=10)
    table.add_column("Status")

    for status in statuses:
        style = "green" if status.is_recovered else "yellow"
        table.add_row(
            status.muscle.replace("_", " "),
            f"{status.percent_recovered:.0f}%",
            _recovery_bar(status.percent_recovered),
            f"[{style}]{recovery_message(status)}[/{style}]",
        )

    return table


def print_recovery(statuses: list[MuscleRecoveryStatus], fatigued_only: bool = False) -> None:
    """Print recovery statuses (optionally only muscles still recovering)."""
    shown = fatigued_muscles(statuses) if fatigued_only else statuses
    if not shown:
        print_success("All muscle groups are recovered.")
        return
    console.print(format_recovery_table(shown))
    console.print(f"{len(recovered_muscles(statuses))} of {len(statuses)} muscle groups ready")


def format_catalog_table(exercises: list[Exercise]) -> Table:
    """Create a Rich table listing catalog exercises."""
    table = Table(title="Exercise Catalog")

    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Level")
    table.add_column("Where")
    table.add_column("Equipment")
    table.add_column("Default", justify="right")

    for exercise in exercises:
        if exercise.is_timed:
            default = f"{exercise.default_sets}x{exercise.default_duration_seconds}s"
        else:
            default = f"{exercise.default_sets}x{exercise.default_reps}"
        table.add_row(
            exercise.exercise_id,
            exercise.name,
            format_category(exercise.category),
            exercise.difficulty,
            exercise.location,
            ", ".join(exercise.equipment),
            default,
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
