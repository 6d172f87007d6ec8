"""
CLI entry point using Typer.

Provides commands for workout generation and tracking:
- generate / show-draft / swap / commit / show-plan: build, review and revisit a workout
- catalog: list available exercises
- init / log-workout / show-history / delete-workout: workout history
- recovery / recommend: muscle recovery and category suggestions
"""

from .app import app
from .commands import history, recovery, workouts  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
