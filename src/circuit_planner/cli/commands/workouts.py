"""Workout commands: generate, show-draft, swap, commit, show-plan, catalog."""

import json
import random
from typing import Annotated, Optional

import typer

from ...core.catalog import default_exercises, exercise_to_dict
from ...core.config import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES
from ...core.config_loader import load_user_config
from ...core.generator import generate_workout
from ...core.models import CATEGORIES, EQUIPMENT, InvalidOptionsError, WorkoutGenerationOptions
from ...core.recommender import recommend_categories
from ...core.substitution import substitute_exercise
from ...io.serializers import ValidationError, records_to_workout
from .. import views
from ..app import HistoryPathOption, app, get_catalog, get_store


def _rng(seed: int | None) -> random.Random:
    return random.Random(seed) if seed is not None else random.Random()


@app.command("generate")
def generate(
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", "-d", help="Total duration in minutes (15-90 typical)"),
    ] = None,
    difficulty: Annotated[
        Optional[str],
        typer.Option("--difficulty", "-l", help="beginner | intermediate | advanced"),
    ] = None,
    categories: Annotated[
        Optional[list[str]],
        typer.Option("--category", "-c", help="Target category (repeatable), e.g. -c upper_push -c core"),
    ] = None,
    workout_type: Annotated[
        Optional[str],
        typer.Option("--type", "-t", help="Workout location: home | gym"),
    ] = None,
    equipment: Annotated[
        Optional[list[str]],
        typer.Option("--equipment", "-e", help="Available equipment (repeatable)"),
    ] = None,
    no_warmup: Annotated[
        bool,
        typer.Option("--no-warmup", help="Skip the warmup block"),
    ] = False,
    no_cooldown: Annotated[
        bool,
        typer.Option("--no-cooldown", help="Skip the cooldown block"),
    ] = False,
    recommend: Annotated[
        bool,
        typer.Option("--recommend", "-r", help="Keep only recovered categories (all recovered ones when no -c is given)"),
    ] = False,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for a reproducible workout"),
    ] = None,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Generate a workout and keep it as the draft under review.
    """
    settings = load_user_config()["generation"]
    store = get_store(history_path)

    if recommend:
        try:
            history = store.load_history() if store.exists() else []
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        recommended = recommend_categories(
            history, recovery_times=load_user_config()["recovery_times"]
        )
        if not categories:
            categories = recommended
        else:
            ready = [c for c in categories if c in recommended]
            if ready:
                categories = ready
            else:
                views.print_warning("No selected category is recovered; keeping all.")
        views.print_info(
            "Categories: " + ", ".join(views.format_category(c) for c in categories)
        )

    options = WorkoutGenerationOptions(
        duration_minutes=duration if duration is not None else settings["default_duration_minutes"],
        difficulty=difficulty or settings["default_difficulty"],
        categories=list(categories or []),
        workout_type=workout_type or settings["default_workout_type"],
        available_equipment=list(equipment or settings["default_equipment"]),
        include_warmup=not no_warmup,
        include_cooldown=not no_cooldown,
    )

    if not MIN_DURATION_MINUTES <= options.duration_minutes <= MAX_DURATION_MINUTES:
        views.print_warning(
            f"{options.duration_minutes} min is outside the usual "
            f"{MIN_DURATION_MINUTES}-{MAX_DURATION_MINUTES} min range."
        )
    unknown = [e for e in options.available_equipment if e not in EQUIPMENT]
    if unknown:
        views.print_warning(f"Unknown equipment: {', '.join(unknown)}")

    try:
        catalog = get_catalog()
        workout = generate_workout(default_exercises(catalog), options, rng=_rng(seed))
    except InvalidOptionsError as e:
        views.print_error(str(e))
        if not options.categories:
            views.print_info(f"Valid categories: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)

    store.save_draft(workout, options)
    views.print_workout(workout)
    views.print_info("Use 'swap PHASE N' to replace an exercise, 'commit' to save it.")


@app.command("show-draft")
def show_draft(history_path: HistoryPathOption = None) -> None:
    """
    Show the workout currently under review.
    """
    store = get_store(history_path)
    try:
        draft = store.load_draft(get_catalog())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if draft is None:
        views.print_info("No workout under review. Run 'generate' first.")
        return
    views.print_workout(draft[0])


@app.command("swap")
def swap(
    phase: Annotated[
        str,
        typer.Argument(help="warmup | main_work | cooldown"),
    ],
    position: Annotated[
        int,
        typer.Argument(help="Exercise # within the phase (see 'show-draft')"),
    ],
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for a reproducible pick"),
    ] = None,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Replace one exercise of the draft with a compatible alternative.
    """
    store = get_store(history_path)
    catalog = get_catalog()
    try:
        draft = store.load_draft(catalog)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if draft is None:
        views.print_error("No workout under review. Run 'generate' first.")
        raise typer.Exit(1)
    workout, options = draft

    try:
        result = substitute_exercise(
            workout, phase, position - 1, catalog, options, rng=_rng(seed)
        )
    except (ValueError, IndexError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not result.found:
        views.print_warning(
            f"No alternative exercises found for {views.format_category(result.replaced.exercise.category)}."
        )
        return

    store.save_draft(result.workout, options)
    views.print_success(
        f"Swapped {result.replaced.exercise.name} → {result.replacement.exercise.name}"
    )
    views.print_workout(result.workout)


@app.command("commit")
def commit(
    history_path: HistoryPathOption = None,
) -> None:
    """
    Save the draft as a completed workout and store its plan.
    """
    store = get_store(history_path)
    if not store.exists():
        store.init()
    try:
        record = store.commit_draft(get_catalog())
    except FileNotFoundError:
        views.print_error("No workout under review. Run 'generate' first.")
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Saved workout {record.workout_id}: {record.name}")


@app.command("show-plan")
def show_plan(
    workout_id: Annotated[
        str,
        typer.Argument(help="Workout ID of a committed workout (see show-history)"),
    ],
    history_path: HistoryPathOption = None,
) -> None:
    """
    Show the exercises of a committed workout.
    """
    store = get_store(history_path)
    try:
        plans = store.load_plans()
        plan = next((p for p in plans if p.get("workout_id") == workout_id), None)
        if plan is None:
            views.print_error(f"No committed plan for workout {workout_id}")
            raise typer.Exit(1)
        workout = records_to_workout(
            plan.get("exercises", []),
            get_catalog(),
            name=str(plan.get("name", "")),
            workout_type=str(plan.get("type", "")),
            total_duration_minutes=int(plan.get("duration_minutes", 0)),
        )
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_workout(workout)


@app.command("catalog")
def catalog(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only this category"),
    ] = None,
    difficulty: Annotated[
        Optional[str],
        typer.Option("--difficulty", "-l", help="Only this difficulty"),
    ] = None,
    all_exercises: Annotated[
        bool,
        typer.Option("--all", "-a", help="Include non-default exercises"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    List exercises in the catalog.
    """
    exercises = get_catalog()
    if not all_exercises:
        exercises = default_exercises(exercises)
    if category:
        exercises = [e for e in exercises if e.category == category]
    if difficulty:
        exercises = [e for e in exercises if e.difficulty == difficulty]

    if json_out:
        print(json.dumps([exercise_to_dict(e) for e in exercises], indent=2))
        return
    if not exercises:
        views.print_info("No exercises match.")
        return
    views.console.print(views.format_catalog_table(exercises))
