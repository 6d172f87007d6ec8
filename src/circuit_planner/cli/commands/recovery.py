"""Recovery commands: recovery, recommend."""

from typing import Annotated

import typer

from ...core.config_loader import load_user_config
from ...core.recommender import categories_from_statuses
from ...core.recovery import estimate_recovery
from ...io.serializers import ValidationError
from .. import views
from ..app import HistoryPathOption, app, get_store


def _statuses(history_path):
    store = get_store(history_path)
    history = []
    if store.exists():
        try:
            history = store.load_history()
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    overrides = load_user_config()["recovery_times"]
    return estimate_recovery(history, recovery_times=overrides)


@app.command("recovery")
def recovery(
    fatigued: Annotated[
        bool,
        typer.Option("--fatigued", "-f", help="Only show muscles still recovering"),
    ] = False,
    history_path: HistoryPathOption = None,
) -> None:
    """
    Show estimated recovery per muscle group.
    """
    views.print_recovery(_statuses(history_path), fatigued_only=fatigued)


@app.command("recommend")
def recommend(history_path: HistoryPathOption = None) -> None:
    """
    Suggest exercise categories to train today.
    """
    categories = categories_from_statuses(_statuses(history_path))
    if not categories:
        views.print_warning("Everything is still recovering; consider a rest day.")
        return
    views.console.print("[bold]Ready to train:[/bold]")
    for category in categories:
        views.console.print(f"  - {views.format_category(category)} ({category})")
