"""zitie CLI: study loop, progress stats and configuration commands."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any

import typer

from zitie.application.clock import SystemClock
from zitie.application.config import AppConfig, resolve_config
from zitie.application.factory import ALGORITHMS, available_algorithms
from zitie.application.scheduler import Scheduler
from zitie.application.stats import summarize
from zitie.domain.constants import DIFFICULTY_NAMES, HOUR
from zitie.domain.errors import ZitieError
from zitie.domain.models import Catalog, ProgressMap, Selection
from zitie.infrastructure.catalog import load_catalog
from zitie.infrastructure.progress_store import JsonProgressStore

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="zitie: character practice with pluggable spaced-repetition schedulers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage zitie configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

RATING_COLORS = {
    1: "red",
    2: "bright_red",
    3: "yellow",
    4: "bright_green",
    5: "green",
}


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for zitie."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve(**overrides: Any) -> AppConfig:
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def _open(config: AppConfig) -> tuple[Catalog, JsonProgressStore, ProgressMap]:
    if config.catalog_path is None:
        raise ZitieError("No catalog configured. Pass --catalog or set ZITIE_CATALOG_PATH.")
    catalog = load_catalog(config.catalog_path)
    store = JsonProgressStore(config.progress_path)
    return catalog, store, store.load()


def _fail(error: Exception) -> None:
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)


def _describe(selection: Selection) -> str:
    tags = []
    if selection.is_new:
        tags.append("new")
    if selection.is_mastery_check:
        tags.append("mastery check")
    suffix = f" [{', '.join(tags)}]" if tags else ""
    item = selection.item
    return f"#{selection.index} {item.phonetic}: {item.definition}{suffix}"


def _ask_rating() -> int | None:
    legend = "  ".join(f"{d}={name}" for d, name in DIFFICULTY_NAMES.items())
    while True:
        answer = typer.prompt(f"Rating ({legend}, q to quit)").strip().lower()
        if answer == "q":
            return None
        if answer.isdigit() and int(answer) in DIFFICULTY_NAMES:
            return int(answer)
        typer.secho("Please enter a number from 1 to 5.", fg="yellow")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def study(
    algorithm: Annotated[
        str | None, typer.Option("--algorithm", "-a", help="Scheduling algorithm.")
    ] = None,
    catalog_path: Annotated[
        Path | None, typer.Option("--catalog", help="Path to the character catalog (JSON).")
    ] = None,
    progress_path: Annotated[
        Path | None, typer.Option("--progress", help="Path to the progress file (JSON).")
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", min=1, help="Stop after this many cards.")
    ] = None,
):
    """[bold green]Study[/bold green] cards picked by the active scheduler."""
    config = _resolve(algorithm=algorithm, catalog_path=catalog_path, progress_path=progress_path)
    try:
        catalog, store, progress = _open(config)
    except ZitieError as e:
        _fail(e)

    scheduler = Scheduler(config.algorithm, overrides=config.algorithm_overrides())
    typer.echo(f"Algorithm: {scheduler.algorithm.name}")

    reviewed = 0
    while limit is None or reviewed < limit:
        selection = scheduler.pick_next(catalog, progress)
        if not selection:
            typer.secho("Nothing to study.", fg="yellow")
            break

        typer.echo("")
        typer.echo(_describe(selection))
        answer = typer.prompt(
            "Press Enter to reveal (q to quit)", default="", show_default=False
        )
        if answer.strip().lower() == "q":
            break
        typer.secho(f"  {selection.item.text}", bold=True)

        rating = _ask_rating()
        if rating is None:
            break

        scheduler.record_outcome(catalog, progress, selection, rating)
        try:
            store.save(progress)
        except ZitieError as e:
            _fail(e)
        typer.secho(DIFFICULTY_NAMES[rating], fg=RATING_COLORS[rating])
        reviewed += 1

    typer.echo(f"Reviewed {reviewed} card(s) this session.")


@app.command("next")
def next_card(
    algorithm: Annotated[
        str | None, typer.Option("--algorithm", "-a", help="Scheduling algorithm.")
    ] = None,
    catalog_path: Annotated[Path | None, typer.Option("--catalog")] = None,
    progress_path: Annotated[Path | None, typer.Option("--progress")] = None,
):
    """Show the card the scheduler would pick next, without recording anything."""
    config = _resolve(algorithm=algorithm, catalog_path=catalog_path, progress_path=progress_path)
    try:
        catalog, _, progress = _open(config)
    except ZitieError as e:
        _fail(e)

    scheduler = Scheduler(config.algorithm, overrides=config.algorithm_overrides())
    selection = scheduler.pick_next(catalog, progress)
    if not selection:
        typer.secho("Nothing to study.", fg="yellow")
        return
    typer.echo(f"{_describe(selection)}  ->  {selection.item.text}")


@app.command()
def stats(
    catalog_path: Annotated[Path | None, typer.Option("--catalog")] = None,
    progress_path: Annotated[Path | None, typer.Option("--progress")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON.")] = False,
):
    """Summarize learning progress."""
    config = _resolve(catalog_path=catalog_path, progress_path=progress_path)
    try:
        catalog, _, progress = _open(config)
    except ZitieError as e:
        _fail(e)

    summary = summarize(catalog, progress, SystemClock().now())

    if as_json:
        typer.echo(json.dumps(asdict(summary), indent=2))
        return

    typer.echo(f"Learned:         {summary.total_learned}/{summary.total_cards}")
    typer.echo(f"Mastered:        {summary.mastered}")
    typer.echo(f"Nearly mastered: {summary.nearly_mastered}")
    typer.echo(f"Due today:       {summary.due_today}")
    typer.echo(f"Reviewed today:  {summary.reviewed_today}")
    levels = ", ".join(f"{k}={v}" for k, v in summary.mastery_levels.items())
    typer.echo(f"Levels:          {levels}")


@app.command()
def algorithms():
    """List the available scheduling algorithms and their defaults."""
    for key, name in available_algorithms():
        config = ALGORITHMS[key].default_config()
        typer.secho(f"{key:<11} {name}", bold=True)
        typer.echo(
            f"    new/day={config.max_new_cards_per_day}"
            f"  max interval={config.max_interval / HOUR:g}h"
            f"  bucket={config.bucket_size}  set={config.set_size}"
        )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
