"""Command-line interface for Dungeon Arena."""

import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dungeon_arena.config import settings
from dungeon_arena.engine.generate import create_blank_level, create_demo_level
from dungeon_arena.engine.reducer import create_game, execute_actions
from dungeon_arena.engine.snapshot import game_state_to_ascii, state_summary
from dungeon_arena.engine.types import ActionSource, DoorOpenMode, GameState, Level
from dungeon_arena.logging_config import configure_logging
from dungeon_arena.storage.db import Database
from dungeon_arena.storage.levels import export_level_json, import_level_json
from dungeon_arena.storage.logger import AttemptLogger, AttemptReplay

app = typer.Typer()
levels_app = typer.Typer(help="Manage the saved level library.")
app.add_typer(levels_app, name="levels")
console = Console()


def _read_level(path: Path) -> Level:
    return import_level_json(
        path.read_text(encoding="utf-8"),
        default_max_turns=settings.default_max_turns,
        default_objective=settings.default_objective,
    )


def _print_state(state: GameState) -> None:
    console.print(game_state_to_ascii(state), markup=False, highlight=False, soft_wrap=True)
    console.print(state_summary(state), markup=False, highlight=False)


def _write_or_print(text: str, out: Optional[Path]) -> None:
    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote [bold]{out}[/bold]")
    else:
        console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def show(
    level_file: Path = typer.Argument(..., help="Level JSON file"),
    door_mode: DoorOpenMode = typer.Option(settings.door_open_mode, help="How doors are opened"),
):
    """Print a level's objective and starting snapshot."""
    try:
        level = _read_level(level_file)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    state = create_game(level, door_mode=door_mode, min_turn_budget=settings.min_turn_budget)
    console.print(f"[bold blue]{level.name}[/bold blue] - {level.objective}")
    _print_state(state)


@app.command()
def play(
    level_file: Path = typer.Argument(..., help="Level JSON file"),
    moves: str = typer.Option(..., help="Actions separated by spaces or commas, e.g. 'R R I R'"),
    door_mode: DoorOpenMode = typer.Option(settings.door_open_mode, help="How doors are opened"),
    source: ActionSource = typer.Option(ActionSource.HUMAN, help="Who issued the moves"),
    record: bool = typer.Option(False, help="Log the attempt to the database"),
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """Run a batch of moves against a level."""
    try:
        level = _read_level(level_file)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    actions = [token for token in re.split(r"[\s,]+", moves.strip()) if token]
    state = create_game(level, door_mode=door_mode, min_turn_budget=settings.min_turn_budget)
    results = execute_actions(state, actions, source)

    for action, result in zip(actions, results):
        marker = "[green]ok[/green]" if result.success else "[red]fail[/red]"
        console.print(f"T{result.new_state.turn:>3} {action:<9} {marker} {result.message}")
    if len(results) < len(actions):
        console.print(f"[yellow]{len(actions) - len(results)} queued action(s) skipped: game over[/yellow]")

    final = results[-1].new_state if results else state
    _print_state(final)

    if record:
        attempt_logger = AttemptLogger(db_path=db_path)
        attempt_id = attempt_logger.start_attempt(level, door_mode, source)
        attempt_logger.log_results(actions, results)
        console.print(f"Recorded attempt [bold]{attempt_id}[/bold]")


@app.command()
def replay(
    attempt_id: str = typer.Argument(..., help="Attempt ID to replay"),
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """Replay a previously recorded attempt."""
    console.print(f"[bold blue]Dungeon Arena[/bold blue] - Replaying attempt {attempt_id}...")
    try:
        state = AttemptReplay(db_path=db_path).replay(attempt_id)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _print_state(state)


@levels_app.command("import")
def import_level(
    level_file: Path = typer.Argument(..., help="Level JSON file"),
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """Save a level file into the library."""
    try:
        level = _read_level(level_file)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    Database(db_path).save_level(level)
    console.print(f"Saved level [bold]{level.id}[/bold] ({level.name})")


@levels_app.command("export")
def export_level(
    level_id: str = typer.Argument(..., help="Saved level ID"),
    out: Optional[Path] = typer.Option(None, help="Write to this file instead of stdout"),
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """Export a saved level as JSON."""
    level = Database(db_path).load_level(level_id)
    if level is None:
        console.print(f"[red]Error:[/red] Level {level_id} not found")
        raise typer.Exit(1)
    _write_or_print(export_level_json(level), out)


@levels_app.command("list")
def list_levels(
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """List saved levels."""
    for level in Database(db_path).list_levels():
        size = level.grid_size
        console.print(f"{level.id}  {level.name}  {size.width}x{size.height}  maxTurns={level.max_turns}", markup=False)


@levels_app.command("delete")
def delete_level(
    level_id: str = typer.Argument(..., help="Saved level ID"),
    db_path: str = typer.Option(settings.db_path, help="SQLite database path"),
):
    """Delete a saved level."""
    if not Database(db_path).delete_level(level_id):
        console.print(f"[red]Error:[/red] Level {level_id} not found")
        raise typer.Exit(1)
    console.print(f"Deleted level [bold]{level_id}[/bold]")


@levels_app.command("new")
def new_level(
    name: str = typer.Argument(..., help="Level name"),
    width: int = typer.Option(10, min=3, help="Grid width"),
    height: int = typer.Option(8, min=3, help="Grid height"),
    out: Optional[Path] = typer.Option(None, help="Write to this file instead of stdout"),
):
    """Create a blank walled level."""
    _write_or_print(export_level_json(create_blank_level(width, height, name=name)), out)


@levels_app.command("demo")
def demo_level(
    out: Optional[Path] = typer.Option(None, help="Write to this file instead of stdout"),
):
    """Emit the built-in demo level."""
    _write_or_print(export_level_json(create_demo_level()), out)


@app.callback()
def callback():
    """Dungeon Arena: deterministic dungeon puzzles for evaluating planners."""
    configure_logging(settings.log_level)


if __name__ == "__main__":
    app()
