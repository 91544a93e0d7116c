"""
Clock Kanban CLI - Main application entry point.

This module sets up the Typer CLI application and its commands. Every
command builds a BoardService over the vault, refreshes it, and acts on
it; document edits are drained before the command exits.
"""

import asyncio
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from clock_kanban import __version__
from clock_kanban.cli.errors import (
    ExitCode,
    print_invalid_config_error,
    print_task_not_found_error,
    print_unknown_column_error,
)
from clock_kanban.cli.render import ConsoleNotifier, render_board, render_columns, render_task_list
from clock_kanban.core.board.service import BoardService
from clock_kanban.core.config import load_config, load_layered_env
from clock_kanban.core.exceptions import TaskNotFoundError, UnknownColumnError
from clock_kanban.core.tasks.models import Task

app = typer.Typer(
    name="clock-kanban",
    help="Kanban board with automatic clock-in/clock-out over markdown tasks",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for CLI commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"clock-kanban {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    vault: Path = typer.Option(
        Path("."),
        "--vault",
        "-V",
        envvar="CLOCK_KANBAN_VAULT",
        help="Directory of markdown documents to build the board from",
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Clock Kanban - a board over the checkbox tasks in your notes.

    Columns map to checkbox symbols (`- [ ]`, `- [/]`, `- [x]`, ...). Moving a
    task into the clock column appends a [clock::start] token below it;
    moving it out closes that token with an end time.

    Examples:
        clock-kanban board                     # Show the board
        clock-kanban move notes.md-4 Working   # Start working (clock in)
        clock-kanban move notes.md-4 Done      # Finish (clock out, mark x)
        clock-kanban clock-out                 # Stop the clock, keep the column
    """
    setup_logging(debug)
    vault = vault.expanduser().resolve()
    # Precedence: OS env > vault .env > user .env
    load_layered_env(vault)
    ctx.obj = {"vault": vault, "debug": debug}


def _build_service(ctx: typer.Context, show_completed: bool = False) -> BoardService:
    vault: Path = ctx.obj["vault"]
    try:
        config = load_config(vault)
    except ValidationError as e:
        print_invalid_config_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if show_completed:
        config = config.model_copy(update={"show_completed_tasks": True})
    return BoardService.for_vault(vault, config, notifier=ConsoleNotifier(console))


async def _load(service: BoardService) -> list[Task]:
    return await service.refresh()


@app.command()
def board(
    ctx: typer.Context,
    show_completed: bool = typer.Option(
        False,
        "--show-completed",
        "-a",
        help="Include tasks marked done",
    ),
) -> None:
    """Show the board, one column per configured status."""
    service = _build_service(ctx, show_completed)
    asyncio.run(_load(service))
    render_board(console, service)


@app.command(name="list")
def list_tasks(
    ctx: typer.Context,
    column: str | None = typer.Option(
        None,
        "--column",
        "-c",
        help="Only show tasks in this column",
    ),
    show_completed: bool = typer.Option(
        False,
        "--show-completed",
        "-a",
        help="Include tasks marked done",
    ),
) -> None:
    """List tasks with their ids (use the id with `move`)."""
    service = _build_service(ctx, show_completed)
    asyncio.run(_load(service))

    if column is not None and service.config.get_column(column) is None:
        print_unknown_column_error(column, service.config.column_names)
        raise typer.Exit(ExitCode.USER_ERROR)

    tasks = service.tasks_in(column) if column is not None else service.tasks
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return
    render_task_list(console, tasks)


async def _move(service: BoardService, task_id: str, column: str) -> None:
    await service.refresh()
    try:
        await service.move_task_to_column(task_id, column)
    finally:
        await service.drain()


@app.command()
def move(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task id (see `clock-kanban list`)"),
    column: str = typer.Argument(..., help="Target column name"),
) -> None:
    """
    Move a task to another column.

    Entering the clock column clocks the task in; leaving it clocks it out.
    The checkbox symbol is rewritten to the target column's symbol.
    """
    service = _build_service(ctx)
    try:
        asyncio.run(_move(service, task_id, column))
    except UnknownColumnError as e:
        print_unknown_column_error(e.column, e.available)
        raise typer.Exit(ExitCode.USER_ERROR)
    except TaskNotFoundError:
        print_task_not_found_error(task_id)
        raise typer.Exit(ExitCode.USER_ERROR)


async def _clock(service: BoardService, task_id: str | None, clock_in: bool) -> Task | None:
    await service.refresh()
    try:
        if clock_in:
            return await service.manual_clock_in(task_id)
        return await service.manual_clock_out(task_id)
    finally:
        await service.drain()


def _run_clock(ctx: typer.Context, task_id: str | None, clock_in: bool) -> None:
    service = _build_service(ctx)
    try:
        task = asyncio.run(_clock(service, task_id, clock_in))
    except TaskNotFoundError:
        print_task_not_found_error(task_id or "")
        raise typer.Exit(ExitCode.USER_ERROR)

    if task is None:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    label = "Clock In" if clock_in else "Clock Out"
    console.print(f"[green]{label}:[/green] {escape(task.short_description())}")


@app.command(name="clock-in")
def clock_in(
    ctx: typer.Context,
    task_id: str | None = typer.Argument(
        None, help="Task id (defaults to the first task in the clock column)"
    ),
) -> None:
    """Open a clock interval on a task without moving it."""
    _run_clock(ctx, task_id, clock_in=True)


@app.command(name="clock-out")
def clock_out(
    ctx: typer.Context,
    task_id: str | None = typer.Argument(
        None, help="Task id (defaults to the first task in the clock column)"
    ),
) -> None:
    """Close the open clock interval on a task without moving it."""
    _run_clock(ctx, task_id, clock_in=False)


@app.command()
def columns(ctx: typer.Context) -> None:
    """Show the configured columns and their checkbox symbols."""
    vault: Path = ctx.obj["vault"]
    try:
        config = load_config(vault)
    except ValidationError as e:
        print_invalid_config_error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    render_columns(console, config)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
