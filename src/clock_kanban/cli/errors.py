"""
Standardized error handling and exit codes for the Clock Kanban CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for Clock Kanban CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error or configuration that failed validation."""

    USER_ERROR = 2
    """Unknown task or column (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Task not found: inbox.md-4",
        ...     solution="clock-kanban list",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_task_not_found_error(task_id: str) -> None:
    """Print error when a specific task is not on the board."""
    print_error(
        f"Task not found: {task_id}",
        reason="The task ID may be incorrect, or the task is done and hidden",
        solution="clock-kanban list --show-completed  # to see available task ids",
    )


def print_unknown_column_error(column: str, valid_columns: list[str]) -> None:
    """Print error when a move targets a column that is not configured."""
    valid_str = ", ".join(valid_columns)
    print_error(
        f"Unknown column: {column}",
        reason=f"Configured columns are: {valid_str}",
        solution="clock-kanban columns",
    )


def print_invalid_config_error(detail: str) -> None:
    """Print error when the merged configuration fails validation."""
    print_error(
        "Invalid configuration",
        reason=detail,
        solution="Check .clock-kanban.json in the vault and ~/.config/clock-kanban/config.json",
    )


__all__ = [
    "ExitCode",
    "print_error",
    "print_invalid_config_error",
    "print_task_not_found_error",
    "print_unknown_column_error",
]
