"""
External time-tracking command integration.

Instead of editing [clock::] tokens, the board can hand clock-in and
clock-out to an external tool (timewarrior, a day planner CLI, ...). The
command is an argv template from configuration:

    "clock_in_command": ["timew", "start", "{description}"]

Placeholders: {description}, {path}, {id}.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.tasks.models import Task

logger = logging.getLogger(__name__)

ClockOperation = Literal["clock-in", "clock-out"]


@dataclass
class ClockCommandResult:
    """Outcome of one external clock command run."""

    success: bool
    task_id: str
    operation: ClockOperation
    exit_code: int | None = None
    error: str | None = None


@runtime_checkable
class ClockCommand(Protocol):
    """An external tool that records clock-in/clock-out."""

    async def run(self, operation: ClockOperation, task: Task) -> ClockCommandResult:
        """
        Record a clock operation for a task.

        Implementations report failure through the result and should not
        raise for ordinary command failures.
        """
        ...


def render_argv(template: list[str], task: Task) -> list[str]:
    """
    Fill placeholders in an argv template.

    Example:
        >>> task = Task(id="a.md-1", description="Buy milk", column="TODO")
        >>> render_argv(["timew", "start", "{description}"], task)
        ['timew', 'start', 'Buy milk']
    """
    values = {"description": task.description, "path": task.source_path, "id": task.id}
    return [part.format_map(values) for part in template]


class ShellClockCommand:
    """
    Runs the configured clock-in / clock-out argv with asyncio subprocesses.

    Example:
        >>> command = ShellClockCommand.from_config(config)
        >>> result = await command.run("clock-in", task)
    """

    def __init__(self, clock_in: list[str], clock_out: list[str]) -> None:
        self.templates: dict[str, list[str]] = {"clock-in": clock_in, "clock-out": clock_out}

    @classmethod
    def from_config(cls, config: BoardConfig) -> "ShellClockCommand | None":
        """Build from config, or None if no command is configured."""
        if not config.clock_in_command and not config.clock_out_command:
            return None
        return cls(list(config.clock_in_command), list(config.clock_out_command))

    async def run(self, operation: ClockOperation, task: Task) -> ClockCommandResult:
        template = self.templates.get(operation) or []
        if not template:
            return ClockCommandResult(
                success=False,
                task_id=task.id,
                operation=operation,
                error=f"No {operation} command configured",
            )

        try:
            argv = render_argv(template, task)
        except (KeyError, IndexError, ValueError) as e:
            return ClockCommandResult(
                success=False,
                task_id=task.id,
                operation=operation,
                error=f"Invalid {operation} command template: {e}",
            )

        logger.debug(f"Running {operation} command: {' '.join(argv)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=os.environ.copy(),
            )
            _, stderr_bytes = await process.communicate()
        except OSError as e:
            return ClockCommandResult(
                success=False, task_id=task.id, operation=operation, error=str(e)
            )

        stderr = stderr_bytes.decode("utf-8", errors="replace").strip() if stderr_bytes else ""
        success = process.returncode == 0
        return ClockCommandResult(
            success=success,
            task_id=task.id,
            operation=operation,
            exit_code=process.returncode,
            error=None if success else (stderr or f"exit code {process.returncode}"),
        )
