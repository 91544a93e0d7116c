"""
Column transitions.

Moving a task between columns can touch its source document twice: an
interval edit when the task enters or leaves the clock column, then the
status symbol rewrite. Both go through the document mutation queue as
separate actions on the same path, interval edit first, so they are
serialized with each other and with any other move on that document.

Every queued action re-reads the document and re-locates the task; if
the task line is gone the action is skipped with a warning and nothing
is raised.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any

from clock_kanban.core.clock.annotator import close_interval, open_interval
from clock_kanban.core.clock.command import ClockCommand, ClockOperation
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.documents.queue import DocumentMutationQueue
from clock_kanban.core.documents.storage import DocumentStorage, join_lines, split_lines
from clock_kanban.core.notices import Notices
from clock_kanban.core.tasks.locator import locate
from clock_kanban.core.tasks.models import Task
from clock_kanban.core.tasks.rewrite import rewrite_status
from clock_kanban.core.tasks.status import column_to_symbol

logger = logging.getLogger(__name__)

LineEdit = Callable[[list[str], int], list[str]]


@dataclass
class TransitionResult:
    """What a move did to the task's document."""

    task_id: str
    source: str
    target: str
    skipped: bool = False
    """True when source and target are the same column."""

    interval_changed: bool = False
    symbol_changed: bool = False
    operations: list[str] = field(default_factory=list)
    """Document edits that were written, in order ("clock-in", "status", ...)."""


class TransitionController:
    """
    Applies column moves to tasks and their documents.

    Example:
        >>> controller = TransitionController(config, storage, DocumentMutationQueue())
        >>> result = await controller.move(task, "TODO", "Working")
        >>> result.operations
        ['clock-in', 'status']
    """

    def __init__(
        self,
        config: BoardConfig,
        storage: DocumentStorage,
        queue: DocumentMutationQueue | None = None,
        clock_command: ClockCommand | None = None,
        notices: Notices | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.storage = storage
        self.queue = queue or DocumentMutationQueue()
        self.clock_command = clock_command
        self.notices = notices or Notices(debug_messages=config.debug_messages)
        self._now = now or datetime.now
        self._background: set[asyncio.Task[Any]] = set()

    # -------------------- document actions --------------------

    async def _edit_document(self, task: Task, label: str, edit: LineEdit) -> bool:
        path = task.source_path
        if self.storage.resolve(path) is None:
            logger.warning(f"Skipping {label} for '{task.short_description()}': {path} not found")
            self.notices.warning(f"Source file not found: {path}")
            return False

        lines = split_lines(await self.storage.read(path))
        index = locate(lines, task.description, task.line_number, self.config.task_pattern)
        if index is None:
            logger.warning(
                f"Skipping {label}: task '{task.short_description()}' no longer found in {path}"
            )
            return False
        task.line_number = index

        updated = edit(lines, index)
        if updated == lines:
            logger.debug(f"{label} left {path} unchanged")
            return False

        await self.storage.write(path, join_lines(updated))
        logger.debug(f"Applied {label} to '{task.short_description()}' in {path}")
        return True

    def _enqueue_edit(self, task: Task, label: str, edit: LineEdit) -> "asyncio.Task[Any]":
        return self.queue.enqueue(task.source_path, lambda: self._edit_document(task, label, edit))

    # -------------------- clock operations --------------------

    def _uses_command(self) -> bool:
        return self.config.use_clock_command and self.clock_command is not None

    async def _run_clock_command(self, operation: ClockOperation, task: Task) -> None:
        command = self.clock_command
        if command is None:
            return
        try:
            result = await command.run(operation, task)
        except Exception as e:
            logger.exception(f"{operation} command raised for task {task.id}")
            self.notices.error(f"Failed to {operation.replace('-', ' ')}: {e}")
            return
        if result.success:
            self.notices.debug(f"{operation}: {task.short_description()}")
        else:
            logger.warning(f"{operation} command failed for task {task.id}: {result.error}")
            self.notices.error(f"Failed to {operation.replace('-', ' ')}: {result.error}")

    def _start_clock(
        self, operation: ClockOperation, task: Task, moment: datetime
    ) -> "asyncio.Task[Any] | None":
        """Queue the interval edit, or fire the external command. Returns the queued edit."""
        if self._uses_command():
            background = asyncio.ensure_future(self._run_clock_command(operation, task))
            self._background.add(background)
            background.add_done_callback(self._background.discard)
            return None

        timestamp = moment.strftime(self.config.clock_timestamp_format)
        interval_edit = open_interval if operation == "clock-in" else close_interval
        edit: LineEdit = partial(interval_edit, timestamp=timestamp)
        self.notices.debug(f"{operation}: {task.short_description()}")
        return self._enqueue_edit(task, operation, edit)

    async def clock_in(self, task: Task) -> bool:
        """Open an interval on a task without moving it. Returns True if text changed."""
        moment = self._now()
        completion = self._start_clock("clock-in", task, moment)
        task.is_clocked_in = True
        task.start_time = moment.strftime(self.config.time_format)
        return bool(await completion) if completion is not None else False

    async def clock_out(self, task: Task) -> bool:
        """Close the open interval on a task without moving it. Returns True if text changed."""
        moment = self._now()
        completion = self._start_clock("clock-out", task, moment)
        task.is_clocked_in = False
        task.end_time = moment.strftime(self.config.time_format)
        return bool(await completion) if completion is not None else False

    # -------------------- transitions --------------------

    async def move(self, task: Task, source: str, target: str) -> TransitionResult:
        """
        Move a task from `source` to `target` and update its document.

        Args:
            task: Task to move; mutated in place
            source: Column the task is leaving
            target: Column the task is entering

        Returns:
            TransitionResult describing which edits were written
        """
        result = TransitionResult(task_id=task.id, source=source, target=target)
        if source == target:
            result.skipped = True
            return result

        config = self.config
        clock_column = config.clock_column
        moment = self._now()
        queued: list[tuple[str, asyncio.Task[Any]]] = []

        if source == clock_column and target != clock_column and config.auto_clock:
            completion = self._start_clock("clock-out", task, moment)
            if completion is not None:
                queued.append(("clock-out", completion))
            task.is_clocked_in = False
            task.end_time = moment.strftime(config.time_format)

        if target == clock_column and source != clock_column and config.auto_clock:
            completion = self._start_clock("clock-in", task, moment)
            if completion is not None:
                queued.append(("clock-in", completion))
            task.is_clocked_in = True
            task.start_time = moment.strftime(config.time_format)

        task.column = target

        symbol = column_to_symbol(target, config)
        pattern = config.task_pattern
        queued.append(
            (
                "status",
                self._enqueue_edit(
                    task, "status", partial(rewrite_status, symbol=symbol, task_pattern=pattern)
                ),
            )
        )

        for label, completion in queued:
            if not await completion:
                continue
            result.operations.append(label)
            if label == "status":
                result.symbol_changed = True
            else:
                result.interval_changed = True

        self.notices.info(f'Moved "{task.short_description(30)}" to {target}')
        return result

    async def wait_background(self) -> None:
        """Wait for fire-and-forget clock commands (used on shutdown and in tests)."""
        if self._background:
            await asyncio.wait(list(self._background))
