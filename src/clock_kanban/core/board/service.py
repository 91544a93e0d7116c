"""
Board service.

Holds the current task list and routes external triggers (drops, manual
commands, refreshes) to ingestion and the transition controller. It is
what a front-end talks to; it has no rendering of its own.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from clock_kanban.core.board.ingest import ingest
from clock_kanban.core.board.transition import TransitionController, TransitionResult
from clock_kanban.core.clock.command import ClockCommand, ShellClockCommand
from clock_kanban.core.config.loader import load_config
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.documents.queue import DocumentMutationQueue
from clock_kanban.core.documents.storage import DocumentStorage, FileSystemStorage
from clock_kanban.core.exceptions import TaskNotFoundError, UnknownColumnError
from clock_kanban.core.notices import Notices, Notifier
from clock_kanban.core.tasks.models import Task
from clock_kanban.core.tasks.source import TaskSource, get_source

logger = logging.getLogger(__name__)


class BoardService:
    """
    Service owning one board: config, storage, task source and tasks.

    Example:
        >>> board = BoardService.for_vault(Path("~/notes").expanduser())
        >>> await board.refresh()
        >>> await board.move_task_to_column("inbox.md-4", "Working")
    """

    def __init__(
        self,
        config: BoardConfig,
        storage: DocumentStorage,
        source: TaskSource | None,
        queue: DocumentMutationQueue | None = None,
        clock_command: ClockCommand | None = None,
        notifier: Notifier | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.storage = storage
        self.source = source
        self.queue = queue or DocumentMutationQueue()
        self.notices = Notices(notifier, debug_messages=config.debug_messages)
        self.controller = TransitionController(
            config,
            storage,
            self.queue,
            clock_command=clock_command,
            notices=self.notices,
            now=now,
        )
        self.tasks: list[Task] = []

    @classmethod
    def for_vault(
        cls,
        vault: Path,
        config: BoardConfig | None = None,
        notifier: Notifier | None = None,
    ) -> "BoardService":
        """
        Build a service over a directory of markdown documents.

        Args:
            vault: Root directory holding the documents
            config: Board configuration (loaded from the vault if omitted)
            notifier: Where user-visible notices go

        Returns:
            BoardService with filesystem storage and the configured source
        """
        if config is None:
            config = load_config(vault)

        source: TaskSource | None
        try:
            source = get_source(config.source, vault, config)
        except ValueError as e:
            logger.warning(str(e))
            source = None

        return cls(
            config,
            FileSystemStorage(vault),
            source,
            clock_command=ShellClockCommand.from_config(config),
            notifier=notifier,
        )

    # -------------------- loading --------------------

    async def refresh(self) -> list[Task]:
        """
        Rebuild the task list from the task source and live documents.

        A missing or failing source leaves an empty board plus one notice.
        """
        if self.source is None:
            self.notices.warning("Task source not available: no tasks loaded")
            self.tasks = []
            return self.tasks

        try:
            records = self.source.get_tasks()
        except Exception as e:
            logger.exception("Error loading tasks from source")
            self.notices.warning(f"Error loading tasks: {e}")
            self.tasks = []
            return self.tasks

        self.tasks = await ingest(records, self.config, self.storage)
        self.notices.debug("Clock Kanban refreshed")
        return self.tasks

    # -------------------- queries --------------------

    def get_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def tasks_in(self, column: str) -> list[Task]:
        return [task for task in self.tasks if task.column == column]

    def columns(self) -> dict[str, list[Task]]:
        """Tasks grouped by configured column, in board order."""
        grouped: dict[str, list[Task]] = {name: [] for name in self.config.column_names}
        for task in self.tasks:
            if task.column in grouped:
                grouped[task.column].append(task)
        return grouped

    def _require_task(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    # -------------------- triggers --------------------

    async def handle_drop(
        self, task_id: str, source_column: str, target_column: str
    ) -> TransitionResult | None:
        """
        Apply a drag-and-drop gesture.

        Drops onto the same column and drops of unknown tasks are ignored.
        """
        if source_column == target_column:
            return None
        task = self.get_task(task_id)
        if task is None:
            logger.debug(f"Ignoring drop of unknown task {task_id}")
            return None
        return await self.controller.move(task, source_column, target_column)

    async def move_task_to_column(self, task_id: str, column: str) -> TransitionResult:
        """
        Move a task to a column by id.

        Raises:
            TaskNotFoundError: If the task is not on the board
            UnknownColumnError: If the column is not configured
        """
        if self.config.get_column(column) is None:
            raise UnknownColumnError(column, self.config.column_names)
        task = self._require_task(task_id)
        return await self.controller.move(task, task.column, column)

    def _clock_target(self, task_id: str | None) -> Task | None:
        if task_id is not None:
            return self._require_task(task_id)
        working = self.tasks_in(self.config.clock_column)
        if not working:
            self.notices.warning(f"No task in {self.config.clock_column} column")
            return None
        return working[0]

    async def manual_clock_in(self, task_id: str | None = None) -> Task | None:
        """
        Open an interval without moving the task.

        Defaults to the first task in the clock column.

        Raises:
            TaskNotFoundError: If `task_id` is given but not on the board
        """
        task = self._clock_target(task_id)
        if task is None:
            return None
        await self.controller.clock_in(task)
        return task

    async def manual_clock_out(self, task_id: str | None = None) -> Task | None:
        """
        Close the open interval without moving the task.

        Defaults to the first task in the clock column.

        Raises:
            TaskNotFoundError: If `task_id` is given but not on the board
        """
        task = self._clock_target(task_id)
        if task is None:
            return None
        await self.controller.clock_out(task)
        return task

    async def drain(self) -> None:
        """Wait for queued document edits and background clock commands."""
        await self.queue.drain()
        await self.controller.wait_background()
