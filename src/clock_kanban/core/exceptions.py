"""
Exception hierarchy for Clock Kanban.

None of these are fatal to the process. Queued document actions catch
them at the queue boundary; the CLI turns them into exit codes.
"""


class ClockKanbanError(Exception):
    """Base class for all Clock Kanban errors."""

    pass


class DocumentNotFoundError(ClockKanbanError):
    """Raised when a document path cannot be resolved in storage."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Document not found: {path}")


class TaskNotFoundError(ClockKanbanError):
    """Raised when a task id is not present on the board."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class UnknownColumnError(ClockKanbanError):
    """Raised when a move targets a column that is not configured."""

    def __init__(self, column: str, available: list[str]) -> None:
        self.column = column
        self.available = available
        super().__init__(
            f"Unknown column '{column}'. Available columns: {', '.join(available)}"
        )
