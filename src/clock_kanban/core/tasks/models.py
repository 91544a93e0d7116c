"""
Task data models for Clock Kanban.

`RawTaskRecord` is what a task source hands over; `Task` is the board's
in-memory view of it. Tasks are rebuilt on every ingestion pass, so
nothing here is persisted except through the source document text.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Status derived from the checkbox symbol."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Priority levels understood by the board."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _coerce_priority(v: object) -> TaskPriority | None:
    if v is None or isinstance(v, TaskPriority):
        return v
    value = str(v).strip().lower()
    try:
        return TaskPriority(value)
    except ValueError:
        # "none", "normal", numeric Tasks defaults, ...
        return None


class RawTaskRecord(BaseModel):
    """
    A task as reported by an external task source.

    Only the status symbol is required. Aliases accept the camelCase keys
    used by JSON task indexes.

    Example:
        >>> record = RawTaskRecord(status_symbol=" ", description="Buy milk",
        ...                        path="inbox.md", line_number=4)
        >>> record.tags
        []
    """

    status_symbol: str = Field(default=" ", alias="status")
    id: str | None = Field(default=None)
    description: str | None = Field(default=None)
    path: str = Field(default="", alias="sourcePath")
    line_number: int | None = Field(default=None, alias="lineNumber")
    tags: list[str] = Field(default_factory=list)
    priority: TaskPriority | None = Field(default=None)
    due_date: str | None = Field(default=None, alias="dueDate")
    is_clocked_in: bool = Field(default=False, alias="isClockedIn")
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("status_symbol", mode="before")
    @classmethod
    def validate_status_symbol(cls, v: object) -> str:
        """Accept either a bare symbol or a {"symbol": ...} mapping."""
        if isinstance(v, dict):
            v = v.get("symbol", " ")
        if v is None or v == "":
            return " "
        return str(v)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: object) -> TaskPriority | None:
        return _coerce_priority(v)


class Task(BaseModel):
    """
    A card on the board.

    `line_number` is only a hint: the document may have changed since the
    task was indexed. Use the task locator before touching its line.
    `start_time` / `end_time` are a display cache of the last interval.

    Example:
        >>> task = Task(id="inbox.md-4", description="Buy milk", column="TODO",
        ...             source_path="inbox.md", line_number=4)
        >>> task.status
        <TaskStatus.TODO: 'todo'>
    """

    id: str = Field(..., description="Opaque identifier, stable within a session")
    description: str = Field(default="Untitled Task")
    column: str = Field(..., description="Current column name")
    status: TaskStatus = Field(default=TaskStatus.TODO)
    source_path: str = Field(default="")
    line_number: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    priority: TaskPriority | None = Field(default=None)
    due_date: str | None = Field(default=None)
    is_clocked_in: bool = Field(default=False)
    start_time: str | None = Field(default=None)
    end_time: str | None = Field(default=None)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: object) -> TaskPriority | None:
        return _coerce_priority(v)

    def short_description(self, limit: int = 40) -> str:
        """Description truncated for notices."""
        if len(self.description) <= limit:
            return self.description
        return self.description[:limit] + "..."
