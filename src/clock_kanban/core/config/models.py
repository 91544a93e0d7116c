"""
Configuration data models for Clock Kanban.

These models define the structure of .clock-kanban.json and
~/.config/clock-kanban/config.json files, with validation via Pydantic.

Column names are expected to be unique, but duplicates are only warned
about: column lookups take the first match and the board keeps working.
"""

import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_TASK_PATTERN = r"- \[([^\t\n\r])\]"


class ColumnConfig(BaseModel):
    """
    A board column and the checkbox symbol persisted for it.

    Example:
        >>> col = ColumnConfig(name="Done", symbol="x", color="#10b981")
        >>> col.symbol
        'x'
    """

    name: str = Field(..., min_length=1, description="Display name and lookup key")
    symbol: str = Field(
        default=" ",
        min_length=1,
        max_length=1,
        description="Single character written between the checkbox brackets",
    )
    color: str = Field(default="#6b7280", description="Column accent color")


def default_columns() -> list[ColumnConfig]:
    """Return the built-in TODO / Working / Stopped / Done columns."""
    return [
        ColumnConfig(name="TODO", symbol=" ", color="#6b7280"),
        ColumnConfig(name="Working", symbol="/", color="#3b82f6"),
        ColumnConfig(name="Stopped", symbol=">", color="#f59e0b"),
        ColumnConfig(name="Done", symbol="x", color="#10b981"),
    ]


class BoardConfig(BaseModel):
    """
    Complete board configuration.

    Passed explicitly into the status mapper, ingestion and the transition
    controller; nothing reads it from ambient state.

    Example:
        >>> config = BoardConfig()
        >>> config.clock_column
        'Working'
        >>> [c.name for c in config.columns]
        ['TODO', 'Working', 'Stopped', 'Done']
    """

    columns: list[ColumnConfig] = Field(
        default_factory=default_columns,
        description="Ordered board columns",
    )
    clock_column: str = Field(
        default="Working",
        description="Column whose entry/exit opens/closes a clock interval",
    )
    auto_clock: bool = Field(
        default=True,
        description="Open and close intervals automatically on column moves",
    )
    show_completed_tasks: bool = Field(
        default=False,
        description="Keep tasks whose status is done on the board",
    )
    time_format: str = Field(
        default="%H:%M",
        description="strftime format for the cached start/end display times",
    )
    clock_timestamp_format: str = Field(
        default="%Y-%m-%dT%H:%M:%S",
        description="strftime format for timestamps written into [clock::] tokens",
    )
    in_progress_symbol: str = Field(
        default="/",
        min_length=1,
        max_length=1,
        description="Checkbox symbol that marks a task as in progress",
    )
    task_pattern: str = Field(
        default=DEFAULT_TASK_PATTERN,
        description="Regex identifying a task line; group 1 captures the status symbol",
    )
    folder_filter: str = Field(
        default="",
        description="Only read tasks from documents under this folder",
    )
    use_clock_command: bool = Field(
        default=False,
        description="Run the external clock commands instead of editing text",
    )
    clock_in_command: list[str] = Field(
        default_factory=list,
        description="argv template run on clock-in ({description}, {path}, {id})",
    )
    clock_out_command: list[str] = Field(
        default_factory=list,
        description="argv template run on clock-out ({description}, {path}, {id})",
    )
    debug_messages: bool = Field(
        default=False,
        description="Show non-essential notices such as refresh or clock-in messages",
    )
    source: str = Field(default="markdown", description="Registered task source name")

    model_config = ConfigDict(
        extra="ignore",
    )

    @field_validator("task_pattern")
    @classmethod
    def validate_task_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile or capture the symbol."""
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid task_pattern regex: {e}") from e
        if compiled.groups < 1:
            raise ValueError("task_pattern must capture the status symbol in group 1")
        return v

    @model_validator(mode="after")
    def warn_on_ambiguous_columns(self) -> "BoardConfig":
        """Warn (without failing) about duplicate names and a missing clock column."""
        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                logger.warning(
                    f"Duplicate column name '{column.name}': lookups will use the first one"
                )
            seen.add(column.name)
        if self.columns and self.clock_column not in seen:
            logger.warning(
                f"Clock column '{self.clock_column}' is not a configured column"
            )
        return self

    @property
    def column_names(self) -> list[str]:
        """Column names in board order."""
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> ColumnConfig | None:
        """Return the first column with this name, or None."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def clock_column_config(self) -> ColumnConfig | None:
        """The configured clock column, if it exists."""
        return self.get_column(self.clock_column)

    @property
    def compiled_task_pattern(self) -> "re.Pattern[str]":
        return re.compile(self.task_pattern)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for writing back to a JSON config file."""
        return self.model_dump()
