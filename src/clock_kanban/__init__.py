"""
Clock Kanban - board view over markdown checkbox tasks

Keeps a column board of tasks in sync with the checkbox lines they come
from, and records clock-in/clock-out intervals below each task line.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from clock_kanban.core.config.models import BoardConfig, ColumnConfig
from clock_kanban.core.tasks.models import Task, TaskStatus

__all__ = ["BoardConfig", "ColumnConfig", "Task", "TaskStatus", "__version__"]
