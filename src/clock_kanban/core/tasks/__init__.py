"""
Task models, status mapping, line location and task sources.
"""

from .locator import locate
from .models import RawTaskRecord, Task, TaskPriority, TaskStatus
from .source import (
    TaskSource,
    get_source,
    is_source_available,
    list_sources,
    register_source,
)
from .status import column_to_symbol, derive_status, symbol_to_column

# Import source implementations to trigger registration
from . import markdown  # noqa: F401

__all__ = [
    # Models
    "RawTaskRecord",
    "Task",
    "TaskPriority",
    "TaskStatus",
    # Status mapping and location
    "column_to_symbol",
    "derive_status",
    "locate",
    "symbol_to_column",
    # Source protocol and registry
    "TaskSource",
    "get_source",
    "is_source_available",
    "list_sources",
    "register_source",
]
