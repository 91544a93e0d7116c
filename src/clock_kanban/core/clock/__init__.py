"""
Clock interval annotations and external time-tracking commands.
"""

from .annotator import (
    IntervalToken,
    annotation_run,
    close_interval,
    find_open_interval,
    format_token,
    list_intervals,
    open_interval,
)
from .command import ClockCommand, ClockCommandResult, ShellClockCommand

__all__ = [
    "ClockCommand",
    "ClockCommandResult",
    "IntervalToken",
    "ShellClockCommand",
    "annotation_run",
    "close_interval",
    "find_open_interval",
    "format_token",
    "list_intervals",
    "open_interval",
]
