"""Rewrite the status symbol inside a task line's checkbox."""

import re

from clock_kanban.core.config.models import DEFAULT_TASK_PATTERN


def read_symbol(line: str, task_pattern: str = DEFAULT_TASK_PATTERN) -> str | None:
    """Return the checkbox symbol of a task line, or None if it is not one."""
    match = re.search(task_pattern, line)
    if match is None:
        return None
    return match.group(1)


def replace_symbol(line: str, symbol: str, task_pattern: str = DEFAULT_TASK_PATTERN) -> str:
    """
    Replace the captured status symbol of the first checkbox on a line.

    Only the characters of capture group 1 change; lines that do not match
    the pattern are returned as-is.

    Example:
        >>> replace_symbol("  - [ ] Buy milk", "x")
        '  - [x] Buy milk'
    """
    match = re.search(task_pattern, line)
    if match is None:
        return line
    start, end = match.span(1)
    return line[:start] + symbol + line[end:]


def rewrite_status(
    lines: list[str],
    index: int,
    symbol: str,
    task_pattern: str = DEFAULT_TASK_PATTERN,
) -> list[str]:
    """Return a copy of `lines` with the task at `index` set to `symbol`."""
    updated = list(lines)
    updated[index] = replace_symbol(updated[index], symbol, task_pattern)
    return updated
