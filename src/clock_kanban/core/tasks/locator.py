"""
Recover a task's current line in a document.

Line numbers captured at indexing time go stale as soon as the document
is edited above the task. The locator first trusts the hint, then falls
back to scanning for a task line containing the description. Tasks that
share an identical description are not told apart: the first match wins.
"""

import re

from clock_kanban.core.config.models import DEFAULT_TASK_PATTERN

_DEFAULT_PATTERN = re.compile(DEFAULT_TASK_PATTERN)


def _is_task_line(line: str, description: str, pattern: "re.Pattern[str]") -> bool:
    return pattern.search(line) is not None and description in line


def locate(
    lines: list[str],
    description: str,
    last_known_index: int | None,
    task_pattern: "re.Pattern[str] | str | None" = None,
) -> int | None:
    """
    Find the index of a task line.

    Args:
        lines: Document split into lines
        description: Task description, matched as a literal substring
        last_known_index: Line index recorded when the task was indexed
        task_pattern: Regex identifying task lines (checkbox syntax by default)

    Returns:
        The line index, or None when no line matches

    Example:
        >>> lines = ["# Inbox", "- [ ] Buy milk"]
        >>> locate(lines, "Buy milk", 1)
        1
        >>> locate(["new line"] + lines, "Buy milk", 1)
        2
    """
    if task_pattern is None:
        pattern = _DEFAULT_PATTERN
    elif isinstance(task_pattern, str):
        pattern = re.compile(task_pattern)
    else:
        pattern = task_pattern

    if (
        last_known_index is not None
        and 0 <= last_known_index < len(lines)
        and _is_task_line(lines[last_known_index], description, pattern)
    ):
        return last_known_index

    for index, line in enumerate(lines):
        if _is_task_line(line, description, pattern):
            return index

    return None
