"""
Clock interval annotations.

Intervals are recorded as bracketed tokens on the lines directly below a
task line:

    - [/] Write report
      [clock::2024-05-01T09:00:00--2024-05-01T10:30:00] [clock::2024-05-01T14:00:00]

`[clock::<start>]` is an open interval; `[clock::<start>--<end>]` is a
closed one. The lines below a task that consist only of such tokens form
the task's annotation run. The run ends at the first line with anything
else on it.

Every function here is pure: it takes the document's lines and returns a
new list (or a parse result) without touching storage. Callers re-read
the document for each query, so nothing about intervals is cached.

Example:
    >>> lines = ["- [ ] Buy milk"]
    >>> lines = open_interval(lines, 0, "09:00")
    >>> lines[1]
    '  [clock::09:00]'
    >>> close_interval(lines, 0, "09:30")[1]
    '  [clock::09:00--09:30]'
"""

import re
from dataclasses import dataclass

CLOCK_TOKEN_PATTERN = re.compile(r"\[clock::([^\]]+)\]")
ANNOTATION_LINE_PATTERN = re.compile(r"^\s*(\[clock::[^\]]+\]\s*)+$")
# start timestamp only: no closing bracket and no "--" separator inside
OPEN_TOKEN_PATTERN = re.compile(r"\[clock::((?:(?!\]|--).)+)\]")

FALLBACK_INDENT = "  "
INTERVAL_SEPARATOR = "--"
_LEADING_WHITESPACE = re.compile(r"^\s*")
CARRIAGE_RETURN = "\r"


@dataclass(frozen=True)
class IntervalToken:
    """One parsed [clock::...] token and where it sits in the document."""

    line_index: int
    """Index of the annotation line holding the token."""

    span: tuple[int, int]
    """Character span of the whole token within that line."""

    start: str
    """Start timestamp as written."""

    end: str | None = None
    """End timestamp, or None while the interval is open."""

    @property
    def is_open(self) -> bool:
        return self.end is None

    @property
    def text(self) -> str:
        return format_token(self.start, self.end)


def _line_ending(line: str) -> str:
    # CRLF documents split on "\n" leave a trailing "\r" on each line
    return CARRIAGE_RETURN if line.endswith(CARRIAGE_RETURN) else ""


def format_token(start: str, end: str | None = None) -> str:
    """Render an interval token."""
    if end is None:
        return f"[clock::{start}]"
    return f"[clock::{start}{INTERVAL_SEPARATOR}{end}]"


def is_annotation_line(line: str) -> bool:
    """True if the line holds nothing but clock tokens and whitespace."""
    return ANNOTATION_LINE_PATTERN.match(line) is not None


def annotation_run(lines: list[str], task_index: int) -> range:
    """
    Return the indices of the annotation lines directly below a task.

    The range is empty when the line after the task is not an annotation
    line (or the task is the last line).
    """
    start = task_index + 1
    end = start
    while end < len(lines) and is_annotation_line(lines[end]):
        end += 1
    return range(start, end)


def _parse_line(line: str, line_index: int) -> list[IntervalToken]:
    tokens: list[IntervalToken] = []
    for match in CLOCK_TOKEN_PATTERN.finditer(line):
        body = match.group(1)
        if INTERVAL_SEPARATOR in body:
            start, end = body.split(INTERVAL_SEPARATOR, 1)
            tokens.append(IntervalToken(line_index, match.span(), start, end))
        else:
            tokens.append(IntervalToken(line_index, match.span(), body))
    return tokens


def list_intervals(lines: list[str], task_index: int) -> list[IntervalToken]:
    """All interval tokens in a task's annotation run, in document order."""
    tokens: list[IntervalToken] = []
    for index in annotation_run(lines, task_index):
        tokens.extend(_parse_line(lines[index], index))
    return tokens


def find_open_interval(lines: list[str], task_index: int) -> IntervalToken | None:
    """Return the last open interval token below a task, if any."""
    last: IntervalToken | None = None
    for index in annotation_run(lines, task_index):
        for match in OPEN_TOKEN_PATTERN.finditer(lines[index]):
            last = IntervalToken(index, match.span(), match.group(1))
    return last


def open_interval(lines: list[str], task_index: int, timestamp: str) -> list[str]:
    """
    Start a new interval below the task at `task_index`.

    The token is appended to the last existing annotation line; without
    one, a new line is inserted right after the task, indented like the
    task line (or with FALLBACK_INDENT when the task line is not indented).
    An already open interval is left alone, so opening twice yields two
    open tokens.
    """
    updated = list(lines)
    token = format_token(timestamp)
    run = annotation_run(updated, task_index)

    if run:
        last = run[-1]
        line = updated[last]
        updated[last] = line.rstrip() + " " + token + _line_ending(line)
        return updated

    task_line = updated[task_index]
    ending = _line_ending(task_line)
    if not ending and task_index == len(updated) - 1:
        # last line of a CRLF document without a final newline
        if any(line.endswith(CARRIAGE_RETURN) for line in updated):
            updated[task_index] = task_line + CARRIAGE_RETURN
    indent = _LEADING_WHITESPACE.match(task_line).group(0) or FALLBACK_INDENT
    updated.insert(task_index + 1, f"{indent}{token}{ending}")
    return updated


def close_interval(lines: list[str], task_index: int, timestamp: str) -> list[str]:
    """
    Close the last open interval below the task at `task_index`.

    Only that token is rewritten; other tokens on the line are left as
    they are. Closing when nothing is open returns the lines unchanged.
    """
    token = find_open_interval(lines, task_index)
    if token is None:
        return list(lines)

    updated = list(lines)
    line = updated[token.line_index]
    start, end = token.span
    updated[token.line_index] = line[:start] + format_token(token.start, timestamp) + line[end:]
    return updated
