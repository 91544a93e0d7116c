"""
Build the board's task list from raw task records.

Ingestion runs in three passes:

1. Map each record's checkbox symbol to a column and status.
2. Re-read every source document and look for open [clock::] intervals
   below each task. A live open interval always wins over the symbol:
   the task is forced into the clock column.
3. Drop done tasks unless the configuration asks to show them.

Reads here are not queued behind pending mutations. A refresh racing a
write may see old text; the next refresh converges.
"""

import logging
from collections import defaultdict
from datetime import datetime

from clock_kanban.core.clock.annotator import find_open_interval, list_intervals
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.documents.storage import DocumentStorage, split_lines
from clock_kanban.core.exceptions import ClockKanbanError
from clock_kanban.core.tasks.locator import locate
from clock_kanban.core.tasks.models import RawTaskRecord, Task, TaskStatus
from clock_kanban.core.tasks.status import derive_status, symbol_to_column

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Task"


def build_task(record: RawTaskRecord, index: int, config: BoardConfig) -> Task:
    """
    Convert one raw record into a board task (symbol-derived state only).

    Args:
        record: Raw record from the task source
        index: Position of the record in its batch, used for ids without a line
        config: Board configuration

    Returns:
        Task with column, status and clock flag derived from the symbol
    """
    symbol = record.status_symbol
    column = symbol_to_column(symbol, config)

    clock_column = config.clock_column_config
    symbol_is_clock = clock_column is not None and symbol == clock_column.symbol

    line_hint = record.line_number if record.line_number is not None else index
    task_id = record.id or f"{record.path}-{line_hint}"

    return Task(
        id=task_id,
        description=record.description or UNTITLED,
        column=column,
        status=derive_status(symbol, config),
        source_path=record.path,
        line_number=max(record.line_number or 0, 0),
        tags=list(record.tags),
        priority=record.priority,
        due_date=record.due_date,
        is_clocked_in=record.is_clocked_in or symbol_is_clock,
        start_time=record.start_time,
        end_time=record.end_time,
    )


def display_time(timestamp: str, config: BoardConfig) -> str:
    """
    Reformat a token timestamp with `time_format` for the display cache.

    Timestamps that do not parse with `clock_timestamp_format` (hand-written
    tokens, an older format) are kept as written.

    Example:
        >>> display_time("2024-05-01T09:00:00", BoardConfig())
        '09:00'
    """
    try:
        moment = datetime.strptime(timestamp, config.clock_timestamp_format)
    except ValueError:
        return timestamp
    return moment.strftime(config.time_format)


async def _read_lines(storage: DocumentStorage, path: str) -> list[str] | None:
    if storage.resolve(path) is None:
        logger.debug(f"Skipping interval check, document not found: {path}")
        return None
    try:
        return split_lines(await storage.read(path))
    except (ClockKanbanError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {path} for interval check: {e}")
        return None


async def apply_live_intervals(
    tasks: list[Task], config: BoardConfig, storage: DocumentStorage
) -> None:
    """
    Reconcile tasks in place with the interval tokens in their documents.

    Each document is read once per call. Tasks the locator cannot find
    keep their symbol-derived state.
    """
    by_path: dict[str, list[Task]] = defaultdict(list)
    for task in tasks:
        if task.source_path:
            by_path[task.source_path].append(task)

    pattern = config.compiled_task_pattern
    for path, path_tasks in by_path.items():
        lines = await _read_lines(storage, path)
        if lines is None:
            continue

        for task in path_tasks:
            index = locate(lines, task.description, task.line_number, pattern)
            if index is None:
                logger.debug(f"Task '{task.short_description()}' not found in {path}")
                continue
            task.line_number = index

            intervals = list_intervals(lines, index)
            if intervals:
                latest = intervals[-1]
                if task.start_time is None:
                    task.start_time = display_time(latest.start, config)
                if task.end_time is None and latest.end is not None:
                    task.end_time = display_time(latest.end, config)

            if find_open_interval(lines, index) is not None:
                task.is_clocked_in = True
                task.column = config.clock_column


async def ingest(
    records: list[RawTaskRecord], config: BoardConfig, storage: DocumentStorage
) -> list[Task]:
    """
    Build the ordered board task list from raw records.

    Args:
        records: Raw records from the task source
        config: Board configuration
        storage: Document storage used to check live interval state

    Returns:
        Tasks in record order, without done tasks unless
        `config.show_completed_tasks` is set
    """
    tasks = [build_task(record, index, config) for index, record in enumerate(records)]

    await apply_live_intervals(tasks, config, storage)

    if not config.show_completed_tasks:
        tasks = [task for task in tasks if task.status != TaskStatus.DONE]

    logger.debug(f"Ingested {len(tasks)} task(s) from {len(records)} record(s)")
    return tasks
