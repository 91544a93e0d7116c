"""
Column <-> checkbox symbol mapping.

External task sources may use symbols the board configuration does not
know about. Unmapped symbols never raise: they land in the first column,
except completion symbols (x/X) which first try a column named "Done".
"""

from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.tasks.models import TaskStatus

DONE_SYMBOLS = ("x", "X")
CANCELLED_SYMBOL = "-"
FALLBACK_COLUMN = "TODO"
FALLBACK_SYMBOL = " "


def column_to_symbol(column: str, config: BoardConfig) -> str:
    """
    Return the checkbox symbol persisted for a column.

    Unknown columns map to the first column's symbol.

    Example:
        >>> column_to_symbol("Done", BoardConfig())
        'x'
    """
    match = config.get_column(column)
    if match is not None:
        return match.symbol
    if config.columns:
        return config.columns[0].symbol
    return FALLBACK_SYMBOL


def symbol_to_column(symbol: str, config: BoardConfig) -> str:
    """
    Return the column a checkbox symbol belongs to.

    Example:
        >>> symbol_to_column("/", BoardConfig())
        'Working'
        >>> symbol_to_column("?", BoardConfig())
        'TODO'
    """
    for column in config.columns:
        if column.symbol == symbol:
            return column.name

    if symbol in DONE_SYMBOLS:
        for column in config.columns:
            if column.name.lower() == "done":
                return column.name

    if config.columns:
        return config.columns[0].name
    return FALLBACK_COLUMN


def derive_status(symbol: str, config: BoardConfig) -> TaskStatus:
    """
    Derive the task status enum from its checkbox symbol.

    Example:
        >>> derive_status("X", BoardConfig())
        <TaskStatus.DONE: 'done'>
    """
    if symbol in DONE_SYMBOLS:
        return TaskStatus.DONE
    if symbol == config.in_progress_symbol:
        return TaskStatus.IN_PROGRESS
    if symbol == CANCELLED_SYMBOL:
        return TaskStatus.CANCELLED
    return TaskStatus.TODO
