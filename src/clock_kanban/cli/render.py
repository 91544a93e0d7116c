"""
Rich rendering for the board and task tables.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from clock_kanban.core.board.service import BoardService
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.tasks.models import Task, TaskPriority, TaskStatus

PRIORITY_STYLES: dict[TaskPriority, str] = {
    TaskPriority.LOW: "#6b7280",
    TaskPriority.MEDIUM: "#f59e0b",
    TaskPriority.HIGH: "#ef4444",
}

STATUS_STYLES: dict[TaskStatus, str] = {
    TaskStatus.TODO: "white",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.DONE: "green",
    TaskStatus.CANCELLED: "dim",
}

NOTICE_STYLES = {"info": "cyan", "warning": "yellow", "error": "red"}


class ConsoleNotifier:
    """Notifier printing notices with rich."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def notify(self, message: str, *, level: str = "info") -> None:
        style = NOTICE_STYLES.get(level, "cyan")
        self.console.print(Text(message, style=style))


def task_card(task: Task) -> Text:
    """One card: clock indicator, description, then tags / priority / due date."""
    card = Text()
    if task.is_clocked_in:
        card.append("⏱ ", style="bold")
    card.append(task.description, style="bold" if task.is_clocked_in else "")

    meta = Text()
    for tag in task.tags:
        meta.append(f"{tag} ", style="magenta")
    if task.priority is not None:
        meta.append(
            f"!{task.priority.value[0].upper()} ", style=PRIORITY_STYLES[task.priority]
        )
    if task.due_date:
        meta.append(f"📅 {task.due_date}", style="dim")
    if meta:
        card.append("\n")
        card.append_text(meta)

    card.append(f"\n{task.id}", style="dim")
    return card


def render_board(console: Console, service: BoardService) -> None:
    """Print the board as a table with one column per configured column."""
    grouped = service.columns()
    config = service.config

    table = Table(title="Clock Kanban", show_header=True, show_lines=True, expand=True)
    for column in config.columns:
        header = f"{column.name} ({len(grouped.get(column.name, []))})"
        if column.name == config.clock_column:
            header = f"⏱ {header}"
        table.add_column(header, header_style=f"bold {column.color}", overflow="fold")

    depth = max((len(tasks) for tasks in grouped.values()), default=0)
    for row in range(depth):
        cells: list[Text | str] = []
        for column in config.columns:
            tasks = grouped.get(column.name, [])
            cells.append(task_card(tasks[row]) if row < len(tasks) else "")
        table.add_row(*cells)

    console.print(table)


def render_task_list(console: Console, tasks: list[Task]) -> None:
    """Print a flat task table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Column", width=12)
    table.add_column("Status", width=12)
    table.add_column("Description", overflow="fold")

    for task in tasks:
        description = Text(f"⏱ {task.description}" if task.is_clocked_in else task.description)
        table.add_row(
            Text(task.id),
            Text(task.column),
            Text(task.status.value, style=STATUS_STYLES[task.status]),
            description,
        )

    console.print(table)


def render_columns(console: Console, config: BoardConfig) -> None:
    """Print the configured columns."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Column")
    table.add_column("Symbol", justify="center")
    table.add_column("Color")
    table.add_column("Clock", justify="center")

    for column in config.columns:
        table.add_row(
            Text(column.name, style=column.color),
            Text(f"[{column.symbol}]"),
            column.color,
            "⏱" if column.name == config.clock_column else "",
        )

    console.print(table)
    auto = "on" if config.auto_clock else "off"
    console.print(f"Auto clock-in/out: [bold]{auto}[/bold]")
