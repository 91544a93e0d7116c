"""
Markdown checkbox task source.

Scans a vault of markdown files for checkbox task lines:

    - [ ] Call the plumber #home 🔼 📅 2024-05-03
    - [/] Write report ⏫

Metadata follows the Tasks plugin conventions: `#tags`, priority emoji
and a `📅 YYYY-MM-DD` due date. The description is the text before the
first metadata emoji, so it remains a literal substring of the line and
the task locator can find it again after the document drifts.
"""

import logging
import re
from pathlib import Path, PurePosixPath

from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.tasks.models import RawTaskRecord, TaskPriority
from clock_kanban.core.tasks.source import register_source

logger = logging.getLogger(__name__)

PRIORITY_MARKERS: dict[str, TaskPriority] = {
    "🔺": TaskPriority.HIGH,
    "⏫": TaskPriority.HIGH,
    "🔼": TaskPriority.MEDIUM,
    "🔽": TaskPriority.LOW,
    "⏬": TaskPriority.LOW,
}

# Everything from the first of these onwards is metadata, not description
METADATA_MARKERS = tuple(PRIORITY_MARKERS) + ("📅", "⏳", "🛫", "➕", "✅", "❌", "🔁")

DUE_DATE_PATTERN = re.compile(r"📅\s*(\d{4}-\d{2}-\d{2})")
TAG_PATTERN = re.compile(r"(?<![\w#])#([\w/-]+)")


def _matches_folder(path: str, folder_filter: str) -> bool:
    folder = folder_filter.strip().strip("/")
    if not folder:
        return True
    return PurePosixPath(path).is_relative_to(folder)


def parse_task_line(
    line: str, pattern: "re.Pattern[str]"
) -> tuple[str, str, list[str], TaskPriority | None, str | None] | None:
    """
    Parse one line into (symbol, description, tags, priority, due_date).

    Returns None when the line is not a task line.

    Example:
        >>> parse_task_line("- [ ] Buy milk #home 📅 2024-05-03",
        ...                 re.compile(r"- \\[([^\\t\\n\\r])\\]"))
        (' ', 'Buy milk #home', ['#home'], None, '2024-05-03')
    """
    match = pattern.search(line)
    if match is None:
        return None

    body = line[match.end():]
    cut = len(body)
    for marker in METADATA_MARKERS:
        position = body.find(marker)
        if position != -1:
            cut = min(cut, position)
    description = body[:cut].strip()

    tags = [f"#{tag}" for tag in TAG_PATTERN.findall(body)]

    priority: TaskPriority | None = None
    for marker, level in PRIORITY_MARKERS.items():
        if marker in body:
            priority = level
            break

    due = DUE_DATE_PATTERN.search(body)
    return match.group(1), description, tags, priority, due.group(1) if due else None


@register_source("markdown")
class MarkdownTaskSource:
    """
    Task source reading checkbox lines from `*.md` files under a root.

    Example:
        >>> source = MarkdownTaskSource(Path("~/notes").expanduser(), BoardConfig())
        >>> records = source.get_tasks()
    """

    def __init__(self, root: Path, config: BoardConfig) -> None:
        self.root = Path(root)
        self.config = config
        self._pattern = config.compiled_task_pattern

    @property
    def source_name(self) -> str:
        return "markdown"

    def _documents(self) -> list[Path]:
        if not self.root.is_dir():
            logger.warning(f"Vault directory does not exist: {self.root}")
            return []
        return sorted(p for p in self.root.rglob("*.md") if p.is_file())

    def parse_document(self, relative_path: str, text: str) -> list[RawTaskRecord]:
        """Extract task records from one document's text."""
        records: list[RawTaskRecord] = []
        for index, line in enumerate(text.split("\n")):
            parsed = parse_task_line(line, self._pattern)
            if parsed is None:
                continue
            symbol, description, tags, priority, due_date = parsed
            records.append(
                RawTaskRecord(
                    status_symbol=symbol,
                    description=description or None,
                    path=relative_path,
                    line_number=index,
                    tags=tags,
                    priority=priority,
                    due_date=due_date,
                )
            )
        return records

    def get_tasks(self) -> list[RawTaskRecord]:
        records: list[RawTaskRecord] = []
        for document in self._documents():
            relative = document.relative_to(self.root).as_posix()
            if not _matches_folder(relative, self.config.folder_filter):
                continue
            try:
                text = document.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable document {relative}: {e}")
                continue
            records.extend(self.parse_document(relative, text))

        logger.debug(f"Found {len(records)} task line(s) under {self.root}")
        return records
