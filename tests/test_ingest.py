"""
Tests for task ingestion.

Checks symbol mapping, id derivation, live interval reconciliation and
the done filter.
"""

import pytest

from clock_kanban.core.board.ingest import build_task, display_time, ingest
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.documents.storage import MemoryStorage
from clock_kanban.core.tasks.models import RawTaskRecord, TaskPriority, TaskStatus


def record(symbol=" ", description="Buy milk", path="inbox.md", line=4, **kwargs):
    return RawTaskRecord(
        status_symbol=symbol, description=description, path=path, line_number=line, **kwargs
    )


class TestRawTaskRecord:
    """Test parsing records from external task indexes."""

    def test_camel_case_aliases(self):
        raw = RawTaskRecord.model_validate(
            {
                "status": {"symbol": "/"},
                "description": "Write report",
                "sourcePath": "inbox.md",
                "lineNumber": 5,
                "priority": "high",
                "dueDate": "2024-05-10",
            }
        )
        assert raw.status_symbol == "/"
        assert raw.path == "inbox.md"
        assert raw.line_number == 5
        assert raw.priority == TaskPriority.HIGH
        assert raw.due_date == "2024-05-10"

    def test_empty_symbol_is_space(self):
        assert RawTaskRecord(status_symbol="").status_symbol == " "

    def test_unknown_priority_is_dropped(self):
        assert RawTaskRecord(priority="none").priority is None


class TestBuildTask:
    """Test build_task()."""

    def test_id_from_path_and_line(self, config):
        task = build_task(record(line=4), 0, config)
        assert task.id == "inbox.md-4"
        assert task.column == "TODO"
        assert task.status == TaskStatus.TODO

    def test_explicit_id_wins(self, config):
        assert build_task(record(id="abc"), 0, config).id == "abc"

    def test_id_falls_back_to_batch_index(self, config):
        task = build_task(record(line=None), 3, config)
        assert task.id == "inbox.md-3"
        assert task.line_number == 0

    def test_line_zero_is_kept_in_id(self, config):
        assert build_task(record(line=0), 7, config).id == "inbox.md-0"

    def test_missing_description(self, config):
        assert build_task(record(description=None), 0, config).description == "Untitled Task"

    def test_clock_symbol_sets_clocked_in(self, config):
        task = build_task(record(symbol="/"), 0, config)
        assert task.column == "Working"
        assert task.is_clocked_in

    def test_record_clock_flag_is_kept(self, config):
        assert build_task(record(is_clocked_in=True), 0, config).is_clocked_in


class TestIngest:
    """Test ingest() against live documents."""

    @pytest.mark.asyncio
    async def test_open_interval_forces_clock_column(self, config):
        storage = MemoryStorage({"a.md": "- [ ] Draft\n  [clock::2024-05-01T09:00:00]"})
        tasks = await ingest([record(description="Draft", path="a.md", line=0)], config, storage)

        assert tasks[0].column == "Working"
        assert tasks[0].is_clocked_in
        assert tasks[0].start_time == "09:00"
        # the symbol still decides the status
        assert tasks[0].status == TaskStatus.TODO

    @pytest.mark.asyncio
    async def test_closed_interval_fills_display_cache(self, config):
        storage = MemoryStorage({"a.md": "- [>] Draft\n  [clock::t0--t1] [clock::t2--t3]"})
        tasks = await ingest([record(">", "Draft", "a.md", 0)], config, storage)

        task = tasks[0]
        assert task.column == "Stopped"
        assert not task.is_clocked_in
        # unparseable timestamps are cached as written
        assert (task.start_time, task.end_time) == ("t2", "t3")

    @pytest.mark.asyncio
    async def test_display_cache_uses_time_format(self, config):
        storage = MemoryStorage(
            {"a.md": "- [>] Draft\n  [clock::2024-05-01T09:00:00--2024-05-01T10:30:00]"}
        )
        tasks = await ingest([record(">", "Draft", "a.md", 0)], config, storage)

        assert (tasks[0].start_time, tasks[0].end_time) == ("09:00", "10:30")

    @pytest.mark.asyncio
    async def test_stale_line_hint_is_refreshed(self, config):
        storage = MemoryStorage({"a.md": "# New heading\n\n- [ ] Draft\n  [clock::t0]"})
        tasks = await ingest([record(description="Draft", path="a.md", line=0)], config, storage)

        assert tasks[0].line_number == 2
        assert tasks[0].column == "Working"

    @pytest.mark.asyncio
    async def test_missing_document_keeps_symbol_state(self, config):
        tasks = await ingest([record(">", path="gone.md")], config, MemoryStorage())
        assert tasks[0].column == "Stopped"
        assert not tasks[0].is_clocked_in

    @pytest.mark.asyncio
    async def test_done_tasks_hidden_by_default(self, config, memory_storage):
        records = [
            record(" ", "Buy milk", line=4),
            record("x", "File taxes", line=7),
            record("X", "Other", line=9),
        ]
        tasks = await ingest(records, config, memory_storage)
        assert [t.description for t in tasks] == ["Buy milk"]

    @pytest.mark.asyncio
    async def test_show_completed(self, memory_storage):
        config = BoardConfig(show_completed_tasks=True)
        tasks = await ingest([record("x", "File taxes", line=7)], config, memory_storage)

        assert len(tasks) == 1
        assert tasks[0].column == "Done"
        assert tasks[0].status == TaskStatus.DONE

    @pytest.mark.asyncio
    async def test_inbox(self, config, memory_storage):
        records = [
            record(" ", "Buy milk", line=4),
            record("/", "Write report #work", line=5),
            record(" ", "Call plumber #home", line=8),
        ]
        tasks = await ingest(records, config, memory_storage)

        assert [(t.description, t.column, t.is_clocked_in) for t in tasks] == [
            ("Buy milk", "TODO", False),
            ("Write report #work", "Working", True),
            ("Call plumber #home", "TODO", False),
        ]
        assert tasks[1].start_time == "09:00"


class TestDisplayTime:
    """Test display_time()."""

    def test_reformats_token_timestamp(self, config):
        assert display_time("2024-05-01T14:05:00", config) == "14:05"

    def test_custom_formats(self):
        config = BoardConfig(clock_timestamp_format="%Y-%m-%d %H:%M", time_format="%I:%M %p")
        assert display_time("2024-05-01 14:05", config) == "02:05 PM"

    def test_unparseable_kept(self, config):
        assert display_time("yesterday", config) == "yesterday"
