"""
Tests for BoardService: refresh, queries and the triggers a front-end
uses (drops, moves by id, manual clock commands).
"""

import json

import pytest

from clock_kanban.core.board.service import BoardService
from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.documents.storage import FileSystemStorage, MemoryStorage
from clock_kanban.core.exceptions import TaskNotFoundError, UnknownColumnError
from clock_kanban.core.notices import RecordingNotifier
from clock_kanban.core.tasks.markdown import MarkdownTaskSource


class FailingSource:
    source_name = "failing"

    def get_tasks(self):
        raise RuntimeError("index unavailable")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(vault, config, clock, notifier) -> BoardService:
    return BoardService(
        config,
        FileSystemStorage(vault),
        MarkdownTaskSource(vault, config),
        notifier=notifier,
        now=clock,
    )


class TestRefresh:
    """Test refresh()."""

    @pytest.mark.asyncio
    async def test_refresh_builds_board(self, service):
        tasks = await service.refresh()

        assert [t.id for t in tasks] == [
            "archive/old.md-0",
            "inbox.md-4",
            "inbox.md-5",
            "inbox.md-8",
            "projects/site.md-2",
            "projects/site.md-3",
        ]
        grouped = service.columns()
        assert list(grouped) == ["TODO", "Working", "Stopped", "Done"]
        assert [t.description for t in grouped["Working"]] == ["Write report #work"]
        assert [t.description for t in grouped["Stopped"]] == ["Pick a font"]
        assert grouped["Done"] == []

    @pytest.mark.asyncio
    async def test_missing_source(self, config, notifier):
        service = BoardService(config, MemoryStorage(), None, notifier=notifier)

        assert await service.refresh() == []
        assert notifier.messages == [("warning", "Task source not available: no tasks loaded")]

    @pytest.mark.asyncio
    async def test_failing_source(self, config, notifier, caplog):
        service = BoardService(config, MemoryStorage(), FailingSource(), notifier=notifier)

        assert await service.refresh() == []
        assert notifier.messages == [("warning", "Error loading tasks: index unavailable")]
        assert "Error loading tasks from source" in caplog.text

    @pytest.mark.asyncio
    async def test_refreshed_notice_only_with_debug_messages(self, vault, notifier):
        config = BoardConfig(debug_messages=True)
        service = BoardService.for_vault(vault, config, notifier=notifier)

        await service.refresh()

        assert ("info", "Clock Kanban refreshed") in notifier.messages


class TestTriggers:
    """Test drops, moves and manual clocking."""

    @pytest.mark.asyncio
    async def test_handle_drop(self, service, vault):
        await service.refresh()

        result = await service.handle_drop("inbox.md-4", "TODO", "Working")

        assert result is not None
        assert result.operations == ["clock-in", "status"]
        lines = (vault / "inbox.md").read_text(encoding="utf-8").split("\n")
        assert lines[4:6] == ["- [/] Buy milk", "  [clock::2024-05-01T09:00:00]"]

    @pytest.mark.asyncio
    async def test_drop_same_column_ignored(self, service):
        await service.refresh()
        assert await service.handle_drop("inbox.md-4", "TODO", "TODO") is None

    @pytest.mark.asyncio
    async def test_drop_unknown_task_ignored(self, service):
        await service.refresh()
        assert await service.handle_drop("nope", "TODO", "Done") is None

    @pytest.mark.asyncio
    async def test_move_task_to_column(self, service, vault):
        await service.refresh()

        await service.move_task_to_column("projects/site.md-3", "Done")

        text = (vault / "projects" / "site.md").read_text(encoding="utf-8")
        assert text == "## Site\n\n- [ ] Draft landing page\n- [x] Pick a font\n"
        assert service.get_task("projects/site.md-3").column == "Done"

    @pytest.mark.asyncio
    async def test_move_unknown_column(self, service):
        await service.refresh()
        with pytest.raises(UnknownColumnError) as exc_info:
            await service.move_task_to_column("inbox.md-4", "Someday")
        assert exc_info.value.available == ["TODO", "Working", "Stopped", "Done"]

    @pytest.mark.asyncio
    async def test_move_unknown_task(self, service):
        await service.refresh()
        with pytest.raises(TaskNotFoundError):
            await service.move_task_to_column("nope", "Done")

    @pytest.mark.asyncio
    async def test_manual_clock_out_defaults_to_clock_column(self, service, vault):
        await service.refresh()

        task = await service.manual_clock_out()

        assert task is not None
        assert task.description == "Write report #work"
        assert task.column == "Working"
        lines = (vault / "inbox.md").read_text(encoding="utf-8").split("\n")
        assert lines[5] == "- [/] Write report #work ⏫"
        assert lines[6] == "  [clock::2024-05-01T09:00:00--2024-05-01T09:00:00]"

    @pytest.mark.asyncio
    async def test_manual_clock_in_by_id(self, service, vault):
        await service.refresh()

        task = await service.manual_clock_in("projects/site.md-2")

        assert task.is_clocked_in
        text = (vault / "projects" / "site.md").read_text(encoding="utf-8")
        assert "- [ ] Draft landing page\n  [clock::2024-05-01T09:00:00]\n" in text

    @pytest.mark.asyncio
    async def test_manual_clock_with_empty_clock_column(self, config, notifier):
        service = BoardService(config, MemoryStorage(), None, notifier=notifier)
        await service.refresh()

        assert await service.manual_clock_in() is None
        assert ("warning", "No task in Working column") in notifier.messages

    @pytest.mark.asyncio
    async def test_manual_clock_unknown_task(self, service):
        await service.refresh()
        with pytest.raises(TaskNotFoundError):
            await service.manual_clock_in("nope")


class TestForVault:
    """Test BoardService.for_vault()."""

    def test_loads_project_config(self, vault):
        (vault / ".clock-kanban.json").write_text(
            json.dumps({"clock_column": "Stopped"}), encoding="utf-8"
        )
        service = BoardService.for_vault(vault)

        assert service.config.clock_column == "Stopped"
        assert isinstance(service.source, MarkdownTaskSource)
        assert service.controller.clock_command is None

    def test_unknown_source_is_none(self, vault, caplog):
        service = BoardService.for_vault(vault, BoardConfig(source="dataview"))
        assert service.source is None
        assert "not registered" in caplog.text

    def test_clock_command_from_config(self, vault):
        config = BoardConfig(clock_in_command=["timew", "start", "{description}"])
        service = BoardService.for_vault(vault, config)
        assert service.controller.clock_command is not None
