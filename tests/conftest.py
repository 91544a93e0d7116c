"""
Pytest configuration and shared fixtures.

Provides fixtures for temp vaults, board configs, in-memory storage and a
fixed clock used across the test suite.
"""

from datetime import datetime
from pathlib import Path

import pytest

from clock_kanban.core.config import clear_cache
from clock_kanban.core.config.models import BoardConfig, ColumnConfig
from clock_kanban.core.documents.storage import MemoryStorage

INBOX = """# Inbox

Some notes before the tasks.

- [ ] Buy milk
- [/] Write report #work ⏫
  [clock::2024-05-01T09:00:00]
- [x] File taxes 📅 2024-04-15
- [ ] Call plumber #home 🔼 📅 2024-05-03"""

# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user config, env overrides and the config cache out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in (
        "CLOCK_KANBAN_CLOCK_COLUMN",
        "CLOCK_KANBAN_AUTO_CLOCK",
        "CLOCK_KANBAN_SHOW_COMPLETED",
        "CLOCK_KANBAN_DEBUG",
        "CLOCK_KANBAN_FOLDER_FILTER",
        "CLOCK_KANBAN_VAULT",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def config() -> BoardConfig:
    """Default four-column board: TODO, Working (clock), Stopped, Done."""
    return BoardConfig()


@pytest.fixture
def three_column_config() -> BoardConfig:
    """TODO / Working / Done board used by the move scenarios."""
    return BoardConfig(
        columns=[
            ColumnConfig(name="TODO", symbol=" ", color="#6b7280"),
            ColumnConfig(name="Working", symbol="/", color="#3b82f6"),
            ColumnConfig(name="Done", symbol="x", color="#10b981"),
        ],
        clock_column="Working",
    )


# ==============================================================================
# Clock Fixtures
# ==============================================================================


class FakeClock:
    """Returns queued datetimes in order, repeating the last one."""

    def __init__(self, *moments: datetime) -> None:
        self.moments = list(moments)

    def __call__(self) -> datetime:
        if len(self.moments) > 1:
            return self.moments.pop(0)
        return self.moments[0]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(
        datetime(2024, 5, 1, 9, 0, 0),
        datetime(2024, 5, 1, 10, 30, 0),
        datetime(2024, 5, 1, 11, 0, 0),
    )


# ==============================================================================
# Storage Fixtures
# ==============================================================================


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """In-memory storage holding a single inbox document."""
    return MemoryStorage({"inbox.md": INBOX})


@pytest.fixture
def vault(tmp_path) -> Path:
    """
    Provide a temporary vault of markdown documents.

    Creates:
    - inbox.md (four tasks, one clocked in)
    - projects/site.md (two tasks)
    - archive/old.md (one task)
    """
    root = tmp_path / "vault"
    (root / "projects").mkdir(parents=True)
    (root / "archive").mkdir()

    (root / "inbox.md").write_text(INBOX, encoding="utf-8")
    (root / "projects" / "site.md").write_text(
        "## Site\n\n- [ ] Draft landing page\n- [>] Pick a font\n", encoding="utf-8"
    )
    (root / "archive" / "old.md").write_text("- [ ] Forgotten task\n", encoding="utf-8")
    return root
