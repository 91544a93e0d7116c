"""
Document storage protocol and filesystem implementation.

Storage deals in whole documents only: every mutation reads the full
text, edits its line-split form, and writes the joined text back. There
is no partial write primitive.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from clock_kanban.core.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


def split_lines(text: str) -> list[str]:
    """Split a document into lines. Joining the result restores the text."""
    return text.split(LINE_SEPARATOR)


def join_lines(lines: list[str]) -> str:
    return LINE_SEPARATOR.join(lines)


@runtime_checkable
class DocumentStorage(Protocol):
    """
    Protocol for document storage.

    Paths are storage-relative strings (e.g. "projects/inbox.md").
    """

    def resolve(self, path: str) -> Path | None:
        """
        Resolve a document path to a handle.

        Returns:
            The resolved path, or None if no such document exists
        """
        ...

    async def read(self, path: str) -> str:
        """
        Read a whole document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    async def write(self, path: str, text: str) -> None:
        """
        Replace a whole document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...


class FileSystemStorage:
    """
    Documents stored as UTF-8 files under a root directory.

    Blocking file I/O is pushed to a worker thread so the event loop only
    suspends at read/write boundaries.

    Example:
        >>> storage = FileSystemStorage(Path("~/notes").expanduser())
        >>> text = await storage.read("inbox.md")
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def resolve(self, path: str) -> Path | None:
        candidate = (self.root / path).resolve()
        root = self.root.resolve()
        if candidate != root and root not in candidate.parents:
            logger.warning(f"Refusing to resolve path outside storage root: {path}")
            return None
        if not candidate.is_file():
            return None
        return candidate

    def _require(self, path: str) -> Path:
        resolved = self.resolve(path)
        if resolved is None:
            raise DocumentNotFoundError(path)
        return resolved

    async def read(self, path: str) -> str:
        resolved = self._require(path)
        return await asyncio.to_thread(_read_text, resolved)

    async def write(self, path: str, text: str) -> None:
        resolved = self._require(path)
        await asyncio.to_thread(_write_text, resolved, text)
        logger.debug(f"Wrote {len(text)} chars to {path}")

    def iter_documents(self, pattern: str = "*.md") -> list[str]:
        """Storage-relative paths of all documents matching `pattern`, sorted."""
        root = self.root.resolve()
        return sorted(
            p.relative_to(root).as_posix() for p in root.rglob(pattern) if p.is_file()
        )


def _read_text(path: Path) -> str:
    # newline="" keeps "\r\n" endings; lines then carry a trailing "\r"
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write_text(path: Path, text: str) -> None:
    # newline="" writes the text back byte for byte, whatever its line endings
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


class MemoryStorage:
    """
    In-memory storage, mainly for tests and dry runs.

    Example:
        >>> storage = MemoryStorage({"inbox.md": "- [ ] Buy milk"})
        >>> storage.resolve("inbox.md")
        PosixPath('inbox.md')
    """

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(documents or {})
        self.writes: list[str] = []

    def resolve(self, path: str) -> Path | None:
        if path not in self.documents:
            return None
        return Path(path)

    async def read(self, path: str) -> str:
        # yield once so concurrent callers interleave like real I/O
        await asyncio.sleep(0)
        if path not in self.documents:
            raise DocumentNotFoundError(path)
        return self.documents[path]

    async def write(self, path: str, text: str) -> None:
        await asyncio.sleep(0)
        if path not in self.documents:
            raise DocumentNotFoundError(path)
        self.documents[path] = text
        self.writes.append(path)
