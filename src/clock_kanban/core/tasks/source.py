"""
Task source protocol and registry.

A task source is the external index the board is built from. It only has
to report raw records (status symbol, description, document path, line
hint); the board re-checks everything else against the live documents.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from clock_kanban.core.config.models import BoardConfig
from clock_kanban.core.tasks.models import RawTaskRecord


@runtime_checkable
class TaskSource(Protocol):
    """
    Protocol for task source implementations.

    Sources are responsible for:
    - Discovering task lines in their documents
    - Reporting each as a RawTaskRecord with a line number hint
    """

    def get_tasks(self) -> list[RawTaskRecord]:
        """
        Return every task the source knows about.

        Returns:
            Raw records in source order
        """
        ...

    @property
    def source_name(self) -> str:
        """
        Get the name of this source.

        Returns:
            Source name (e.g., 'markdown')
        """
        ...


SourceFactory = Callable[[Path, BoardConfig], TaskSource]

# Source registry
_sources: dict[str, SourceFactory] = {}


def register_source(name: str) -> Callable[[SourceFactory], SourceFactory]:
    """
    Decorator to register a task source implementation.

    Usage:
        @register_source('markdown')
        class MarkdownTaskSource:
            def get_tasks(self):
                ...

    Args:
        name: Source name (e.g., 'markdown')

    Returns:
        Decorator function
    """

    def decorator(factory: SourceFactory) -> SourceFactory:
        _sources[name] = factory
        return factory

    return decorator


def get_source(name: str, root: Path, config: BoardConfig) -> TaskSource:
    """
    Instantiate a registered task source.

    Args:
        name: Source name
        root: Vault root the source reads from
        config: Board configuration

    Returns:
        TaskSource instance

    Raises:
        ValueError: If no source is registered under `name`
    """
    factory = _sources.get(name)
    if factory is None:
        raise ValueError(
            f"Task source '{name}' not registered. Available sources: {', '.join(_sources)}"
        )
    return factory(root, config)


def list_sources() -> list[str]:
    """
    List all registered source names.

    Returns:
        List of source names
    """
    return list(_sources.keys())


def is_source_available(name: str) -> bool:
    """True if a source is registered under `name`."""
    return name in _sources
