"""
Per-document mutation queue.

Every document mutation is a read -> edit -> write-whole-file cycle. Two
such cycles interleaving on the same document would let the later write
clobber the earlier one, and a single column move can queue two of them
back to back (interval edit, then status symbol edit).

The queue keeps, for each document path, the tail of a chain of asyncio
tasks. A new action awaits the current tail before it runs, so actions on
one path execute strictly in submission order. Actions on different paths
are not related and may overlap.

Example:
    >>> queue = DocumentMutationQueue()
    >>> first = queue.enqueue("inbox.md", close_interval_action)
    >>> second = queue.enqueue("inbox.md", rewrite_symbol_action)
    >>> await second  # first has completed by now, successfully or not
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[Any]]


class DocumentMutationQueue:
    """
    Serializes actions per document path.

    A failing action is logged and resolves to None; it never aborts the
    actions queued after it. There is no cancellation or timeout: once
    enqueued, an action runs to completion or failure.
    """

    def __init__(self) -> None:
        self._tails: dict[str, asyncio.Task[Any]] = {}

    def enqueue(self, path: str, action: Action) -> "asyncio.Task[Any]":
        """
        Schedule `action` after every action already queued for `path`.

        Must be called from a running event loop.

        Args:
            path: Document path the action mutates
            action: Zero-argument coroutine function

        Returns:
            Task resolving to the action's result, or None if it failed
        """
        previous = self._tails.get(path)
        task = asyncio.ensure_future(self._run_after(previous, path, action))
        self._tails[path] = task
        task.add_done_callback(lambda done: self._release(path, done))
        return task

    async def _run_after(
        self, previous: "asyncio.Task[Any] | None", path: str, action: Action
    ) -> Any:
        if previous is not None and not previous.done():
            # asyncio.wait never raises the awaited task's exception
            await asyncio.wait([previous])
        try:
            return await action()
        except Exception:
            logger.exception(f"Queued action for {path} failed")
            return None

    def _release(self, path: str, task: "asyncio.Task[Any]") -> None:
        if self._tails.get(path) is task:
            del self._tails[path]

    def pending(self, path: str) -> bool:
        """True while any action for `path` is queued or running."""
        return path in self._tails

    @property
    def pending_paths(self) -> list[str]:
        return list(self._tails)

    async def drain(self) -> None:
        """Wait until every queued action on every path has finished."""
        while self._tails:
            await asyncio.wait(list(self._tails.values()))
