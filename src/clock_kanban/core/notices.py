"""
User-visible notices.

The core never prints. It hands short messages to a Notifier, and the
front-end decides how to show them. Non-essential notices ("refreshed",
"clocked in") are only passed on when debug_messages is enabled.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Sink for user-visible messages."""

    def notify(self, message: str, *, level: str = "info") -> None:
        """
        Show a message to the user.

        Args:
            message: Text to show
            level: "info", "warning" or "error"
        """
        ...


class LoggingNotifier:
    """Notifier that only writes to the log; the default when no UI is attached."""

    def notify(self, message: str, *, level: str = "info") -> None:
        if level == "error":
            logger.error(message)
        elif level == "warning":
            logger.warning(message)
        else:
            logger.info(message)


class RecordingNotifier:
    """Notifier that keeps messages in memory."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, message: str, *, level: str = "info") -> None:
        self.messages.append((level, message))

    @property
    def texts(self) -> list[str]:
        return [message for _, message in self.messages]


class Notices:
    """Wraps a Notifier and drops non-essential messages unless debugging."""

    def __init__(self, notifier: Notifier | None = None, debug_messages: bool = False) -> None:
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.debug_messages = debug_messages

    def info(self, message: str) -> None:
        self.notifier.notify(message, level="info")

    def debug(self, message: str) -> None:
        if self.debug_messages:
            self.notifier.notify(message, level="info")
        else:
            logger.debug(message)

    def warning(self, message: str) -> None:
        self.notifier.notify(message, level="warning")

    def error(self, message: str) -> None:
        self.notifier.notify(message, level="error")
